from typing import Any, Dict

from twentyone.blackjack.constants import BLACKJACK, DEFAULT_STAND_THRESHOLD


class Rules:
    """Table rules that the round engine plays by."""

    def __init__(self, stand_threshold: int = DEFAULT_STAND_THRESHOLD):
        if not 1 <= stand_threshold <= BLACKJACK:
            raise ValueError(
                f"stand_threshold must be between 1 and {BLACKJACK}: {stand_threshold}"
            )
        self.stand_threshold = stand_threshold

    def to_dict(self) -> dict:
        """Convert rules to a dictionary for serialization."""
        return {"stand_threshold": self.stand_threshold}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rules":
        """Build rules from a config dictionary, ignoring unknown keys."""
        if "stand_threshold" in data:
            return cls(stand_threshold=data["stand_threshold"])
        return cls()

    def should_dealer_hit(self, score: int) -> bool:
        """Determine if the dealer should draw another card."""
        return score < self.stand_threshold

    def __eq__(self, other):
        if isinstance(other, Rules):
            return self.stand_threshold == other.stand_threshold
        return NotImplemented

    def __repr__(self) -> str:
        return f"Rules(stand_threshold={self.stand_threshold})"
