"""
Immutable state models for the twentyone round engine.

This module provides the dataclass that represents one round of blackjack,
along with the scoring and outcome helpers that every transition relies on.
Round states are never modified in place; transition functions create new
instances instead, so two snapshots never share a hand or a deck.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import time
import uuid

from twentyone.blackjack.constants import BLACKJACK
from twentyone.common.card import Card, Rank


class RoundStatus(Enum):
    """
    Possible statuses of a round. The value is the wire representation.
    """

    ACTIVE = "active"
    PLAYER_BUST = "player_bust"
    DEALER_BUST = "dealer_bust"
    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    TIE = "tie"

    @property
    def is_terminal(self) -> bool:
        return self is not RoundStatus.ACTIVE


class Outcome(Enum):
    """
    Three-way result of a finished round, from the player's point of view.
    """

    WIN = "win"
    LOSS = "loss"
    TIE = "tie"


_OUTCOMES = {
    RoundStatus.PLAYER_BUST: Outcome.LOSS,
    RoundStatus.DEALER_WIN: Outcome.LOSS,
    RoundStatus.DEALER_BUST: Outcome.WIN,
    RoundStatus.PLAYER_WIN: Outcome.WIN,
    RoundStatus.TIE: Outcome.TIE,
    RoundStatus.ACTIVE: None,
}


def _is_ace(card: Any) -> bool:
    rank = card["rank"] if isinstance(card, dict) else card.rank
    return rank is Rank.ACE or rank == Rank.ACE.value


def _card_value(card: Any) -> int:
    if isinstance(card, dict):
        if "value" in card:
            return card["value"]
        return Rank(str(card["rank"])).rank_value
    return card.value


def _flag(data: Dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def score_hand(hand: Iterable[Any]) -> int:
    """
    Calculate the blackjack total of a hand.

    Card values are summed as assigned (aces at 11). While the total is over
    21 and an ace is still counted at 11, one ace is dropped to 1. A hand
    that is still over 21 once every ace counts as 1 stays bust.

    Args:
        hand: Cards, or card dictionaries in wire shape

    Returns:
        The hand total
    """
    total = 0
    aces = 0
    for card in hand:
        total += _card_value(card)
        if _is_ace(card):
            aces += 1

    while total > BLACKJACK and aces:
        total -= 10
        aces -= 1

    return total


def classify_result(status: Union[RoundStatus, str]) -> Optional[Outcome]:
    """
    Map a round status onto a win/loss/tie outcome.

    Args:
        status: A RoundStatus or its string value

    Returns:
        The outcome, or None while the round is still active

    Raises:
        ValueError: If the status is not recognised
    """
    return _OUTCOMES[RoundStatus(status)]


@dataclass(frozen=True)
class RoundState:
    """
    Immutable snapshot of one blackjack round.

    Scores are not stored; they are recomputed from the hands on access so
    they can never drift from the cards that produced them.

    Attributes:
        id: Unique identifier for this round
        player_hand: Cards held by the player, in the order received
        dealer_hand: Cards held by the dealer, in the order received
        is_player_turn: Whether the player may still act
        is_game_over: Whether the round has reached a terminal status
        status: Current status of the round
        remaining_deck: Cards left for further deals, front first
        timestamp: Time when this snapshot was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    player_hand: Tuple[Card, ...] = ()
    dealer_hand: Tuple[Card, ...] = ()
    is_player_turn: bool = True
    is_game_over: bool = False
    status: RoundStatus = RoundStatus.ACTIVE
    remaining_deck: Tuple[Card, ...] = ()
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        # Normalise lists into tuples so no caller can mutate a snapshot
        for name in ("player_hand", "dealer_hand", "remaining_deck"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        if not isinstance(self.status, RoundStatus):
            object.__setattr__(self, "status", RoundStatus(self.status))

    @property
    def player_score(self) -> int:
        """Score of the player's hand."""
        return score_hand(self.player_hand)

    @property
    def dealer_score(self) -> int:
        """Score of the dealer's hand."""
        return score_hand(self.dealer_hand)

    @property
    def outcome(self) -> Optional[Outcome]:
        """Win/loss/tie for the player, or None while active."""
        return classify_result(self.status)

    def to_dict(self, include_deck: bool = False) -> Dict[str, Any]:
        """
        Convert the round state to its wire representation.

        Args:
            include_deck: Also serialise the remaining deck, for collaborators
                that need to resume the round later

        Returns:
            Dictionary in the shape shared with API and storage layers
        """
        result = {
            "gameId": self.id,
            "playerHand": [card.to_dict() for card in self.player_hand],
            "dealerHand": [card.to_dict() for card in self.dealer_hand],
            "playerScore": self.player_score,
            "dealerScore": self.dealer_score,
            "isPlayerTurn": self.is_player_turn,
            "isGameOver": self.is_game_over,
            "status": self.status.value,
        }

        if include_deck:
            result["remainingDeck"] = [card.to_dict() for card in self.remaining_deck]

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundState":
        """
        Restore a round state from its wire representation.

        Args:
            data: Dictionary produced by :meth:`to_dict`

        Returns:
            The equivalent RoundState

        Raises:
            ValueError: If a field is missing or malformed, or if the stored
                scores or game-over flag disagree with the rest of the round
        """
        try:
            status = RoundStatus(data["status"])
            is_game_over = _flag(data, "isGameOver")
            if is_game_over != status.is_terminal:
                raise ValueError(
                    f"isGameOver {is_game_over} contradicts status {status.value}"
                )
            state = cls(
                player_hand=tuple(Card.from_dict(c) for c in data["playerHand"]),
                dealer_hand=tuple(Card.from_dict(c) for c in data["dealerHand"]),
                is_player_turn=_flag(data, "isPlayerTurn"),
                is_game_over=is_game_over,
                status=status,
                remaining_deck=tuple(
                    Card.from_dict(c) for c in data.get("remainingDeck", ())
                ),
                **({"id": data["gameId"]} if "gameId" in data else {}),
            )
        except KeyError as exc:
            raise ValueError(f"Round payload is missing {exc}") from exc

        for key, actual in (
            ("playerScore", state.player_score),
            ("dealerScore", state.dealer_score),
        ):
            if key in data and data[key] != actual:
                raise ValueError(
                    f"{key} {data[key]} does not match the hand total {actual}"
                )

        return state
