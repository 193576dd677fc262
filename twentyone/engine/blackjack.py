"""
Blackjack engine implementation.

This module provides the BlackjackEngine class, which implements the RoundEngine
interface for single-deck, single-player blackjack.
"""

from typing import Any, Dict, Iterable, Optional, Union
import random

from twentyone.blackjack.rules import Rules
from twentyone.common.deck import Deck, create_deck
from twentyone.engine.base import RoundEngine
from twentyone.events import EngineEventType
from twentyone.state import (
    Outcome,
    RoundState,
    RoundStatus,
    RoundTransitionEngine,
    classify_result,
    score_hand,
)


class BlackjackEngine(RoundEngine):
    """
    Engine implementation for Blackjack.

    >>> engine = BlackjackEngine({"seed": 7})
    >>> state = engine.start_round()
    >>> len(state.player_hand), len(state.dealer_hand), len(state.remaining_deck)
    (2, 2, 48)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the blackjack engine.

        Args:
            config: Configuration options. ``seed`` makes shuffles
                reproducible; ``rules`` is a Rules instance or a dict of rule
                settings.
        """
        super().__init__(config)

        rules = self.config.get("rules", {})
        self.rules = rules if isinstance(rules, Rules) else Rules.from_dict(rules)

        seed = self.config.get("seed")
        self.rng = random.Random(seed) if seed is not None else random.Random()

    def new_deck(self) -> Deck:
        """
        Build and shuffle a fresh deck.

        Returns:
            A shuffled 52-card Deck
        """
        deck = create_deck(self.rng)

        self.event_bus.emit(
            EngineEventType.SHUFFLE,
            {"cards_remaining": deck.size},
        )

        return deck

    def start_round(self, deck: Optional[Deck] = None) -> RoundState:
        """
        Start a new round.

        Args:
            deck: Deck to deal from. A freshly shuffled deck is used when
                omitted; pass a prepared deck to replay a known order.

        Returns:
            The opening RoundState
        """
        if deck is None:
            deck = self.new_deck()
        return RoundTransitionEngine.start_round(deck)

    def score_hand(self, hand: Iterable[Any]) -> int:
        return score_hand(hand)

    def apply_hit(self, state: RoundState) -> RoundState:
        """
        Deal the player one more card.

        Args:
            state: Current round state

        Returns:
            The next RoundState
        """
        return RoundTransitionEngine.hit(state)

    def apply_stand(self, state: RoundState) -> RoundState:
        """
        Stand, let the dealer draw under the engine rules and settle the round.

        Args:
            state: Current round state

        Returns:
            The terminal RoundState
        """
        return RoundTransitionEngine.stand(state, self.rules)

    def classify_result(
        self, status: Union[RoundStatus, str]
    ) -> Optional[Outcome]:
        return classify_result(status)
