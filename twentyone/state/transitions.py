"""
State transition functions for the twentyone engine.

This module provides pure functions for moving a round from one state to the
next. The input state is never modified: every transition copies the deck
and the hand it touches and returns a new RoundState, or raises before
anything has been built.
"""

from dataclasses import replace
from typing import Any, Dict, Optional

from twentyone.blackjack.constants import BLACKJACK
from twentyone.blackjack.rules import Rules
from twentyone.common.deck import Deck
from twentyone.events import EventBus, EngineEventType
from twentyone.state.models import RoundState, RoundStatus, score_hand


class InvalidActionError(Exception):
    """Raised when an action is requested on a round that is already over."""

    def __init__(self, action: str, status: RoundStatus):
        super().__init__(
            f"Cannot {action}: round is over with status {status.value}"
        )
        self.action = action
        self.status = status


def _emit(event_type: EngineEventType, data: Dict[str, Any]) -> None:
    EventBus.get_instance().emit(event_type, data)


class RoundTransitionEngine:
    """
    Pure functions for round transitions.

    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def start_round(deck: Deck) -> RoundState:
        """
        Deal the opening hands and create the first snapshot of a round.

        The player receives the first two cards and the dealer the next two.

        Args:
            deck: A shuffled deck. It is consumed by the deal, or left
                untouched if it holds fewer than four cards.

        Returns:
            An active round with the player to act
        """
        opening = deck.deal(4)
        player_hand = tuple(opening[:2])
        dealer_hand = tuple(opening[2:])

        state = RoundState(
            player_hand=player_hand,
            dealer_hand=dealer_hand,
            is_player_turn=True,
            is_game_over=False,
            status=RoundStatus.ACTIVE,
            remaining_deck=tuple(deck.cards),
        )

        _emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": state.id,
                "player_score": state.player_score,
                "dealer_score": state.dealer_score,
                "cards_remaining": len(state.remaining_deck),
                "timestamp": state.timestamp,
            },
        )

        return state

    @staticmethod
    def hit(state: RoundState) -> RoundState:
        """
        Deal one card to the player.

        Args:
            state: Current round state

        Returns:
            New round state; ``player_bust`` if the player went over 21

        Raises:
            InvalidActionError: If the round is already over
            InsufficientCardsError: If the deck is empty
        """
        if state.is_game_over:
            raise InvalidActionError("hit", state.status)

        deck = Deck(state.remaining_deck)
        card = deck.deal(1)[0]
        player_hand = state.player_hand + (card,)

        if score_hand(player_hand) > BLACKJACK:
            new_state = replace(
                state,
                player_hand=player_hand,
                remaining_deck=tuple(deck.cards),
                is_game_over=True,
                status=RoundStatus.PLAYER_BUST,
            )
        else:
            new_state = replace(
                state,
                player_hand=player_hand,
                remaining_deck=tuple(deck.cards),
                is_game_over=False,
                status=RoundStatus.ACTIVE,
            )

        _emit(
            EngineEventType.CARD_DEALT,
            {
                "game_id": state.id,
                "to_dealer": False,
                "card": card.to_dict(),
                "timestamp": new_state.timestamp,
            },
        )
        _emit(
            EngineEventType.PLAYER_ACTION,
            {
                "game_id": state.id,
                "action": "HIT",
                "player_score": new_state.player_score,
                "timestamp": new_state.timestamp,
            },
        )

        if new_state.status is RoundStatus.PLAYER_BUST:
            _emit(
                EngineEventType.HAND_BUSTED,
                {
                    "game_id": state.id,
                    "player_score": new_state.player_score,
                    "timestamp": new_state.timestamp,
                },
            )
            RoundTransitionEngine._round_ended(new_state)

        return new_state

    @staticmethod
    def stand(state: RoundState, rules: Optional[Rules] = None) -> RoundState:
        """
        End the player's turn, play out the dealer and settle the round.

        The dealer draws for as long as ``rules.should_dealer_hit`` allows. The
        final scores are compared in this order: dealer bust, dealer ahead,
        player ahead, tie.

        Args:
            state: Current round state
            rules: Table rules for the dealer; defaults to standing on 17

        Returns:
            New, terminal round state

        Raises:
            InvalidActionError: If the round is already over
            InsufficientCardsError: If the deck runs out while the dealer draws
        """
        if state.is_game_over:
            raise InvalidActionError("stand", state.status)

        rules = rules or Rules()
        deck = Deck(state.remaining_deck)
        dealer_hand = state.dealer_hand
        drawn = []

        while rules.should_dealer_hit(score_hand(dealer_hand)):
            card = deck.deal(1)[0]
            dealer_hand = dealer_hand + (card,)
            drawn.append(card)

        player_score = score_hand(state.player_hand)
        dealer_score = score_hand(dealer_hand)

        if dealer_score > BLACKJACK:
            status = RoundStatus.DEALER_BUST
        elif dealer_score > player_score:
            status = RoundStatus.DEALER_WIN
        elif player_score > dealer_score:
            status = RoundStatus.PLAYER_WIN
        else:
            status = RoundStatus.TIE

        new_state = replace(
            state,
            dealer_hand=dealer_hand,
            remaining_deck=tuple(deck.cards),
            is_player_turn=False,
            is_game_over=True,
            status=status,
        )

        _emit(
            EngineEventType.PLAYER_ACTION,
            {
                "game_id": state.id,
                "action": "STAND",
                "player_score": player_score,
                "timestamp": new_state.timestamp,
            },
        )
        for card in drawn:
            _emit(
                EngineEventType.DEALER_ACTION,
                {
                    "game_id": state.id,
                    "action": "HIT",
                    "card": card.to_dict(),
                    "timestamp": new_state.timestamp,
                },
            )
        _emit(
            EngineEventType.DEALER_ACTION,
            {
                "game_id": state.id,
                "action": "STAND",
                "dealer_score": dealer_score,
                "timestamp": new_state.timestamp,
            },
        )
        RoundTransitionEngine._round_ended(new_state)

        return new_state

    @staticmethod
    def _round_ended(state: RoundState) -> None:
        _emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "status": state.status.value,
                "player_score": state.player_score,
                "dealer_score": state.dealer_score,
                "timestamp": state.timestamp,
            },
        )
