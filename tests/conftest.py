"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the whole suite: a fresh event
bus per test and helpers for building decks in a known order.
"""

import pytest

from twentyone.common.card import Card, Rank, Suit
from twentyone.common.deck import Deck
from twentyone.events import EventBus
from twentyone.state import RoundTransitionEngine


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


_SUIT_CYCLE = [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS]


def _build_cards(ranks, offset=0):
    """Turn rank symbols into cards, cycling suits so repeats stay distinct."""
    return [
        Card(_SUIT_CYCLE[(i + offset) % len(_SUIT_CYCLE)], Rank(rank))
        for i, rank in enumerate(ranks)
    ]


@pytest.fixture
def make_cards():
    """Factory: make_cards("A", "K") -> [A of spades, K of hearts]."""

    def factory(*ranks, offset=0):
        return _build_cards(ranks, offset)

    return factory


@pytest.fixture
def stacked_deck():
    """
    Factory for a deck that deals the player's two cards, then the dealer's
    two cards, then ``rest`` in order.
    """

    def factory(player, dealer, rest=()):
        return Deck(
            _build_cards(player, 0)
            + _build_cards(dealer, 2)
            + _build_cards(rest, 1)
        )

    return factory


@pytest.fixture
def deal_round(stacked_deck):
    """Factory for an opening RoundState dealt from a stacked deck."""

    def factory(player, dealer, rest=()):
        return RoundTransitionEngine.start_round(stacked_deck(player, dealer, rest))

    return factory
