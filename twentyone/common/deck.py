"""
This module contains the Deck class, which represents a single 52-card deck,
together with the helpers used to build and shuffle one.

>>> deck = Deck()
>>> deck.size
52
>>> deck.deal()
[Card(Suit.HEARTS, Rank.ACE)]
>>> deck.size
51
"""

import random
from typing import Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from twentyone.common.card import Card, Rank, Suit

T = TypeVar("T")


class InsufficientCardsError(Exception):
    """Raised when a deal asks for more cards than the deck still holds."""

    def __init__(self, requested: int, remaining: int):
        super().__init__(
            f"Cannot deal {requested} card(s): only {remaining} remaining"
        )
        self.requested = requested
        self.remaining = remaining


def shuffle(sequence: Iterable[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly random permutation of ``sequence``.

    Fisher-Yates: walk i from the last index down to 1 and swap element i
    with a uniformly chosen element in [0, i]. The input is copied first and
    never modified.

    :param sequence: The items to permute.
    :param rng: Source of randomness exposing ``randint``. Defaults to the
        ``random`` module.
    :return: A new list holding the shuffled items.
    """
    rng = rng or random
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class Deck:
    """
    A class representing a deck of cards, consumed from the front.
    """

    # Precompute the ordered deck
    _default_deck = tuple(
        Card(suit, rank)
        for suit in [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]
        for rank in Rank
    )

    def __init__(self, cards: Union[Sequence[Card], None] = None):
        """
        Initialize a Deck instance.

        :param cards: Cards to populate the deck with, front first (optional).
                      If not provided, the ordered 52-card deck is used.
        >>> deck = Deck()
        >>> deck.size
        52
        """
        if cards is None:
            self._cards: List[Card] = self.initialize_default_deck()
        else:
            self._cards = list(cards)

    @classmethod
    def initialize_default_deck(cls) -> List[Card]:
        """
        Construct the ordered deck: every suit crossed with every rank.

        :return: A list of Card instances representing the default deck.
        >>> len(Deck.initialize_default_deck())
        52
        """
        return list(cls._default_deck)

    @property
    def cards(self) -> List[Card]:
        """A copy of the remaining cards, front first."""
        return list(self._cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> "Deck":
        """
        Shuffle the remaining cards in place.

        >>> deck = Deck()
        >>> original_order = deck.cards
        >>> _ = deck.shuffle()
        >>> set(deck.cards) == set(original_order)
        True
        """
        self._cards = shuffle(self._cards, rng)
        return self

    def deal(self, count: int = 1) -> List[Card]:
        """
        Remove and return the first ``count`` cards.

        :param count: Number of cards to deal.
        :return: The dealt cards, in deck order.
        :raises InsufficientCardsError: If fewer than ``count`` cards remain.
            The deck is left unchanged.
        >>> deck = Deck()
        >>> cards = deck.deal(5)
        >>> len(cards)
        5
        """
        if count < 0:
            raise ValueError(f"Cannot deal a negative number of cards: {count}")
        if count > len(self._cards):
            raise InsufficientCardsError(count, len(self._cards))

        dealt = self._cards[:count]
        self._cards = self._cards[count:]
        return dealt

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.

        :return: The size of the deck.
        """
        return len(self._cards)

    def is_empty(self) -> bool:
        """
        Check if the deck is empty.

        :return: True if the deck is empty, False otherwise.
        """
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the deck.

        :return: A string representation of the deck.
        """
        return f"Deck({[repr(card) for card in self._cards]})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the deck.

        :return: A string representation of the deck.
        >>> str(Deck())
        'Deck of 52 cards'
        """
        return f"Deck of {len(self._cards)} cards"


def create_deck(rng: Optional[random.Random] = None) -> Deck:
    """
    Build a fresh 52-card deck and return it shuffled.

    :param rng: Source of randomness; pass a seeded ``random.Random`` for
        reproducible rounds.
    :return: A shuffled Deck.
    """
    return Deck(shuffle(Deck.initialize_default_deck(), rng))
