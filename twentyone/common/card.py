"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: hearts, diamonds, clubs, and spades.

- `Rank`: An enum representing the thirteen ranks of a standard deck of playing
cards: Ace, Two through Ten, Jack, Queen and King. Each rank knows the value it
contributes to a blackjack total.

- `Card`: An immutable playing card. A card has a suit, a rank and a value that
is fixed when the card is created. Cards convert to and from the dictionary
shape used on the wire.

This module is part of the `twentyone` package.
"""

from enum import Enum, unique
from typing import Any, Dict


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck.

    The enum value is the rank symbol used on the wire.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def rank_value(self) -> int:
        """The value of the rank, used for scoring. Aces start at 11."""
        if self is Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    def __str__(self) -> str:
        return self.value


class Card:
    """
    Class representing a playing card. Cards are immutable once created.

    >>> card = Card(Suit.HEARTS, Rank.TWO)
    >>> print(card)
    2 of hearts
    >>> card.value
    2
    """

    __slots__ = ("_suit", "_rank", "_value")

    def __init__(self, suit: Suit, rank: Rank):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit!r}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank!r}")
        object.__setattr__(self, "_suit", suit)
        object.__setattr__(self, "_rank", rank)
        object.__setattr__(self, "_value", rank.rank_value)

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def value(self) -> int:
        """Value assigned at creation. Soft-ace reduction never changes it."""
        return self._value

    @property
    def is_ace(self) -> bool:
        return self._rank is Rank.ACE

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the card to its wire representation.

        :return: A dictionary with ``suit``, ``rank`` and ``value`` keys.
        """
        return {"suit": self._suit.value, "rank": self._rank.value, "value": self._value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        """
        Rebuild a card from its wire representation.

        :param data: A dictionary produced by :meth:`to_dict`.
        :return: The equivalent Card.
        :raises ValueError: If the suit or rank is unknown, or the stored value
            disagrees with the rank table.
        """
        try:
            card = cls(Suit(data["suit"]), Rank(str(data["rank"])))
        except KeyError as exc:
            raise ValueError(f"Card payload is missing {exc}") from exc

        if "value" in data and data["value"] != card.value:
            raise ValueError(
                f"Card {card} carries value {data['value']}, expected {card.value}"
            )
        return card

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self._rank == other._rank and self._suit == other._suit
        return NotImplemented

    def __hash__(self):
        return hash((self._suit, self._rank))

    def __reduce__(self):
        return (type(self), (self._suit, self._rank))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self._suit.name}, Rank.{self._rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self._rank} of {self._suit}"
