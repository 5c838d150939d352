"""Card abstractions for the 500 deck."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Union

FACE_MIN: Final[int] = 4
FACE_MAX: Final[int] = 14
JACK: Final[int] = 11
QUEEN: Final[int] = 12
KING: Final[int] = 13
ACE: Final[int] = 14


class InvalidCard(ValueError):
    """Raised when a structured card value is outside the legal domain."""


class Suit(str, Enum):
    """Enumeration of the four suits, valued by their wire names."""

    SPADES = "Spades"
    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"
    HEARTS = "Hearts"

    @property
    def is_red(self) -> bool:
        return self in (Suit.DIAMONDS, Suit.HEARTS)


@dataclass(frozen=True, slots=True)
class Joker:
    """The single joker of the deck."""

    def __str__(self) -> str:
        return "Joker"


@dataclass(frozen=True, slots=True)
class SuitedCard:
    """A face card or numeral of a given suit.

    ``face`` uses the server's numbering: 4-10 for numerals, then 11-14 for
    jack, queen, king and ace. Twos and threes do not exist in this deck.
    """

    face: int
    suit: Suit

    def __post_init__(self) -> None:
        if isinstance(self.face, bool) or not isinstance(self.face, int):
            raise InvalidCard(f"card face must be an integer, got {self.face!r}")
        if not FACE_MIN <= self.face <= FACE_MAX:
            raise InvalidCard(f"card face {self.face} outside [{FACE_MIN}, {FACE_MAX}]")
        if not isinstance(self.suit, Suit):
            raise InvalidCard(f"card suit must be a Suit, got {self.suit!r}")


Card = Union[Joker, SuitedCard]

JOKER: Final[Joker] = Joker()


def is_card(value: object) -> bool:
    """Return ``True`` when ``value`` is one of the card variants."""

    return isinstance(value, (Joker, SuitedCard))


def iter_full_deck() -> Iterable[Card]:
    """Yield the 43 cards dealt by the server.

    Every suit runs from five to ace, the red fours are added, and the joker
    closes the deck.
    """

    for face in range(FACE_MIN + 1, FACE_MAX + 1):
        for suit in Suit:
            yield SuitedCard(face=face, suit=suit)
    yield SuitedCard(face=FACE_MIN, suit=Suit.DIAMONDS)
    yield SuitedCard(face=FACE_MIN, suit=Suit.HEARTS)
    yield JOKER


def full_deck() -> list[Card]:
    """Return the deck in a deterministic order."""

    return list(iter_full_deck())


__all__ = [
    "ACE",
    "Card",
    "FACE_MAX",
    "FACE_MIN",
    "InvalidCard",
    "JACK",
    "JOKER",
    "Joker",
    "KING",
    "QUEEN",
    "Suit",
    "SuitedCard",
    "full_deck",
    "is_card",
    "iter_full_deck",
]
