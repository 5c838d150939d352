"""Compact token notation for cards and bids.

Cards render as a face glyph followed by a suit glyph (``"A♥"``, ``"10♠"``)
or the lone joker glyph ``"★"``. Bids render as ``"P"``, ``"M"``, ``"O"`` or a
trick count followed by a suit glyph or ``"NT"`` (``"6♠"``, ``"10NT"``).

Ten is the only two-character numeral in either grammar, so decoding sniffs
the width from the second character instead of parsing a general integer.
"""

from __future__ import annotations

from typing import Final

from .bids import (
    COUNT_MAX,
    COUNT_MIN,
    MIS,
    NO_TRUMPS,
    OPEN_MIS,
    PASS,
    Bid,
    InvalidBid,
    Mis,
    NoTrumps,
    OpenMis,
    Pass,
    Tricks,
)
from .cards import (
    ACE,
    FACE_MAX,
    FACE_MIN,
    JACK,
    JOKER,
    KING,
    QUEEN,
    Card,
    InvalidCard,
    Joker,
    Suit,
    SuitedCard,
)

JOKER_GLYPH: Final[str] = "★"
NO_TRUMPS_TOKEN: Final[str] = "NT"
PASS_TOKEN: Final[str] = "P"
MIS_TOKEN: Final[str] = "M"
OPEN_MIS_TOKEN: Final[str] = "O"

SUIT_TO_GLYPH: Final[dict[Suit, str]] = {
    Suit.SPADES: "♠",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "◆",
    Suit.HEARTS: "♥",
}
GLYPH_TO_SUIT: Final[dict[str, Suit]] = {glyph: suit for suit, glyph in SUIT_TO_GLYPH.items()}

COURT_GLYPHS: Final[dict[int, str]] = {JACK: "J", QUEEN: "Q", KING: "K", ACE: "A"}
FACE_TO_GLYPH: Final[dict[int, str]] = {
    **{face: str(face) for face in range(FACE_MIN, JACK)},
    **COURT_GLYPHS,
}
GLYPH_TO_FACE: Final[dict[str, int]] = {glyph: face for face, glyph in FACE_TO_GLYPH.items()}
TEXT_TO_COUNT: Final[dict[str, int]] = {str(count): count for count in range(COUNT_MIN, COUNT_MAX + 1)}

_ATOMIC_BIDS: Final[dict[str, Bid]] = {
    PASS_TOKEN: PASS,
    MIS_TOKEN: MIS,
    OPEN_MIS_TOKEN: OPEN_MIS,
}


class InvalidToken(ValueError):
    """Raised when a notation string matches neither the card nor bid grammar."""


def _numeral_width(token: str) -> int:
    return 2 if len(token) > 1 and token[1] == "0" else 1


def encode_card(card: Card) -> str:
    """Return the notation token for ``card``."""

    if isinstance(card, Joker):
        return JOKER_GLYPH
    if not isinstance(card, SuitedCard):
        raise InvalidCard(f"not a card: {card!r}")
    face = FACE_TO_GLYPH.get(card.face)
    if face is None:
        raise InvalidCard(f"card face {card.face} outside [{FACE_MIN}, {FACE_MAX}]")
    return face + SUIT_TO_GLYPH[card.suit]


def decode_card(token: str) -> Card:
    """Parse a card token produced by :func:`encode_card`."""

    if not isinstance(token, str) or not token:
        raise InvalidToken(f"invalid card token {token!r}")
    if token == JOKER_GLYPH:
        return JOKER

    width = _numeral_width(token)
    face_glyph, suit_glyph = token[:width], token[width:]
    face = GLYPH_TO_FACE.get(face_glyph)
    if face is None:
        raise InvalidToken(f"invalid card face {face_glyph!r} in {token!r}")
    suit = GLYPH_TO_SUIT.get(suit_glyph)
    if suit is None:
        raise InvalidToken(f"invalid suit {suit_glyph!r} in {token!r}")
    return SuitedCard(face=face, suit=suit)


def encode_bid(bid: Bid) -> str:
    """Return the notation token for ``bid``."""

    if isinstance(bid, Pass):
        return PASS_TOKEN
    if isinstance(bid, Mis):
        return MIS_TOKEN
    if isinstance(bid, OpenMis):
        return OPEN_MIS_TOKEN
    if not isinstance(bid, Tricks):
        raise InvalidBid(f"not a bid: {bid!r}")
    if not COUNT_MIN <= bid.count <= COUNT_MAX:
        raise InvalidBid(f"trick count {bid.count} outside [{COUNT_MIN}, {COUNT_MAX}]")
    if isinstance(bid.trump, NoTrumps):
        return f"{bid.count}{NO_TRUMPS_TOKEN}"
    return f"{bid.count}{SUIT_TO_GLYPH[bid.trump]}"


def decode_bid(token: str) -> Bid:
    """Parse a bid token produced by :func:`encode_bid`."""

    if not isinstance(token, str) or not token:
        raise InvalidToken(f"invalid bid token {token!r}")
    atomic = _ATOMIC_BIDS.get(token)
    if atomic is not None:
        return atomic

    width = _numeral_width(token)
    count_text, trump_text = token[:width], token[width:]
    count = TEXT_TO_COUNT.get(count_text)
    if count is None:
        raise InvalidToken(f"invalid trick count {count_text!r} in {token!r}")

    if trump_text == NO_TRUMPS_TOKEN:
        return Tricks(count, NO_TRUMPS)
    suit = GLYPH_TO_SUIT.get(trump_text)
    if suit is None:
        raise InvalidToken(f"invalid trump {trump_text!r} in {token!r}")
    return Tricks(count, suit)


def is_red_token(token: str) -> bool:
    """Return ``True`` when a card token ends with a red suit glyph."""

    suit = GLYPH_TO_SUIT.get(token[-1:])
    return suit is not None and suit.is_red


__all__ = [
    "GLYPH_TO_SUIT",
    "InvalidBid",
    "InvalidCard",
    "InvalidToken",
    "JOKER_GLYPH",
    "NO_TRUMPS_TOKEN",
    "SUIT_TO_GLYPH",
    "decode_bid",
    "decode_card",
    "encode_bid",
    "encode_card",
    "is_red_token",
]
