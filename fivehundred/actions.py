"""Outbound player actions and their construction from notation tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence, Union

from . import encoding
from .bids import Bid, is_bid
from .cards import Card, is_card

DISCARD_COUNT: Final[int] = 3


class RejectedAction(ValueError):
    """Raised when user input cannot be turned into a protocol action."""


@dataclass(frozen=True, slots=True)
class Poll:
    """Ask the server to resend the current state."""


@dataclass(frozen=True, slots=True)
class Join:
    """Ask to join the match on team ``team``."""

    team: int


@dataclass(frozen=True, slots=True)
class MakeBid:
    bid: Bid


@dataclass(frozen=True, slots=True)
class DiscardCards:
    """Put three cards from the hand and kitty back down."""

    cards: tuple[Card, ...]


@dataclass(frozen=True, slots=True)
class Quit:
    """Leave the match early."""


Action = Union[Poll, Join, MakeBid, DiscardCards, Quit]


def poll() -> Poll:
    return Poll()


def quit_match() -> Quit:
    return Quit()


def join(team: int) -> Join:
    """Return a join request for ``team``, passed through verbatim."""

    if isinstance(team, bool) or not isinstance(team, int):
        raise RejectedAction(f"team must be an integer, got {team!r}")
    return Join(team=team)


def make_bid(bid: Bid) -> MakeBid:
    """Return a bid action for an already-decoded ``bid``."""

    if not is_bid(bid):
        raise RejectedAction(f"not a bid: {bid!r}")
    return MakeBid(bid=bid)


def bid_from_token(token: str) -> MakeBid:
    """Decode a bid token picked by the user into a bid action."""

    try:
        bid = encoding.decode_bid(token)
    except ValueError as exc:
        raise RejectedAction(f"cannot bid {token!r}: {exc}") from exc
    return MakeBid(bid=bid)


def discard_cards(cards: Sequence[Card]) -> DiscardCards:
    """Return a discard action for exactly three distinct cards."""

    chosen = tuple(cards)
    if len(chosen) != DISCARD_COUNT:
        raise RejectedAction(f"must discard exactly {DISCARD_COUNT} cards, got {len(chosen)}")
    for card in chosen:
        if not is_card(card):
            raise RejectedAction(f"not a card: {card!r}")
    if len(set(chosen)) != len(chosen):
        raise RejectedAction("cannot discard the same card twice")
    return DiscardCards(cards=chosen)


def discard_from_tokens(tokens: Sequence[str]) -> DiscardCards:
    """Decode three card tokens picked by the user into a discard action."""

    cards: list[Card] = []
    for token in tokens:
        try:
            cards.append(encoding.decode_card(token))
        except ValueError as exc:
            raise RejectedAction(f"cannot discard {token!r}: {exc}") from exc
    return discard_cards(cards)


__all__ = [
    "Action",
    "DISCARD_COUNT",
    "DiscardCards",
    "Join",
    "MakeBid",
    "Poll",
    "Quit",
    "RejectedAction",
    "bid_from_token",
    "discard_cards",
    "discard_from_tokens",
    "join",
    "make_bid",
    "poll",
    "quit_match",
]
