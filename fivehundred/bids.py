"""Bid abstractions and the bidding ladder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterator, Union

from .cards import Suit

COUNT_MIN: Final[int] = 6
COUNT_MAX: Final[int] = 10

# Trump order within one trick count, lowest first.
TRUMP_ORDER: Final[tuple[Suit, ...]] = (Suit.SPADES, Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS)


class InvalidBid(ValueError):
    """Raised when a structured bid value is outside the legal domain."""


@dataclass(frozen=True, slots=True)
class NoTrumps:
    """Trump marker for a no-trumps contract."""

    def __str__(self) -> str:
        return "No trumps"


NO_TRUMPS: Final[NoTrumps] = NoTrumps()

Trump = Union[Suit, NoTrumps]


@dataclass(frozen=True, slots=True)
class Pass:
    """Decline to bid."""


@dataclass(frozen=True, slots=True)
class Mis:
    """Misère: take no tricks."""


@dataclass(frozen=True, slots=True)
class OpenMis:
    """Open misère: take no tricks with the hand laid face up."""


@dataclass(frozen=True, slots=True)
class Tricks:
    """Contract to take ``count`` tricks with ``trump`` as trumps."""

    count: int
    trump: Trump

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise InvalidBid(f"trick count must be an integer, got {self.count!r}")
        if not COUNT_MIN <= self.count <= COUNT_MAX:
            raise InvalidBid(f"trick count {self.count} outside [{COUNT_MIN}, {COUNT_MAX}]")
        if not isinstance(self.trump, (Suit, NoTrumps)):
            raise InvalidBid(f"trump must be a Suit or NoTrumps, got {self.trump!r}")

    @property
    def is_no_trumps(self) -> bool:
        return isinstance(self.trump, NoTrumps)


Bid = Union[Pass, Mis, OpenMis, Tricks]

PASS: Final[Pass] = Pass()
MIS: Final[Mis] = Mis()
OPEN_MIS: Final[OpenMis] = OpenMis()


def is_bid(value: object) -> bool:
    """Return ``True`` when ``value`` is one of the bid variants."""

    return isinstance(value, (Pass, Mis, OpenMis, Tricks))


def next_bid(bid: Bid) -> Bid | None:
    """Return the bid ranked immediately above ``bid``.

    Misère slots in between 8♣ and 8◆, open misère sits above 10NT and
    nothing outranks it.
    """

    if isinstance(bid, Pass):
        return Tricks(COUNT_MIN, Suit.SPADES)
    if isinstance(bid, Mis):
        return Tricks(8, Suit.DIAMONDS)
    if isinstance(bid, OpenMis):
        return None
    if not isinstance(bid, Tricks):
        raise InvalidBid(f"not a bid: {bid!r}")

    if bid == Tricks(8, Suit.CLUBS):
        return MIS
    if bid.is_no_trumps:
        if bid.count == COUNT_MAX:
            return OPEN_MIS
        return Tricks(bid.count + 1, Suit.SPADES)
    position = TRUMP_ORDER.index(bid.trump)
    if position + 1 < len(TRUMP_ORDER):
        return Tricks(bid.count, TRUMP_ORDER[position + 1])
    return Tricks(bid.count, NO_TRUMPS)


def iter_bid_ladder() -> Iterator[Bid]:
    """Yield every bid from pass up to open misère in rank order."""

    bid: Bid | None = PASS
    while bid is not None:
        yield bid
        bid = next_bid(bid)


def bid_ladder() -> list[Bid]:
    """Return the full bid ladder."""

    return list(iter_bid_ladder())


__all__ = [
    "Bid",
    "COUNT_MAX",
    "COUNT_MIN",
    "InvalidBid",
    "MIS",
    "Mis",
    "NO_TRUMPS",
    "NoTrumps",
    "OPEN_MIS",
    "OpenMis",
    "PASS",
    "Pass",
    "TRUMP_ORDER",
    "Tricks",
    "Trump",
    "bid_ladder",
    "is_bid",
    "iter_bid_ladder",
    "next_bid",
]
