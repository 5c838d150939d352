"""Tests covering bid values and the bidding ladder."""

from __future__ import annotations

import pytest

from fivehundred import encoding
from fivehundred.bids import (
    MIS,
    NO_TRUMPS,
    OPEN_MIS,
    PASS,
    InvalidBid,
    Tricks,
    bid_ladder,
    next_bid,
)
from fivehundred.cards import Suit


def test_bid_ladder_order() -> None:
    tokens = [encoding.encode_bid(bid) for bid in bid_ladder()]

    assert tokens[:7] == ["P", "6♠", "6♣", "6◆", "6♥", "6NT", "7♠"]
    assert tokens[tokens.index("8♣") + 1] == "M"
    assert tokens[tokens.index("M") + 1] == "8◆"
    assert tokens[-2:] == ["10NT", "O"]
    assert len(tokens) == 28
    assert len(set(tokens)) == 28


@pytest.mark.parametrize(
    ("bid", "expected"),
    [
        (PASS, Tricks(6, Suit.SPADES)),
        (Tricks(6, Suit.HEARTS), Tricks(6, NO_TRUMPS)),
        (Tricks(6, NO_TRUMPS), Tricks(7, Suit.SPADES)),
        (Tricks(8, Suit.CLUBS), MIS),
        (MIS, Tricks(8, Suit.DIAMONDS)),
        (Tricks(10, NO_TRUMPS), OPEN_MIS),
        (OPEN_MIS, None),
    ],
)
def test_next_bid(bid: object, expected: object) -> None:
    assert next_bid(bid) == expected


@pytest.mark.parametrize("count", [5, 11, 0])
def test_tricks_rejects_counts_outside_range(count: int) -> None:
    with pytest.raises(InvalidBid):
        Tricks(count, Suit.SPADES)


def test_tricks_rejects_unknown_trump() -> None:
    with pytest.raises(InvalidBid):
        Tricks(6, "NT")  # type: ignore[arg-type]


def test_next_bid_rejects_non_bids() -> None:
    with pytest.raises(InvalidBid):
        next_bid("P")  # type: ignore[arg-type]
