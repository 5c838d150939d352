"""Session state and history structures pushed by the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .bids import Bid
from .cards import Card


@dataclass(frozen=True, slots=True)
class PlayerJoined:
    """You or another player have just joined the lobby."""


@dataclass(frozen=True, slots=True)
class WaitingForYourBid:
    """Your turn to bid; ``options`` lists the bids available to you."""

    options: tuple[Bid, ...] = ()


@dataclass(frozen=True, slots=True)
class WaitingForTheirBid:
    """Another player is bidding."""


@dataclass(frozen=True, slots=True)
class WaitingForYourKitty:
    """You won the bid and must use the kitty."""


@dataclass(frozen=True, slots=True)
class WaitingForTheirKitty:
    """Another player won the bid and is using the kitty."""


@dataclass(frozen=True, slots=True)
class WaitingForYourPlay:
    """Your turn to play a card."""


@dataclass(frozen=True, slots=True)
class WaitingForTheirPlay:
    """Another player is playing a card."""


@dataclass(frozen=True, slots=True)
class Error:
    """The server rejected your last step.

    The reason normally travels in ``History.error``; older servers inline it.
    """

    reason: str | None = None


@dataclass(frozen=True, slots=True)
class Excluded:
    """You could not join the match."""

    reason: str | None = None


@dataclass(frozen=True, slots=True)
class MatchAborted:
    """The match ended unexpectedly."""

    reason: str | None = None


@dataclass(frozen=True, slots=True)
class UnknownState:
    """A state tag this client does not understand yet."""

    name: str


SessionState = Union[
    PlayerJoined,
    WaitingForYourBid,
    WaitingForTheirBid,
    WaitingForYourKitty,
    WaitingForTheirKitty,
    WaitingForYourPlay,
    WaitingForTheirPlay,
    Error,
    Excluded,
    MatchAborted,
    UnknownState,
]

STATE_TYPES: tuple[type, ...] = (
    PlayerJoined,
    WaitingForYourBid,
    WaitingForTheirBid,
    WaitingForYourKitty,
    WaitingForTheirKitty,
    WaitingForYourPlay,
    WaitingForTheirPlay,
    Error,
    Excluded,
    MatchAborted,
)


@dataclass(frozen=True, slots=True)
class LobbyHistory:
    player_count: int
    your_player_index: int


@dataclass(frozen=True, slots=True)
class BiddingHistory:
    """Bidding progress; ``bid_options`` is only sent to the current bidder."""

    current_bidder_index: int | None = None
    bids: tuple[Bid | None, ...] = ()
    bid_options: tuple[Bid, ...] | None = None


@dataclass(frozen=True, slots=True)
class WinningBidHistory:
    """The contract that won the auction.

    ``kitty`` is only sent to the winning bidder, and ``discarded`` only once
    the kitty has been used.
    """

    winning_bidder_index: int | None = None
    winning_bid: Bid | None = None
    kitty: tuple[Card, ...] | None = None
    discarded: tuple[Card, ...] | None = None


@dataclass(frozen=True, slots=True)
class GameHistory:
    hand: tuple[Card, ...] | None = None
    bidding_history: BiddingHistory | None = None
    winning_bid_history: WinningBidHistory | None = None


@dataclass(frozen=True, slots=True)
class MatchHistory:
    """Match-level results.

    Each ``past_games`` entry is (team 1 delta, team 1 total, team 2 delta,
    team 2 total).
    """

    past_games: tuple[tuple[int, int, int, int], ...] = ()
    winning_team_index: int | None = None
    match_aborted_reason: str | None = None


@dataclass(frozen=True, slots=True)
class History:
    """Background information attached to a snapshot.

    Every part is optional; absence means the part does not apply to the
    current phase.
    """

    lobby_history: LobbyHistory | None = None
    game_history: GameHistory | None = None
    excluded_reason: str | None = None
    match_history: MatchHistory | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One complete server-pushed description of the session."""

    state: SessionState
    history: History = field(default_factory=History)


__all__ = [
    "BiddingHistory",
    "Error",
    "Excluded",
    "GameHistory",
    "History",
    "LobbyHistory",
    "MatchAborted",
    "MatchHistory",
    "PlayerJoined",
    "STATE_TYPES",
    "SessionState",
    "Snapshot",
    "UnknownState",
    "WaitingForTheirBid",
    "WaitingForTheirKitty",
    "WaitingForTheirPlay",
    "WaitingForYourBid",
    "WaitingForYourKitty",
    "WaitingForYourPlay",
    "WinningBidHistory",
]
