"""Project server snapshots into display-ready facts.

:func:`project` is pure: the only information carried from one snapshot to
the next is the caller's :class:`SelfSeat`, which is replaced whenever a
snapshot carries lobby history and kept otherwise. Missing or undecodable
parts of a snapshot only blank their own field of the projection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Final, Mapping, Sequence, TypeVar

from . import encoding, protocol
from .bids import iter_bid_ladder
from .cards import Card
from .scoreboard import ScoreRow, Scoreboard
from .state import (
    Error,
    Excluded,
    History,
    LobbyHistory,
    MatchAborted,
    PlayerJoined,
    SessionState,
    Snapshot,
    WaitingForTheirBid,
    WaitingForTheirKitty,
    WaitingForTheirPlay,
    WaitingForYourBid,
    WaitingForYourKitty,
    WaitingForYourPlay,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEAT_SLOTS: Final[tuple[str, ...]] = ("bottom", "left", "top", "right")

WAITING_FOR_PLAYERS: Final[str] = "Waiting for other players to join"
MAKE_YOUR_BID: Final[str] = "Make your bid"
USE_THE_KITTY: Final[str] = "Use the kitty"
WAITING_FOR_PLAY: Final[str] = "Waiting for player to play"

_STAGES: Final[dict[type, tuple[str, bool]]] = {
    PlayerJoined: ("Lobby", False),
    WaitingForYourBid: ("Bidding", False),
    WaitingForTheirBid: ("Bidding", False),
    WaitingForYourKitty: ("Waiting for kitty", False),
    WaitingForTheirKitty: ("Waiting for kitty", False),
    WaitingForYourPlay: ("Playing", False),
    WaitingForTheirPlay: ("Playing", False),
    Error: ("Error", True),
    Excluded: ("Excluded", True),
    MatchAborted: ("Aborted", True),
}


@dataclass(frozen=True, slots=True)
class ProjectionConfig:
    """Presentation settings for seat labels."""

    seat_slots: tuple[str, ...] = SEAT_SLOTS
    player_label: str = "Player {number}"

    def slot_name(self, slot: int) -> str:
        if slot < len(self.seat_slots):
            return self.seat_slots[slot]
        return f"seat {slot}"


DEFAULT_CONFIG: Final[ProjectionConfig] = ProjectionConfig()


@dataclass(frozen=True, slots=True)
class SelfSeat:
    """Which seat this client occupies, out of how many."""

    index: int
    player_count: int

    def __post_init__(self) -> None:
        if self.player_count <= 0:
            raise ValueError("player_count must be positive")
        if not 0 <= self.index < self.player_count:
            raise ValueError(f"seat {self.index} out of range for {self.player_count} player(s)")

    @classmethod
    def from_lobby(cls, lobby: LobbyHistory) -> "SelfSeat":
        return cls(index=lobby.your_player_index, player_count=lobby.player_count)

    def slot_for(self, seat_index: int) -> int:
        """Return the display slot of ``seat_index``; this seat is always slot 0."""

        return (seat_index - self.index + self.player_count) % self.player_count


@dataclass(frozen=True, slots=True)
class SeatLabel:
    """How one player is shown around the table."""

    seat_index: int
    slot_name: str
    name: str
    is_self: bool
    is_bold: bool
    last_bid: str | None = None


@dataclass(frozen=True, slots=True)
class Projection:
    """Everything a renderer needs from one snapshot.

    ``seat_labels`` is keyed by display slot; ``visible_hand`` lists the hand
    in dealt order followed by any kitty cards.
    """

    stage_label: str = ""
    stage_alert: bool = False
    info_message: str = ""
    info_alert: bool = False
    seat_labels: Mapping[int, SeatLabel] = field(default_factory=lambda: MappingProxyType({}))
    visible_hand: tuple[str, ...] = ()
    legal_bid_tokens: frozenset[str] = frozenset()
    winning_bid: str | None = None
    discarded: tuple[str, ...] = ()
    scores: tuple[ScoreRow, ...] = ()

    @property
    def is_bidding_turn(self) -> bool:
        return bool(self.legal_bid_tokens)


def _guarded(name: str, compute: Callable[[], T], default: T) -> T:
    """Return ``compute()``, or ``default`` when a value fails to encode."""

    try:
        return compute()
    except ValueError as exc:
        logger.warning("Cannot project %s: %s", name, exc)
        return default


def stage_of(state: SessionState) -> tuple[str, bool]:
    """Return the stage label for ``state`` and whether it is an alert."""

    return _STAGES.get(type(state), ("", False))


def _player_number(index: int | None) -> str | None:
    return None if index is None else str(index + 1)


def info_of(state: SessionState, history: History) -> tuple[str, bool]:
    """Return the info message for a snapshot and whether it is an alert.

    A history error takes precedence over everything the state would say.
    """

    if history.error is not None:
        return history.error, True

    game = history.game_history
    if isinstance(state, PlayerJoined):
        return WAITING_FOR_PLAYERS, False
    if isinstance(state, WaitingForYourBid):
        return MAKE_YOUR_BID, False
    if isinstance(state, WaitingForTheirBid):
        bidding = game.bidding_history if game else None
        number = _player_number(bidding.current_bidder_index if bidding else None)
        if number is None:
            return "Waiting for player to bid", False
        return f"Waiting for player {number} to bid", False
    if isinstance(state, WaitingForYourKitty):
        return USE_THE_KITTY, False
    if isinstance(state, WaitingForTheirKitty):
        winning = game.winning_bid_history if game else None
        number = _player_number(winning.winning_bidder_index if winning else None)
        if number is None:
            return "Waiting for player to use the kitty", False
        return f"Waiting for player {number} to use the kitty", False
    if isinstance(state, Excluded):
        return history.excluded_reason or state.reason or "", True
    if isinstance(state, MatchAborted):
        match = history.match_history
        reason = match.match_aborted_reason if match else None
        return reason or state.reason or "", True
    if isinstance(state, Error):
        return state.reason or "", True
    return WAITING_FOR_PLAY, False


def seat_labels_for(
    seat: SelfSeat | None,
    history: History,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> dict[int, SeatLabel]:
    """Label every seat by its self-relative display slot."""

    if seat is None:
        return {}

    game = history.game_history
    bids: Sequence[Any] = ()
    if game and game.bidding_history:
        bids = game.bidding_history.bids

    labels: dict[int, SeatLabel] = {}
    for seat_index in range(seat.player_count):
        slot = seat.slot_for(seat_index)
        is_self = seat_index == seat.index
        last_bid = None
        if seat_index < len(bids) and bids[seat_index] is not None:
            last_bid = _guarded("last bid", lambda: encoding.encode_bid(bids[seat_index]), None)
        labels[slot] = SeatLabel(
            seat_index=seat_index,
            slot_name=config.slot_name(slot),
            name=config.player_label.format(number=seat_index + 1),
            is_self=is_self,
            is_bold=is_self,
            last_bid=last_bid,
        )
    return labels


def _card_tokens(cards: Sequence[Card]) -> tuple[str, ...]:
    return tuple(encoding.encode_card(card) for card in cards)


def visible_hand_of(history: History) -> tuple[str, ...]:
    """Return the hand tokens in dealt order followed by the kitty."""

    game = history.game_history
    if game is None or game.hand is None:
        return ()
    cards = list(game.hand)
    winning = game.winning_bid_history
    if winning is not None and winning.kitty:
        cards.extend(winning.kitty)
    return _card_tokens(cards)


def legal_bid_tokens_of(state: SessionState, history: History) -> frozenset[str]:
    """Return the tokens of the bids currently open to this player."""

    game = history.game_history
    options = None
    if game is not None and game.bidding_history is not None:
        options = game.bidding_history.bid_options
    if options is None and isinstance(state, WaitingForYourBid):
        options = state.options
    if not options:
        return frozenset()
    return frozenset(encoding.encode_bid(bid) for bid in options)


def _winning_bid(history: History) -> str | None:
    game = history.game_history
    winning = game.winning_bid_history if game else None
    if winning is None or winning.winning_bid is None:
        return None
    return encoding.encode_bid(winning.winning_bid)


def _discarded(history: History) -> tuple[str, ...]:
    game = history.game_history
    winning = game.winning_bid_history if game else None
    if winning is None or not winning.discarded:
        return ()
    return _card_tokens(winning.discarded)


def _scores(history: History) -> tuple[ScoreRow, ...]:
    match = history.match_history
    if match is None:
        return ()
    return tuple(Scoreboard.from_past_games(match.past_games).rows)


def project(
    snapshot: Snapshot,
    known_self_seat: SelfSeat | None = None,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> tuple[Projection, SelfSeat | None]:
    """Project ``snapshot`` and return it with the self seat to carry forward."""

    state = snapshot.state
    history = snapshot.history or History()

    seat = known_self_seat
    if history.lobby_history is not None:
        seat = _guarded("self seat", lambda: SelfSeat.from_lobby(history.lobby_history), seat)

    stage_label, stage_alert = stage_of(state)
    info_message, info_alert = info_of(state, history)
    projection = Projection(
        stage_label=stage_label,
        stage_alert=stage_alert,
        info_message=info_message,
        info_alert=info_alert,
        seat_labels=MappingProxyType(seat_labels_for(seat, history, config)),
        visible_hand=_guarded("visible hand", lambda: visible_hand_of(history), ()),
        legal_bid_tokens=_guarded(
            "legal bids", lambda: legal_bid_tokens_of(state, history), frozenset()
        ),
        winning_bid=_guarded("winning bid", lambda: _winning_bid(history), None),
        discarded=_guarded("discarded cards", lambda: _discarded(history), ()),
        scores=_guarded("scores", lambda: _scores(history), ()),
    )
    return projection, seat


def bid_choices(projection: Projection) -> list[tuple[str, bool]]:
    """Pair every bid on the ladder with whether it is currently legal."""

    return [
        (token, token in projection.legal_bid_tokens)
        for token in (encoding.encode_bid(bid) for bid in iter_bid_ladder())
    ]


class Projector:
    """Project a stream of snapshots, remembering the self seat between them."""

    def __init__(
        self,
        config: ProjectionConfig = DEFAULT_CONFIG,
        self_seat: SelfSeat | None = None,
    ) -> None:
        self.config = config
        self.self_seat = self_seat
        self.last: Projection | None = None

    def feed(self, snapshot: Snapshot) -> Projection:
        projection, self.self_seat = project(snapshot, self.self_seat, self.config)
        self.last = projection
        return projection

    def feed_wire(self, raw: Any) -> Projection:
        """Project an already-decoded JSON snapshot."""

        return self.feed(protocol.snapshot_from_wire(raw))

    def feed_json(self, text: str | bytes) -> Projection:
        """Project one JSON-encoded snapshot message."""

        return self.feed(protocol.snapshot_from_json(text))


__all__ = [
    "DEFAULT_CONFIG",
    "Projection",
    "ProjectionConfig",
    "Projector",
    "SEAT_SLOTS",
    "SeatLabel",
    "SelfSeat",
    "bid_choices",
    "info_of",
    "legal_bid_tokens_of",
    "project",
    "seat_labels_for",
    "stage_of",
    "visible_hand_of",
]
