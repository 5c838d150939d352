"""JSON wire format shared with the 500 server.

The server serialises its enums with serde's external tagging: variants
without a payload travel as a bare string (``"Joker"``, ``"Pass"``,
``"PlayerJoined"``) and variants with a payload as a single-key object
(``{"SuitedCard": {...}}``, ``{"Tricks": [6, "NoTrumps"]}``,
``{"MatchAborted": "Player left."}``).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Final, Mapping, TypeVar

from . import actions
from .bids import MIS, NO_TRUMPS, OPEN_MIS, PASS, Bid, InvalidBid, Mis, NoTrumps, OpenMis, Pass, Tricks
from .cards import JOKER, Card, InvalidCard, Joker, Suit, SuitedCard
from .state import (
    BiddingHistory,
    Error,
    Excluded,
    GameHistory,
    History,
    LobbyHistory,
    MatchAborted,
    MatchHistory,
    PlayerJoined,
    SessionState,
    Snapshot,
    UnknownState,
    WaitingForTheirBid,
    WaitingForTheirKitty,
    WaitingForTheirPlay,
    WaitingForYourBid,
    WaitingForYourKitty,
    WaitingForYourPlay,
    WinningBidHistory,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ATOMIC_BIDS: Final[dict[str, Bid]] = {"Pass": PASS, "Mis": MIS, "OpenMis": OPEN_MIS}
_UNIT_STATES: Final[dict[str, SessionState]] = {
    "PlayerJoined": PlayerJoined(),
    "WaitingForTheirBid": WaitingForTheirBid(),
    "WaitingForYourKitty": WaitingForYourKitty(),
    "WaitingForTheirKitty": WaitingForTheirKitty(),
    "WaitingForYourPlay": WaitingForYourPlay(),
    "WaitingForTheirPlay": WaitingForTheirPlay(),
}


class WireFormatError(ValueError):
    """Raised when a JSON structure does not match the wire format."""


class UnrecognizedStateVariant(WireFormatError):
    """Raised in strict mode for a state tag this client does not know."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unrecognized session state {name!r}")
        self.name = name


def _tagged(raw: Any, what: str) -> tuple[str, Any]:
    """Split an externally tagged value into its tag and payload."""

    if isinstance(raw, str):
        return raw, None
    if isinstance(raw, Mapping) and len(raw) == 1:
        ((tag, payload),) = raw.items()
        if isinstance(tag, str):
            return tag, payload
    raise WireFormatError(f"malformed {what}: {raw!r}")


def _int(raw: Any, what: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise WireFormatError(f"{what} must be an integer, got {raw!r}")
    return raw


def _optional_str(raw: Any, what: str) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise WireFormatError(f"{what} must be a string, got {raw!r}")
    return raw


def _reason(raw: Any) -> str | None:
    return _optional_str(raw, "reason")


def _mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise WireFormatError(f"{what} must be an object, got {raw!r}")
    return raw


def _sequence(raw: Any, item: Callable[[Any], T], what: str) -> tuple[T, ...]:
    if not isinstance(raw, list):
        raise WireFormatError(f"{what} must be a list, got {raw!r}")
    return tuple(item(entry) for entry in raw)


def _suit(raw: Any) -> Suit:
    try:
        return Suit(raw)
    except ValueError as exc:
        raise WireFormatError(f"unknown suit {raw!r}") from exc


def card_from_wire(raw: Any) -> Card:
    """Convert a wire card into a :data:`~fivehundred.cards.Card`."""

    tag, payload = _tagged(raw, "card")
    if tag == "Joker" and payload is None:
        return JOKER
    if tag != "SuitedCard":
        raise WireFormatError(f"unknown card variant {tag!r}")
    body = _mapping(payload, "suited card")
    face = _int(body.get("face"), "card face")
    suit = _suit(body.get("suit"))
    try:
        return SuitedCard(face=face, suit=suit)
    except InvalidCard as exc:
        raise WireFormatError(str(exc)) from exc


def card_to_wire(card: Card) -> Any:
    """Convert a card into its wire representation."""

    if isinstance(card, Joker):
        return "Joker"
    if isinstance(card, SuitedCard):
        return {"SuitedCard": {"face": card.face, "suit": card.suit.value}}
    raise WireFormatError(f"not a card: {card!r}")


def bid_from_wire(raw: Any) -> Bid:
    """Convert a wire bid into a :data:`~fivehundred.bids.Bid`."""

    tag, payload = _tagged(raw, "bid")
    if payload is None and tag in _ATOMIC_BIDS:
        return _ATOMIC_BIDS[tag]
    if tag != "Tricks":
        raise WireFormatError(f"unknown bid variant {tag!r}")
    if not isinstance(payload, list) or len(payload) != 2:
        raise WireFormatError(f"malformed trick bid: {payload!r}")

    count_raw, trump_raw = payload
    trump_tag, trump_payload = _tagged(trump_raw, "trump")
    if trump_tag == "NoTrumps" and trump_payload is None:
        trump: Suit | NoTrumps = NO_TRUMPS
    elif trump_tag == "Suit":
        trump = _suit(trump_payload)
    else:
        raise WireFormatError(f"unknown trump {trump_raw!r}")
    count = _int(count_raw, "trick count")
    try:
        return Tricks(count, trump)
    except InvalidBid as exc:
        raise WireFormatError(str(exc)) from exc


def bid_to_wire(bid: Bid) -> Any:
    """Convert a bid into its wire representation."""

    if isinstance(bid, Pass):
        return "Pass"
    if isinstance(bid, Mis):
        return "Mis"
    if isinstance(bid, OpenMis):
        return "OpenMis"
    if isinstance(bid, Tricks):
        trump = "NoTrumps" if isinstance(bid.trump, NoTrumps) else {"Suit": bid.trump.value}
        return {"Tricks": [bid.count, trump]}
    raise WireFormatError(f"not a bid: {bid!r}")


def state_from_wire(raw: Any, *, strict: bool = False) -> SessionState:
    """Convert a wire session state into a :data:`~fivehundred.state.SessionState`.

    Payload variants sent as bare strings get an empty payload and rely on
    the accompanying history. Unknown tags become :class:`UnknownState`
    unless ``strict`` is set.
    """

    name, payload = _tagged(raw, "session state")
    if name in _UNIT_STATES:
        return _UNIT_STATES[name]
    if name == "WaitingForYourBid":
        options = _part({name: payload}, name, lambda bids: _sequence(bids, bid_from_wire, "bid options"))
        return WaitingForYourBid(options=options or ())
    if name == "Error":
        return Error(reason=_part({name: payload}, name, _reason))
    if name == "Excluded":
        return Excluded(reason=_part({name: payload}, name, _reason))
    if name == "MatchAborted":
        return MatchAborted(reason=_part({name: payload}, name, _reason))
    if strict:
        raise UnrecognizedStateVariant(name)
    logger.debug("Unrecognized session state %r", name)
    return UnknownState(name=name)


def _part(body: Mapping[str, Any], key: str, parse: Callable[[Any], T]) -> T | None:
    """Parse ``body[key]`` if present, dropping it when malformed."""

    raw = body.get(key)
    if raw is None:
        return None
    try:
        return parse(raw)
    except WireFormatError as exc:
        logger.warning("Dropping malformed %s: %s", key, exc)
        return None


def _lobby_history(raw: Any) -> LobbyHistory:
    body = _mapping(raw, "lobby history")
    player_count = _int(body.get("player_count"), "player count")
    your_player_index = _int(body.get("your_player_index"), "player index")
    if player_count <= 0 or not 0 <= your_player_index < player_count:
        raise WireFormatError(
            f"player index {your_player_index} out of range for {player_count} player(s)"
        )
    return LobbyHistory(player_count=player_count, your_player_index=your_player_index)


def _optional_bid(raw: Any) -> Bid | None:
    return None if raw is None else bid_from_wire(raw)


def _bidding_history(raw: Any) -> BiddingHistory:
    body = _mapping(raw, "bidding history")
    return BiddingHistory(
        current_bidder_index=_part(body, "current_bidder_index", lambda raw: _int(raw, "bidder index")),
        bids=_part(body, "bids", lambda bids: _sequence(bids, _optional_bid, "bids")) or (),
        bid_options=_part(
            body, "bid_options", lambda options: _sequence(options, bid_from_wire, "bid options")
        ),
    )


def _cards(raw: Any) -> tuple[Card, ...]:
    return _sequence(raw, card_from_wire, "cards")


def _winning_bid_history(raw: Any) -> WinningBidHistory:
    body = _mapping(raw, "winning bid history")
    return WinningBidHistory(
        winning_bidder_index=_part(
            body, "winning_bidder_index", lambda raw: _int(raw, "winning bidder index")
        ),
        winning_bid=_part(body, "winning_bid", bid_from_wire),
        kitty=_part(body, "kitty", _cards),
        discarded=_part(body, "discarded", _cards),
    )


def _game_history(raw: Any) -> GameHistory:
    body = _mapping(raw, "game history")
    return GameHistory(
        hand=_part(body, "hand", _cards),
        bidding_history=_part(body, "bidding_history", _bidding_history),
        winning_bid_history=_part(body, "winning_bid_history", _winning_bid_history),
    )


def _past_game(raw: Any) -> tuple[int, int, int, int]:
    if not isinstance(raw, list) or len(raw) != 4:
        raise WireFormatError(f"past game must be four integers, got {raw!r}")
    delta_1, total_1, delta_2, total_2 = (_int(value, "score") for value in raw)
    return delta_1, total_1, delta_2, total_2


def _match_history(raw: Any) -> MatchHistory:
    body = _mapping(raw, "match history")
    return MatchHistory(
        past_games=_part(body, "past_games", lambda games: _sequence(games, _past_game, "past games"))
        or (),
        winning_team_index=_part(body, "winning_team_index", lambda raw: _int(raw, "winning team index")),
        match_aborted_reason=_part(body, "match_aborted_reason", _reason),
    )


def history_from_wire(raw: Any) -> History:
    """Convert a wire history into a :class:`~fivehundred.state.History`.

    Each part is parsed independently, and a malformed part is logged and
    treated as absent so the rest of the snapshot still renders.
    """

    if raw is None:
        return History()
    if not isinstance(raw, Mapping):
        logger.warning("Dropping malformed history: %r", raw)
        return History()
    return History(
        lobby_history=_part(raw, "lobby_history", _lobby_history),
        game_history=_part(raw, "game_history", _game_history),
        excluded_reason=_part(raw, "excluded_reason", _reason),
        match_history=_part(raw, "match_history", _match_history),
        error=_part(raw, "error", _reason),
    )


def snapshot_from_wire(raw: Any, *, strict: bool = False) -> Snapshot:
    """Convert a decoded JSON snapshot into a :class:`~fivehundred.state.Snapshot`."""

    body = _mapping(raw, "snapshot")
    if "state" not in body:
        raise WireFormatError("snapshot has no state")
    return Snapshot(
        state=state_from_wire(body["state"], strict=strict),
        history=history_from_wire(body.get("history")),
    )


def snapshot_from_json(text: str | bytes, *, strict: bool = False) -> Snapshot:
    """Parse one JSON-encoded snapshot message."""

    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise WireFormatError(f"snapshot is not valid JSON: {exc}") from exc
    return snapshot_from_wire(raw, strict=strict)


def action_to_wire(action: actions.Action) -> Any:
    """Convert an action into the step structure the server expects."""

    if isinstance(action, actions.Poll):
        return "Poll"
    if isinstance(action, actions.Quit):
        return "Quit"
    if isinstance(action, actions.Join):
        return {"Join": action.team}
    if isinstance(action, actions.MakeBid):
        return {"MakeBid": bid_to_wire(action.bid)}
    if isinstance(action, actions.DiscardCards):
        return {"DiscardCards": [card_to_wire(card) for card in action.cards]}
    raise WireFormatError(f"not an action: {action!r}")


def action_to_json(action: actions.Action) -> str:
    """Serialise an action into one JSON message."""

    return json.dumps(action_to_wire(action), ensure_ascii=False)


__all__ = [
    "UnrecognizedStateVariant",
    "WireFormatError",
    "action_to_json",
    "action_to_wire",
    "bid_from_wire",
    "bid_to_wire",
    "card_from_wire",
    "card_to_wire",
    "history_from_wire",
    "snapshot_from_json",
    "snapshot_from_wire",
    "state_from_wire",
]
