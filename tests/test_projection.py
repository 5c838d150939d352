"""Tests covering the snapshot projector."""

from __future__ import annotations

import json
import logging

import pytest

from fivehundred import actions, projection
from fivehundred.bids import MIS, NO_TRUMPS, PASS, Tricks
from fivehundred.cards import JOKER, Suit, SuitedCard
from fivehundred.projection import Projection, Projector, SelfSeat, bid_choices, project
from fivehundred.state import (
    BiddingHistory,
    Error,
    Excluded,
    GameHistory,
    History,
    LobbyHistory,
    MatchAborted,
    MatchHistory,
    PlayerJoined,
    STATE_TYPES,
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


def _project(snapshot: Snapshot, seat: SelfSeat | None = None) -> Projection:
    result, _ = project(snapshot, seat)
    return result


def _lobby(player_count: int = 4, index: int = 0) -> History:
    return History(lobby_history=LobbyHistory(player_count=player_count, your_player_index=index))


@pytest.mark.parametrize(
    ("state", "label", "alert"),
    [
        (PlayerJoined(), "Lobby", False),
        (WaitingForYourBid(), "Bidding", False),
        (WaitingForTheirBid(), "Bidding", False),
        (WaitingForYourKitty(), "Waiting for kitty", False),
        (WaitingForTheirKitty(), "Waiting for kitty", False),
        (WaitingForYourPlay(), "Playing", False),
        (WaitingForTheirPlay(), "Playing", False),
        (Error(), "Error", True),
        (Excluded(), "Excluded", True),
        (MatchAborted(), "Aborted", True),
        (UnknownState("HandDealt"), "", False),
    ],
)
def test_stage_label(state: object, label: str, alert: bool) -> None:
    result = _project(Snapshot(state=state))

    assert result.stage_label == label
    assert result.stage_alert is alert


def test_every_known_state_has_a_stage() -> None:
    for state_type in STATE_TYPES:
        label, _ = projection.stage_of(state_type())
        assert label


@pytest.mark.parametrize(
    ("state", "history", "message", "alert"),
    [
        (PlayerJoined(), History(), "Waiting for other players to join", False),
        (WaitingForYourBid(), History(), "Make your bid", False),
        (
            WaitingForTheirBid(),
            History(game_history=GameHistory(bidding_history=BiddingHistory(current_bidder_index=2))),
            "Waiting for player 3 to bid",
            False,
        ),
        (WaitingForTheirBid(), History(), "Waiting for player to bid", False),
        (WaitingForYourKitty(), History(), "Use the kitty", False),
        (
            WaitingForTheirKitty(),
            History(game_history=GameHistory(winning_bid_history=WinningBidHistory(winning_bidder_index=0))),
            "Waiting for player 1 to use the kitty",
            False,
        ),
        (WaitingForTheirKitty(), History(), "Waiting for player to use the kitty", False),
        (Excluded(), History(excluded_reason="Game ongoing."), "Game ongoing.", True),
        (Excluded("Already joined."), History(), "Already joined.", True),
        (
            MatchAborted(),
            History(match_history=MatchHistory(match_aborted_reason="Player left.")),
            "Player left.",
            True,
        ),
        (WaitingForYourPlay(), History(), "Waiting for player to play", False),
        (WaitingForTheirPlay(), History(), "Waiting for player to play", False),
        (UnknownState("TrickWon"), History(), "Waiting for player to play", False),
        (Error("You are not a player in this game."), History(), "You are not a player in this game.", True),
    ],
)
def test_info_message(state: object, history: History, message: str, alert: bool) -> None:
    result = _project(Snapshot(state=state, history=history))

    assert result.info_message == message
    assert result.info_alert is alert


@pytest.mark.parametrize("state_type", STATE_TYPES)
def test_history_error_overrides_every_state(state_type: type) -> None:
    history = History(
        error="Not your turn to bid.",
        excluded_reason="ignored",
        match_history=MatchHistory(match_aborted_reason="ignored"),
        game_history=GameHistory(bidding_history=BiddingHistory(current_bidder_index=1)),
    )

    result = _project(Snapshot(state=state_type(), history=history))

    assert result.info_message == "Not your turn to bid."
    assert result.info_alert is True


@pytest.mark.parametrize("player_count", [2, 3, 4])
def test_seat_rotation_puts_self_at_slot_zero(player_count: int) -> None:
    for index in range(player_count):
        result, seat = project(Snapshot(PlayerJoined(), _lobby(player_count, index)), None)

        assert seat == SelfSeat(index=index, player_count=player_count)
        assert sorted(result.seat_labels) == list(range(player_count))
        assert sorted(label.seat_index for label in result.seat_labels.values()) == list(range(player_count))
        assert result.seat_labels[0].seat_index == index
        assert result.seat_labels[0].is_self
        assert result.seat_labels[0].is_bold
        assert [slot for slot, label in result.seat_labels.items() if label.is_self] == [0]


def test_seat_rotation_keeps_table_order() -> None:
    result = _project(Snapshot(PlayerJoined(), _lobby(4, 2)))

    assert {slot: label.name for slot, label in result.seat_labels.items()} == {
        0: "Player 3",
        1: "Player 4",
        2: "Player 1",
        3: "Player 2",
    }
    assert [result.seat_labels[slot].slot_name for slot in range(4)] == ["bottom", "left", "top", "right"]


def test_seats_are_unlabeled_without_lobby_history() -> None:
    result, seat = project(Snapshot(WaitingForTheirPlay()), None)

    assert result.seat_labels == {}
    assert seat is None


def test_self_seat_is_retained_between_snapshots() -> None:
    first, seat = project(Snapshot(PlayerJoined(), _lobby(4, 1)), None)
    second, carried = project(Snapshot(WaitingForTheirBid()), seat)

    assert carried == seat
    assert second.seat_labels == first.seat_labels


def test_newer_lobby_history_replaces_the_self_seat() -> None:
    _, seat = project(Snapshot(PlayerJoined(), _lobby(2, 0)), None)
    result, seat = project(Snapshot(PlayerJoined(), _lobby(4, 3)), seat)

    assert seat == SelfSeat(index=3, player_count=4)
    assert result.seat_labels[0].seat_index == 3


def test_seat_labels_show_last_bids() -> None:
    history = History(
        lobby_history=LobbyHistory(player_count=4, your_player_index=0),
        game_history=GameHistory(
            bidding_history=BiddingHistory(current_bidder_index=2, bids=(PASS, Tricks(7, NO_TRUMPS), None, MIS))
        ),
    )

    result = _project(Snapshot(WaitingForTheirBid(), history))

    assert [result.seat_labels[slot].last_bid for slot in range(4)] == ["P", "7NT", None, "M"]


def test_visible_hand_keeps_dealt_order() -> None:
    history = History(game_history=GameHistory(hand=(JOKER, SuitedCard(14, Suit.HEARTS))))

    result = _project(Snapshot(WaitingForTheirBid(), history))

    assert result.visible_hand == ("★", "A♥")


def test_visible_hand_appends_the_kitty() -> None:
    history = History(
        game_history=GameHistory(
            hand=(SuitedCard(10, Suit.SPADES),),
            winning_bid_history=WinningBidHistory(
                winning_bidder_index=0,
                winning_bid=Tricks(6, Suit.CLUBS),
                kitty=(SuitedCard(5, Suit.DIAMONDS), JOKER),
            ),
        )
    )

    result = _project(Snapshot(WaitingForYourKitty(), history))

    assert result.visible_hand == ("10♠", "5◆", "★")
    assert result.winning_bid == "6♣"


def test_visible_hand_is_empty_without_game_history() -> None:
    assert _project(Snapshot(WaitingForYourPlay())).visible_hand == ()
    assert _project(Snapshot(WaitingForYourPlay(), History(game_history=GameHistory()))).visible_hand == ()


def test_discarded_cards_are_projected() -> None:
    history = History(
        game_history=GameHistory(
            hand=(),
            winning_bid_history=WinningBidHistory(discarded=(SuitedCard(4, Suit.HEARTS), SuitedCard(10, Suit.CLUBS))),
        )
    )

    assert _project(Snapshot(WaitingForTheirPlay(), history)).discarded == ("4♥", "10♣")


def test_legal_bid_tokens_come_from_bid_options() -> None:
    history = History(
        game_history=GameHistory(
            bidding_history=BiddingHistory(current_bidder_index=0, bid_options=(PASS, Tricks(10, Suit.SPADES)))
        )
    )

    result = _project(Snapshot(WaitingForYourBid(), history))

    assert result.legal_bid_tokens == frozenset({"P", "10♠"})
    assert result.is_bidding_turn


def test_legal_bid_tokens_are_empty_outside_your_bid() -> None:
    history = History(game_history=GameHistory(bidding_history=BiddingHistory(current_bidder_index=1)))

    result = _project(Snapshot(WaitingForTheirBid(), history))

    assert result.legal_bid_tokens == frozenset()
    assert not result.is_bidding_turn


def test_your_bid_without_bidding_history_degrades_to_no_tokens() -> None:
    result = _project(Snapshot(WaitingForYourBid()))

    assert result.legal_bid_tokens == frozenset()
    assert result.stage_label == "Bidding"


def test_bid_cycle_scenario() -> None:
    snapshot = Snapshot(WaitingForYourBid(options=(PASS, Tricks(6, Suit.SPADES))))

    result = _project(snapshot)

    assert result.legal_bid_tokens == frozenset({"P", "6♠"})
    assert actions.bid_from_token("6♠") == actions.MakeBid(Tricks(6, Suit.SPADES))


def test_abort_scenario() -> None:
    result = _project(Snapshot(MatchAborted("opponent disconnected")))

    assert result.stage_label == "Aborted"
    assert result.stage_alert
    assert result.info_message == "opponent disconnected"
    assert result.info_alert


def test_bid_choices_cover_the_ladder() -> None:
    result = _project(Snapshot(WaitingForYourBid(options=(PASS, Tricks(6, Suit.SPADES)))))

    choices = bid_choices(result)

    assert len(choices) == 28
    assert choices[0] == ("P", True)
    assert choices[1] == ("6♠", True)
    assert [token for token, legal in choices if legal] == ["P", "6♠"]


def test_scores_come_from_past_games() -> None:
    history = History(match_history=MatchHistory(past_games=((120, 120, -70, -70), (40, 160, 200, 130))))

    result = _project(Snapshot(WaitingForTheirBid(), history))

    assert [row.totals for row in result.scores] == [(120, -70), (160, 130)]
    assert [row.game_number for row in result.scores] == [1, 2]


def test_undecodable_fields_degrade_individually(caplog: pytest.LogCaptureFixture) -> None:
    history = History(
        lobby_history=LobbyHistory(player_count=4, your_player_index=0),
        game_history=GameHistory(
            hand=(JOKER, "not a card"),  # type: ignore[arg-type]
            bidding_history=BiddingHistory(bid_options=(PASS, "bogus")),  # type: ignore[arg-type]
        ),
    )

    with caplog.at_level(logging.WARNING, logger="fivehundred.projection"):
        result = _project(Snapshot(WaitingForYourBid(), history))

    assert result.visible_hand == ()
    assert result.legal_bid_tokens == frozenset()
    assert result.stage_label == "Bidding"
    assert result.info_message == "Make your bid"
    assert len(result.seat_labels) == 4
    assert "visible hand" in caplog.text


def test_impossible_lobby_history_keeps_the_known_seat() -> None:
    known = SelfSeat(index=1, player_count=4)
    history = History(lobby_history=LobbyHistory(player_count=2, your_player_index=5))

    result, seat = project(Snapshot(PlayerJoined(), history), known)

    assert seat == known
    assert result.seat_labels[0].seat_index == 1


def test_projection_is_rebuilt_from_each_snapshot() -> None:
    bidding = History(
        game_history=GameHistory(
            hand=(JOKER,),
            bidding_history=BiddingHistory(current_bidder_index=0, bid_options=(PASS,)),
        ),
        error="Not your turn to bid.",
    )
    projector = Projector()
    projector.feed(Snapshot(WaitingForYourBid(), bidding))

    result = projector.feed(Snapshot(WaitingForTheirPlay()))

    assert result.visible_hand == ()
    assert result.legal_bid_tokens == frozenset()
    assert result.info_message == "Waiting for player to play"
    assert not result.info_alert


def test_projector_threads_the_self_seat_through_json() -> None:
    projector = Projector()
    projector.feed_json(
        json.dumps(
            {
                "state": "PlayerJoined",
                "history": {"lobby_history": {"player_count": 4, "your_player_index": 3}},
            }
        )
    )
    result = projector.feed_json(
        json.dumps(
            {
                "state": "WaitingForTheirBid",
                "history": {
                    "game_history": {
                        "hand": ["Joker", {"SuitedCard": {"face": 14, "suit": "Hearts"}}],
                        "bidding_history": {"current_bidder_index": 0, "bids": [None, None, None, None]},
                    }
                },
            }
        )
    )

    assert projector.self_seat == SelfSeat(index=3, player_count=4)
    assert projector.last is result
    assert result.seat_labels[0].name == "Player 4"
    assert result.seat_labels[1].name == "Player 1"
    assert result.info_message == "Waiting for player 1 to bid"
    assert result.visible_hand == ("★", "A♥")


def test_projection_config_changes_labels() -> None:
    config = projection.ProjectionConfig(seat_slots=("south", "north"), player_label="Seat {number}")

    result, _ = project(Snapshot(PlayerJoined(), _lobby(2, 1)), None, config)

    assert result.seat_labels[0].name == "Seat 2"
    assert result.seat_labels[0].slot_name == "south"
    assert result.seat_labels[1].slot_name == "north"


@pytest.mark.parametrize(("index", "player_count"), [(-1, 4), (4, 4), (0, 0)])
def test_self_seat_validates_its_range(index: int, player_count: int) -> None:
    with pytest.raises(ValueError):
        SelfSeat(index=index, player_count=player_count)


def test_seat_labels_cannot_be_patched() -> None:
    result = _project(Snapshot(PlayerJoined(), _lobby(4, 0)))

    with pytest.raises(TypeError):
        result.seat_labels[0] = result.seat_labels[1]  # type: ignore[index]


def test_error_without_reason_stays_an_alert() -> None:
    result = _project(Snapshot(Error()))

    assert result.info_message == ""
    assert result.info_alert is True


def test_malformed_bidder_index_keeps_legal_bids() -> None:
    projector = Projector()

    result = projector.feed_wire(
        {
            "state": "WaitingForYourBid",
            "history": {
                "game_history": {
                    "bidding_history": {
                        "current_bidder_index": "oops",
                        "bid_options": ["Pass", {"Tricks": [6, {"Suit": "Spades"}]}],
                    }
                }
            },
        }
    )

    assert result.legal_bid_tokens == frozenset({"P", "6♠"})
