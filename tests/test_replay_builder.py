"""Tests for the MatchReplayBuilder state machine."""
import json

import pytest

from arenalog.core.errors import (
    BoundaryMismatchError,
    ControllerSeatNotFoundError,
    MissingEndBoundaryError,
    MissingMatchIdError,
    ReplayBuildError,
)
from arenalog.core.parser import NoMatch, ParseError, classify
from arenalog.core.replay import MatchReplayBuilder
from logfixtures import (
    classify_all,
    completed_event,
    connect_resp,
    draft_pack_event,
    game_business_event,
    gre_event,
    mulligan_resp,
    playing_event,
    single_game_match,
)


def feed(builder, outcomes):
    return [builder.ingest(o) for o in outcomes]


class TestLifecycle:
    def test_full_match_completes_once(self):
        builder = MatchReplayBuilder()
        completions = feed(builder, classify_all(single_game_match("m1")))
        assert completions == [False] * 6 + [True]

        replay = builder.build()
        assert replay.match_id == "m1"
        assert replay.controller_seat_id == 2
        assert len(replay.client_server_messages) == 5
        assert not builder.is_open

    def test_boundaries_are_the_ingested_events(self):
        builder = MatchReplayBuilder()
        outcomes = classify_all(single_game_match("m1"))
        feed(builder, outcomes)
        replay = builder.build()
        assert replay.match_start_message is outcomes[0]
        assert replay.match_end_message is outcomes[-1]
        assert list(replay.client_server_messages) == outcomes[1:-1]

    def test_idle_builder_drops_messages(self):
        builder = MatchReplayBuilder()
        outcomes = classify_all([gre_event(connect_resp()), mulligan_resp(5), completed_event("m0")])
        assert feed(builder, outcomes) == [False, False, False]
        assert not builder.is_open

    def test_noise_and_parse_errors_are_ignored(self):
        builder = MatchReplayBuilder()
        builder.ingest(classify(json.dumps(playing_event("m1"))))
        assert builder.ingest(NoMatch()) is False
        assert builder.ingest(ParseError(reason="bad", raw="{")) is False
        assert builder.context.client_server_messages == []

    def test_only_game_telemetry_is_kept(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all([playing_event("m1"), game_business_event(), draft_pack_event()]))
        assert len(builder.context.business_messages) == 1

    def test_build_is_not_repeatable(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all(single_game_match("m1")))
        builder.build()
        with pytest.raises(MissingMatchIdError):
            builder.build()

    def test_abandon_returns_context(self):
        builder = MatchReplayBuilder()
        builder.ingest(classify(json.dumps(playing_event("m1"))))
        context = builder.abandon()
        assert context.match_id == "m1"
        assert not builder.is_open
        assert builder.abandon() is None


class TestReopen:
    def test_same_match_reported_twice(self):
        builder = MatchReplayBuilder()
        outcomes = classify_all([playing_event("m1"), gre_event(connect_resp()), playing_event("m1")])
        feed(builder, outcomes)
        assert builder.context.match_id == "m1"
        assert builder.context.match_start_message is outcomes[2]
        assert len(builder.context.client_server_messages) == 1

    def test_different_match_keeps_messages(self):
        builder = MatchReplayBuilder()
        outcomes = classify_all([
            playing_event("m1"),
            gre_event(connect_resp()),
            playing_event("m2"),
            completed_event("m2"),
        ])
        feed(builder, outcomes)
        replay = builder.build()
        assert replay.match_id == "m2"
        assert len(replay.client_server_messages) == 1


class TestBuildErrors:
    def test_missing_end(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all(single_game_match("m1")[:-1]))
        with pytest.raises(MissingEndBoundaryError):
            builder.build()
        assert not builder.is_open

    def test_nothing_open(self):
        with pytest.raises(MissingMatchIdError):
            MatchReplayBuilder().build()

    def test_missing_match_id(self):
        builder = MatchReplayBuilder()
        start = playing_event("")
        feed(builder, classify_all([start, gre_event(connect_resp()), completed_event("")]))
        with pytest.raises(MissingMatchIdError):
            builder.build()

    def test_no_connect_response(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all([playing_event("m1"), mulligan_resp(5), completed_event("m1")]))
        with pytest.raises(ControllerSeatNotFoundError):
            builder.build()

    def test_connect_response_without_seats(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all([playing_event("m1"), gre_event(connect_resp(seat_ids=[])), completed_event("m1")]))
        with pytest.raises(ControllerSeatNotFoundError):
            builder.build()

    def test_end_for_another_match(self):
        builder = MatchReplayBuilder()
        feed(builder, classify_all([playing_event("m1"), gre_event(connect_resp()), completed_event("m9")]))
        with pytest.raises(BoundaryMismatchError) as exc_info:
            builder.build()
        assert "m1" in str(exc_info.value)
        assert "m9" in str(exc_info.value)

    def test_errors_share_a_base_class(self):
        assert issubclass(ControllerSeatNotFoundError, ReplayBuildError)
        assert issubclass(BoundaryMismatchError, ReplayBuildError)
