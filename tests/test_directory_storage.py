"""Tests for the directory sinks."""
import asyncio
import json

from arenalog.core.domain.draft import DraftPick, DraftResult
from arenalog.core.replay import MatchReplayBuilder
from arenalog.data.arena_cards import StaticCardLookup
from arenalog.data.directory_storage import DirectoryStorage, DraftDirectoryStorage
from logfixtures import classify_all, single_game_match


def build_replay(match_id="m1"):
    builder = MatchReplayBuilder()
    for outcome in classify_all(single_game_match(match_id)):
        builder.ingest(outcome)
    return builder.build()


class TestDirectoryStorage:
    def test_writes_replay_events_in_order(self, tmp_path):
        storage = DirectoryStorage(tmp_path / "matches")
        asyncio.run(storage.write(build_replay("m1")))

        path = tmp_path / "matches" / "m1.json"
        assert json.loads(path.read_text(encoding="utf-8")) == single_game_match("m1")
        assert not (tmp_path / "matches" / "m1.details.json").exists()
        assert not (tmp_path / "matches" / "m1.json.tmp").exists()

    def test_writes_details_with_card_lookup(self, tmp_path):
        storage = DirectoryStorage(tmp_path, cards=StaticCardLookup())
        asyncio.run(storage.write(build_replay("m1")))

        details = json.loads((tmp_path / "m1.details.json").read_text(encoding="utf-8"))
        assert details["controller_player_name"] == "Alice"
        assert details["did_controller_win"] is True

    def test_overwrites_existing_file(self, tmp_path):
        (tmp_path / "m1.json").write_text("stale")
        asyncio.run(DirectoryStorage(tmp_path).write(build_replay("m1")))
        assert json.loads((tmp_path / "m1.json").read_text())[0]["requestId"] == 1


class TestDraftDirectoryStorage:
    def test_writes_draft(self, tmp_path):
        draft = DraftResult(
            draft_id="d1",
            event_id="PremierDraft_FDN_20241112",
            format="PremierDraft",
            set_code="FDN",
            picks=(DraftPick(pack_number=1, pick_number=1, picked_card=7, offered_cards=(7, 8)),),
        )
        asyncio.run(DraftDirectoryStorage(tmp_path / "drafts").write(draft))

        data = json.loads((tmp_path / "drafts" / "d1.json").read_text(encoding="utf-8"))
        assert data["set_code"] == "FDN"
        assert data["picks"][0]["offered_cards"] == [7, 8]
