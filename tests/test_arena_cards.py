"""Tests for the SQLite-backed card lookup."""
import sqlite3

import pytest

from arenalog.core.ports import CardAttributes
from arenalog.data.arena_cards import ArenaCardDatabase, StaticCardLookup, parse_colors


@pytest.fixture
def cards_db(tmp_path):
    path = tmp_path / "cards.db"
    conn = sqlite3.connect(str(path))
    conn.execute(
        "CREATE TABLE cards (grpId INTEGER PRIMARY KEY, name TEXT, colors TEXT, "
        "color_identity TEXT, set_code TEXT, type_line TEXT)"
    )
    conn.executemany(
        "INSERT INTO cards VALUES (?, ?, ?, ?, ?, ?)",
        [
            (90001, "Lightning Helix", "R,W", "RW", "FDN", "Instant"),
            (90002, "Llanowar Elves", "G", '["G"]', "FDN", "Creature - Elf Druid"),
            (90003, "Island", "", "U", None, "Basic Land - Island"),
        ],
    )
    conn.commit()
    conn.close()
    return str(path)


class TestParseColors:
    def test_formats(self):
        assert parse_colors("UW") == ("W", "U")
        assert parse_colors("R,W") == ("W", "R")
        assert parse_colors('["G","B"]') == ("B", "G")
        assert parse_colors(["g", "u"]) == ("U", "G")

    def test_empty(self):
        assert parse_colors(None) == ()
        assert parse_colors("") == ()


class TestArenaCardDatabase:
    def test_loads_cards(self, cards_db):
        db = ArenaCardDatabase(cards_db)
        assert len(db) == 3

        helix = db.get(90001)
        assert helix.name == "Lightning Helix"
        assert helix.colors == ("W", "R")
        assert helix.color_identity == ("W", "R")
        assert helix.set_code == "FDN"

        island = db.get(90003)
        assert island.colors == ()
        assert island.color_identity == ("U",)
        assert island.set_code == ""

    def test_unknown_cards_are_counted(self, cards_db):
        db = ArenaCardDatabase(cards_db)
        assert db.get(1) is None
        assert db.get(1) is None
        assert db.get(2) is None
        assert db.unknown_card_count == 2
        assert db.get_card_name(1) == "Unknown Card 1"
        assert db.get_card_name(90002) == "Llanowar Elves"

    def test_missing_database_is_empty(self, tmp_path):
        db = ArenaCardDatabase(str(tmp_path / "missing.db"))
        assert len(db) == 0
        assert db.get(90001) is None

    def test_database_without_cards_table(self, tmp_path):
        path = tmp_path / "empty.db"
        sqlite3.connect(str(path)).close()
        assert len(ArenaCardDatabase(str(path))) == 0


class TestStaticCardLookup:
    def test_lookup(self):
        lookup = StaticCardLookup([CardAttributes(grp_id=5, name="Shock", colors=("R",), color_identity=("R",))])
        assert lookup.get(5).name == "Shock"
        assert lookup.get(6) is None
        assert len(lookup) == 1
