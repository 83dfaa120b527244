"""
Card lookups for the replay derivations.

ArenaCardDatabase reads a local SQLite card database (grpId -> card row)
into memory. StaticCardLookup wraps a plain mapping, for tests or for
callers that already hold card data.
"""
import logging
import sqlite3
import time
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..core.ports import CardAttributes

logger = logging.getLogger(__name__)

COLOR_LETTERS = "WUBRG"


def parse_colors(value) -> Tuple[str, ...]:
    """Normalise a stored color field ("WU", "W,U", '["W","U"]') into letters in WUBRG order."""
    if not value:
        return ()
    text = value if isinstance(value, str) else "".join(value)
    letters = {char for char in text.upper() if char in COLOR_LETTERS}
    return tuple(c for c in COLOR_LETTERS if c in letters)


def card_from_row(row: Mapping) -> CardAttributes:
    return CardAttributes(
        grp_id=row["grpId"],
        name=row["name"] or "",
        colors=parse_colors(row["colors"] if "colors" in row.keys() else None),
        color_identity=parse_colors(row["color_identity"] if "color_identity" in row.keys() else None),
        set_code=(row["set_code"] if "set_code" in row.keys() else None) or "",
        type_line=(row["type_line"] if "type_line" in row.keys() else None) or "",
    )


class ArenaCardDatabase:
    """
    Provides access to a local card database.

    The database maps Arena grpIds to card names and metadata in a ``cards``
    table (grpId, name, colors, color_identity, set_code, type_line...).
    The whole table is loaded into memory on construction; lookups never
    hit the disk.
    """

    def __init__(self, db_path: str = "data/unified_cards.db"):
        self.db_path = Path(db_path)
        self._cache: Dict[int, CardAttributes] = {}
        self._unknown_cards = set()

        if not self.db_path.exists():
            logger.warning(f"Arena card database not found at {db_path}. Opponent color identity will be empty.")

        self._load_database()

    def _load_database(self):
        """Load the entire database into memory for fast lookups."""
        if not self.db_path.exists():
            return

        logger.info("Loading Arena card database into memory...")
        start_time = time.time()
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM cards")
            for row in cursor.fetchall():
                self._cache[row["grpId"]] = card_from_row(row)
        except sqlite3.Error as e:
            logger.error(f"Failed to load card database: {e}")
        finally:
            conn.close()
        elapsed = time.time() - start_time
        logger.info(f"Loaded {len(self._cache)} cards in {elapsed:.4f}s")

    def get(self, card_id: int) -> Optional[CardAttributes]:
        card = self._cache.get(card_id)
        if card is None and card_id and card_id not in self._unknown_cards:
            self._unknown_cards.add(card_id)
            logger.debug(f"Unknown card grpId {card_id} - total unknown: {len(self._unknown_cards)}")
        return card

    def get_card_name(self, grp_id: int) -> str:
        card = self._cache.get(grp_id)
        return card.name if card else f"Unknown Card {grp_id}"

    @property
    def unknown_card_count(self) -> int:
        return len(self._unknown_cards)

    def __len__(self) -> int:
        return len(self._cache)


class StaticCardLookup:
    """Card lookup over an in-memory collection."""

    def __init__(self, cards: Iterable[CardAttributes] = ()):
        self._cards = {card.grp_id: card for card in cards}

    def get(self, card_id: int) -> Optional[CardAttributes]:
        return self._cards.get(card_id)

    def __len__(self) -> int:
        return len(self._cards)
