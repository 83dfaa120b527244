"""
Directory sinks: one pretty-printed JSON file per match replay or draft.

Files are written to a temporary name and renamed into place, so a reader
never sees a half-written replay.
"""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

from ..core.domain.draft import DraftResult
from ..core.match_details import MatchDetails
from ..core.ports import CardLookup
from ..core.replay import MatchReplay

logger = logging.getLogger(__name__)


def _write_atomic(path: Path, text: str):
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp_path, path)


class DirectoryStorage:
    """
    Writes ``<dir>/<match_id>.json``: the raw replay events in order.

    With a card lookup, also writes ``<dir>/<match_id>.details.json`` with
    the assembled match summary.
    """

    def __init__(self, path, cards: Optional[CardLookup] = None):
        self.path = Path(path)
        self.cards = cards

    async def write(self, replay: MatchReplay) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        path = self.path / f"{replay.match_id}.json"
        logger.info(f"Writing match replay to file: {path}")
        await asyncio.to_thread(_write_atomic, path, replay.to_json())

        if self.cards is not None:
            details = MatchDetails.from_replay(replay, self.cards)
            details_path = self.path / f"{replay.match_id}.details.json"
            await asyncio.to_thread(_write_atomic, details_path, json.dumps(details.to_dict(), indent=2))
        logger.info("Match replay written to file")


class DraftDirectoryStorage:
    """Writes ``<dir>/<draft_id>.json`` for each completed draft."""

    def __init__(self, path):
        self.path = Path(path)

    async def write(self, draft: DraftResult) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        path = self.path / f"{draft.draft_id}.json"
        logger.info(f"Writing draft to file: {path}")
        await asyncio.to_thread(_write_atomic, path, json.dumps(draft.to_dict(), indent=2))
