"""
Domain records derived from match replays and drafts.

These are plain, immutable values with no knowledge of the log format:
- Deck / DeckDifference: per-game decklists and sideboarding changes
- MulliganRecord: one opening-hand decision
- MatchResult: one game- or match-scoped result
- DraftPick / DraftResult: a completed draft
"""

from .deck import Deck, DeckDifference, quantities
from .draft import DraftPick, DraftResult, parse_event_id
from .match_result import MatchResult
from .mulligan import MulliganRecord

__all__ = [
    "Deck",
    "DeckDifference",
    "quantities",
    "DraftPick",
    "DraftResult",
    "parse_event_id",
    "MatchResult",
    "MulliganRecord",
]
