"""Completed draft records."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class DraftPick:
    """The card taken from one pack, and what else was in it."""

    pack_number: int
    pick_number: int
    picked_card: Optional[int]
    offered_cards: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        return {
            "pack_number": self.pack_number,
            "pick_number": self.pick_number,
            "picked_card": self.picked_card,
            "offered_cards": list(self.offered_cards),
        }


@dataclass(frozen=True)
class DraftResult:
    draft_id: str
    event_id: str
    format: str
    set_code: str
    picks: Tuple[DraftPick, ...] = field(default_factory=tuple)

    @property
    def picked_cards(self) -> List[int]:
        return [p.picked_card for p in self.picks if p.picked_card is not None]

    def to_dict(self) -> Dict:
        return {
            "draft_id": self.draft_id,
            "event_id": self.event_id,
            "format": self.format,
            "set_code": self.set_code,
            "picks": [p.to_dict() for p in self.picks],
        }


def parse_event_id(event_id: str) -> Tuple[str, str]:
    """
    Split a draft event id into (format, set code).

    Event ids look like "PremierDraft_FDN_20241112". Anything that isn't
    exactly three underscore-separated parts gives ("", "").
    """
    parts = event_id.split("_")
    if len(parts) != 3:
        return "", ""
    return parts[0], parts[1]
