"""Ports (interfaces) used by the ingestion core.

Sinks receive finished aggregates; the card lookup is the only external
data the replay derivations read.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from .domain.draft import DraftResult
    from .replay import MatchReplay


@dataclass(frozen=True)
class CardAttributes:
    """The card fields the core needs. Colors are single letters (W, U, B, R, G)."""

    grp_id: int
    name: str = ""
    colors: Tuple[str, ...] = field(default_factory=tuple)
    color_identity: Tuple[str, ...] = field(default_factory=tuple)
    set_code: str = ""
    type_line: str = ""


class CardLookup(Protocol):
    def get(self, card_id: int) -> Optional[CardAttributes]:
        ...


class ReplayWriter(Protocol):
    """Async sink for completed match replays. Raise to signal failure."""

    async def write(self, replay: "MatchReplay") -> None:
        ...


class DraftWriter(Protocol):
    """Async sink for completed drafts. Raise to signal failure."""

    async def write(self, draft: "DraftResult") -> None:
        ...
