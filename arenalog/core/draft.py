"""
Draft builder.

Same shape as the match replay builder, driven by business telemetry: each
draft pack event records one pick, and the draft is complete once pack 3
pick 13 has been seen.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .domain.draft import DraftPick, DraftResult, parse_event_id
from .errors import DraftBuildError
from .messages import DraftPackInfo, TelemetryEvent

logger = logging.getLogger(__name__)

LAST_PACK = 3
LAST_PICK = 13


@dataclass
class DraftContext:
    draft_id: Optional[str] = None
    event_id: Optional[str] = None
    picks: List[DraftPick] = field(default_factory=list)


class DraftBuilder:
    """Idle / Open state machine over draft pack telemetry."""

    def __init__(self):
        self._context: Optional[DraftContext] = None

    @property
    def is_open(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[DraftContext]:
        return self._context

    def ingest(self, outcome) -> bool:
        """Feed one parse outcome. Returns True once the last pick has been recorded."""
        if not isinstance(outcome, TelemetryEvent) or not outcome.is_draft_pack():
            return False
        return self.process_pack_event(outcome.draft_pack)

    def process_pack_event(self, pack: DraftPackInfo) -> bool:
        if self._context is not None and self._context.draft_id != pack.draft_id:
            logger.warning(
                f"Draft {pack.draft_id} started while {self._context.draft_id} was open "
                f"after {len(self._context.picks)} picks; discarding the earlier draft"
            )
            self._context = None

        if self._context is None:
            self._context = DraftContext(draft_id=pack.draft_id)
            logger.info(f"Draft started: {pack.draft_id}")

        if pack.event_id:
            self._context.event_id = pack.event_id
        self._context.picks.append(DraftPick(
            pack_number=pack.pack_number,
            pick_number=pack.pick_number,
            picked_card=pack.pick_grp_id,
            offered_cards=tuple(pack.cards_in_pack),
        ))
        logger.info(f"Pack #{pack.pack_number}, Pick #{pack.pick_number}")

        return pack.pack_number == LAST_PACK and pack.pick_number == LAST_PICK

    def abandon(self) -> Optional[DraftContext]:
        context, self._context = self._context, None
        return context

    def build(self) -> DraftResult:
        """Consume the open draft. The builder is Idle afterwards either way."""
        context, self._context = self._context, None
        if context is None or not context.draft_id or not context.event_id:
            raise DraftBuildError("Can't locate draft_id or event_id")

        draft_format, set_code = parse_event_id(context.event_id)
        return DraftResult(
            draft_id=context.draft_id,
            event_id=context.event_id,
            format=draft_format,
            set_code=set_code,
            picks=tuple(context.picks),
        )
