"""
Business (telemetry) events.

These arrive as ``{"id": "...", "request": "<json string>"}`` where the
inner JSON uses PascalCase keys. Game events give us the match start time
and format label; draft pack events drive the draft builder.
"""
import dataclasses
import json
import re
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..errors import MessageDecodeError
from .primitives import int_list, opt_int, opt_str

BUSINESS_MARKERS = ("EventId", "EventTime", "EventType", "DraftId")

_FRACTION_RE = re.compile(r"\.(\d+)")


class TelemetryKind(Enum):
    GAME = auto()
    DRAFT_PACK = auto()
    DRAFT_PICK = auto()
    OTHER = auto()


def parse_event_time(value: Optional[str]) -> Optional[datetime]:
    """Parse Arena's ISO-8601 timestamps (``Z`` suffix, 7 digit fractions)."""
    if value is None:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat only takes up to microseconds
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MessageDecodeError(f"Invalid EventTime {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclasses.dataclass
class DraftPackInfo:
    draft_id: str
    event_id: str
    pack_number: int
    pick_number: int
    pick_grp_id: Optional[int]
    cards_in_pack: List[int]
    seat_number: Optional[int] = None
    auto_pick: bool = False
    time_remaining_on_pick: Optional[float] = None


@dataclasses.dataclass
class DraftPickInfo:
    draft_id: str
    grp_ids: List[int]
    pack: int
    pick: int


@dataclasses.dataclass
class TelemetryEvent:
    request_id: str
    kind: TelemetryKind
    event_id: Optional[str]
    event_type: Optional[int]
    event_time: Optional[datetime]
    match_id: Optional[str]
    seat_id: Optional[int]
    team_id: Optional[int]
    game_number: Optional[int]
    request: Dict[str, Any]
    raw: Dict[str, Any]
    draft_pack: Optional[DraftPackInfo] = None
    draft_pick: Optional[DraftPickInfo] = None

    @classmethod
    def from_request(cls, request_id: str, request: Dict[str, Any], raw: Dict[str, Any]) -> "TelemetryEvent":
        event = cls(
            request_id=request_id,
            kind=TelemetryKind.OTHER,
            event_id=opt_str(request, "EventId"),
            event_type=opt_int(request, "EventType"),
            event_time=parse_event_time(opt_str(request, "EventTime")),
            match_id=opt_str(request, "MatchId"),
            seat_id=opt_int(request, "SeatId"),
            team_id=opt_int(request, "TeamId"),
            game_number=opt_int(request, "GameNumber"),
            request=request,
            raw=raw,
        )

        draft_id = opt_str(request, "DraftId")
        if draft_id and "CardsInPack" in request:
            event.kind = TelemetryKind.DRAFT_PACK
            time_remaining = request.get("TimeRemainingOnPick")
            event.draft_pack = DraftPackInfo(
                draft_id=draft_id,
                event_id=event.event_id or "",
                pack_number=opt_int(request, "PackNumber") or 0,
                pick_number=opt_int(request, "PickNumber") or 0,
                pick_grp_id=opt_int(request, "PickGrpId"),
                cards_in_pack=int_list(request, "CardsInPack"),
                seat_number=opt_int(request, "SeatNumber"),
                auto_pick=bool(request.get("AutoPick", False)),
                time_remaining_on_pick=float(time_remaining) if isinstance(time_remaining, (int, float)) else None,
            )
        elif draft_id and "GrpIds" in request:
            event.kind = TelemetryKind.DRAFT_PICK
            event.draft_pick = DraftPickInfo(
                draft_id=draft_id,
                grp_ids=int_list(request, "GrpIds"),
                pack=opt_int(request, "Pack") or 0,
                pick=opt_int(request, "Pick") or 0,
            )
        elif event.event_id is not None or event.event_time is not None:
            event.kind = TelemetryKind.GAME
        return event

    def is_relevant(self) -> bool:
        """Whether a match replay should keep this event."""
        return self.kind == TelemetryKind.GAME

    def is_draft_pack(self) -> bool:
        return self.kind == TelemetryKind.DRAFT_PACK and bool(self.draft_pack and self.draft_pack.cards_in_pack)


def decode_business_request(data: Dict[str, Any]) -> Optional[TelemetryEvent]:
    """
    Decode a ``{"id", "request"}`` envelope.

    Returns None when the request is not business telemetry (Arena logs
    plenty of other API traffic in the same shape). Raises
    MessageDecodeError when the request looks like JSON but does not decode.
    """
    request_text = data.get("request")
    request_id = data.get("id")
    if not isinstance(request_text, str) or not isinstance(request_id, str):
        return None
    if not request_text.lstrip().startswith("{"):
        return None
    try:
        request = json.loads(request_text)
    except json.JSONDecodeError as e:
        raise MessageDecodeError(f"Business request is not valid JSON: {e}") from e
    if not isinstance(request, dict) or not any(marker in request for marker in BUSINESS_MARKERS):
        return None
    return TelemetryEvent.from_request(request_id, request, data)
