"""
Message classifier for Player.log JSON payloads.

``classify`` takes one JSON candidate (as produced by the log reader, or a
raw log line with a leading timestamp/level prefix) and returns exactly one
ParseOutcome. It never raises and never touches the filesystem.
"""
import dataclasses
import json
import logging
from typing import Any, Dict, Union

from .errors import MessageDecodeError
from .messages import ClientMessage, DraftNotify, EngineMessage, MatchStateEvent, TelemetryEvent
from .messages.business import decode_business_request

logger = logging.getLogger(__name__)

CLIENT_TAG = "clientToMatchServiceMessageType"
ROOM_STATE_TAG = "matchGameRoomStateChangedEvent"
GRE_TAG = "greToClientEvent"
DRAFT_NOTIFY_TAGS = ("draftId", "PackCards")

KNOWN_TAGS = (CLIENT_TAG, ROOM_STATE_TAG, GRE_TAG, "PackCards")


@dataclasses.dataclass
class NoMatch:
    """Log noise, or JSON that belongs to no known message family."""


@dataclasses.dataclass
class ParseError:
    reason: str
    raw: str


ParseOutcome = Union[EngineMessage, ClientMessage, MatchStateEvent, TelemetryEvent, DraftNotify, NoMatch, ParseError]


def strip_log_noise(text: str) -> str:
    """Drop anything before the first '{' (timestamps, log level, '[UnityCrossThreadLogger]')."""
    json_start = text.find('{')
    if json_start == -1:
        return ""
    return text[json_start:].strip()


def classify(text: str) -> ParseOutcome:
    """Classify one JSON candidate. First matching tag wins."""
    payload = strip_log_noise(text)
    if not payload:
        return NoMatch()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        if any(tag in payload for tag in KNOWN_TAGS):
            return ParseError(reason=f"Invalid JSON: {e}", raw=payload)
        return NoMatch()

    if not isinstance(data, dict):
        return NoMatch()

    try:
        return _dispatch(data)
    except MessageDecodeError as e:
        logger.debug(f"Failed to decode tagged message: {e}")
        return ParseError(reason=str(e), raw=payload)


def _dispatch(data: Dict[str, Any]) -> ParseOutcome:
    if CLIENT_TAG in data:
        return ClientMessage.from_dict(data)
    if ROOM_STATE_TAG in data:
        return MatchStateEvent.from_dict(data)
    if GRE_TAG in data:
        return EngineMessage.from_dict(data)
    if all(tag in data for tag in DRAFT_NOTIFY_TAGS):
        return DraftNotify.from_dict(data)
    if "request" in data and "id" in data:
        telemetry = decode_business_request(data)
        if telemetry is not None:
            return telemetry
    return NoMatch()
