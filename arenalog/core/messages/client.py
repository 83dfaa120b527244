"""Client to match service messages (player decisions and submissions)."""
import dataclasses
from enum import Enum, auto
from typing import Any, Dict, Optional

from ..errors import MessageDecodeError
from .gre import DeckMessage, _timestamp
from .primitives import opt_dict, opt_int, opt_str, require_str


class ClientMessageType(Enum):
    MULLIGAN_RESP = auto()
    SUBMIT_DECK_RESP = auto()
    CHOOSE_STARTING_PLAYER_RESP = auto()
    PERFORM_ACTION_RESP = auto()
    SET_SETTINGS_REQ = auto()
    CONCEDE_REQ = auto()
    UI_MESSAGE = auto()
    OTHER = auto()


CLIENT_MESSAGE_TYPE_MAP = {
    "ClientMessageType_MulliganResp": ClientMessageType.MULLIGAN_RESP,
    "ClientMessageType_SubmitDeckResp": ClientMessageType.SUBMIT_DECK_RESP,
    "ClientMessageType_ChooseStartingPlayerResp": ClientMessageType.CHOOSE_STARTING_PLAYER_RESP,
    "ClientMessageType_PerformActionResp": ClientMessageType.PERFORM_ACTION_RESP,
    "ClientMessageType_SetSettingsReq": ClientMessageType.SET_SETTINGS_REQ,
    "ClientMessageType_ConcedeReq": ClientMessageType.CONCEDE_REQ,
    "ClientMessageType_UIMessage": ClientMessageType.UI_MESSAGE,
}


class MulliganOption(Enum):
    ACCEPT_HAND = "MulliganOption_AcceptHand"
    MULLIGAN = "MulliganOption_Mulligan"


@dataclasses.dataclass
class ClientPayload:
    message_type: ClientMessageType
    type_name: str
    game_state_id: Optional[int]
    resp_id: Optional[int]
    system_seat_id: Optional[int]
    raw: Dict[str, Any]
    mulligan_decision: Optional[MulliganOption] = None
    submitted_deck: Optional[DeckMessage] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientPayload":
        type_name = require_str(data, "type")
        message_type = CLIENT_MESSAGE_TYPE_MAP.get(type_name, ClientMessageType.OTHER)
        payload = cls(
            message_type=message_type,
            type_name=type_name,
            game_state_id=opt_int(data, "gameStateId"),
            resp_id=opt_int(data, "respId"),
            system_seat_id=opt_int(data, "systemSeatId"),
            raw=data,
        )

        if message_type == ClientMessageType.MULLIGAN_RESP:
            resp = opt_dict(data, "mulliganResp") or {}
            decision = opt_str(resp, "decision")
            try:
                payload.mulligan_decision = MulliganOption(decision)
            except ValueError as e:
                raise MessageDecodeError(f"Unknown mulligan decision {decision!r}") from e
        elif message_type == ClientMessageType.SUBMIT_DECK_RESP:
            resp = opt_dict(data, "submitDeckResp") or {}
            deck = opt_dict(resp, "deck")
            if deck is None:
                raise MessageDecodeError("SubmitDeckResp without 'deck'")
            payload.submitted_deck = DeckMessage.from_dict(deck)
        return payload


@dataclasses.dataclass
class ClientMessage:
    """A ``clientToMatchServiceMessageType`` envelope."""
    service_message_type: str
    request_id: Optional[int]
    timestamp: Optional[str]
    payload: Optional[ClientPayload]
    raw: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientMessage":
        payload = data.get("payload")
        # Some service messages (e.g. auth) carry an opaque string payload
        if payload is not None and not isinstance(payload, (dict, str)):
            raise MessageDecodeError("'payload' should be an object")
        return cls(
            service_message_type=require_str(data, "clientToMatchServiceMessageType"),
            request_id=opt_int(data, "requestId"),
            timestamp=_timestamp(data),
            payload=ClientPayload.from_dict(payload) if isinstance(payload, dict) else None,
            raw=data,
        )
