"""
Engine (GRE) to client messages.

A ``greToClientEvent`` batch carries any number of ``GreMessage`` values.
The kinds the replay derivations read (connection ack, game state
snapshots, mulligan offers, intermissions) are decoded into typed payloads;
every other kind keeps its type string and raw payload only.
"""
import dataclasses
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..errors import MessageDecodeError
from .primitives import (
    GameObjectType,
    ZoneType,
    dict_list,
    get_game_object_type,
    get_zone_type,
    int_list,
    opt_dict,
    opt_int,
    opt_str,
    require_str,
)

MULLIGAN_RESPONSE_PENDING = "ClientMessageType_MulliganResp"


class GreMessageType(Enum):
    """Engine message kinds. Anything not listed decodes as OTHER."""
    CONNECT_RESP = auto()
    DIE_ROLL_RESULTS_RESP = auto()
    GAME_STATE_MESSAGE = auto()
    QUEUED_GAME_STATE_MESSAGE = auto()
    CHOOSE_STARTING_PLAYER_REQ = auto()
    MULLIGAN_REQ = auto()
    INTERMISSION_REQ = auto()
    SUBMIT_DECK_REQ = auto()
    SUBMIT_DECK_CONFIRMATION = auto()
    ACTIONS_AVAILABLE_REQ = auto()
    SET_SETTINGS_RESP = auto()
    DECLARE_ATTACKERS_REQ = auto()
    DECLARE_BLOCKERS_REQ = auto()
    SELECT_TARGETS_REQ = auto()
    SELECT_N_REQ = auto()
    PROMPT_REQ = auto()
    TIMER_STATE_MESSAGE = auto()
    UI_MESSAGE = auto()
    OTHER = auto()


GRE_MESSAGE_TYPE_MAP = {
    "GREMessageType_ConnectResp": GreMessageType.CONNECT_RESP,
    "GREMessageType_DieRollResultsResp": GreMessageType.DIE_ROLL_RESULTS_RESP,
    "GREMessageType_GameStateMessage": GreMessageType.GAME_STATE_MESSAGE,
    "GREMessageType_QueuedGameStateMessage": GreMessageType.QUEUED_GAME_STATE_MESSAGE,
    "GREMessageType_ChooseStartingPlayerReq": GreMessageType.CHOOSE_STARTING_PLAYER_REQ,
    "GREMessageType_MulliganReq": GreMessageType.MULLIGAN_REQ,
    "GREMessageType_IntermissionReq": GreMessageType.INTERMISSION_REQ,
    "GREMessageType_SubmitDeckReq": GreMessageType.SUBMIT_DECK_REQ,
    "GREMessageType_SubmitDeckConfirmation": GreMessageType.SUBMIT_DECK_CONFIRMATION,
    "GREMessageType_ActionsAvailableReq": GreMessageType.ACTIONS_AVAILABLE_REQ,
    "GREMessageType_SetSettingsResp": GreMessageType.SET_SETTINGS_RESP,
    "GREMessageType_DeclareAttackersReq": GreMessageType.DECLARE_ATTACKERS_REQ,
    "GREMessageType_DeclareBlockersReq": GreMessageType.DECLARE_BLOCKERS_REQ,
    "GREMessageType_SelectTargetsReq": GreMessageType.SELECT_TARGETS_REQ,
    "GREMessageType_SelectNReq": GreMessageType.SELECT_N_REQ,
    "GREMessageType_PromptReq": GreMessageType.PROMPT_REQ,
    "GREMessageType_TimerStateMessage": GreMessageType.TIMER_STATE_MESSAGE,
    "GREMessageType_UIMessage": GreMessageType.UI_MESSAGE,
}


def get_gre_message_type(type_str: str) -> GreMessageType:
    return GRE_MESSAGE_TYPE_MAP.get(type_str, GreMessageType.OTHER)


@dataclasses.dataclass
class DeckMessage:
    deck_cards: List[int]
    sideboard_cards: List[int]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeckMessage":
        return cls(
            deck_cards=int_list(data, "deckCards"),
            sideboard_cards=int_list(data, "sideboardCards"),
        )


@dataclasses.dataclass
class ConnectResp:
    deck: Optional[DeckMessage]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectResp":
        deck_data = opt_dict(data, "deckMessage")
        return cls(deck=DeckMessage.from_dict(deck_data) if deck_data is not None else None)


@dataclasses.dataclass
class GamePlayer:
    controller_seat_id: Optional[int]
    system_seat_number: Optional[int]
    team_id: Optional[int]
    life_total: Optional[int]
    pending_message_type: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GamePlayer":
        return cls(
            controller_seat_id=opt_int(data, "controllerSeatId"),
            system_seat_number=opt_int(data, "systemSeatNumber"),
            team_id=opt_int(data, "teamId"),
            life_total=opt_int(data, "lifeTotal"),
            pending_message_type=opt_str(data, "pendingMessageType"),
        )

    @property
    def awaiting_mulligan(self) -> bool:
        return self.pending_message_type == MULLIGAN_RESPONSE_PENDING


@dataclasses.dataclass
class Zone:
    zone_id: int
    zone_type: ZoneType
    owner_seat_id: Optional[int]
    object_instance_ids: List[int]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Zone":
        zone_id = opt_int(data, "zoneId")
        if zone_id is None:
            raise MessageDecodeError("Zone is missing 'zoneId'")
        return cls(
            zone_id=zone_id,
            zone_type=get_zone_type(opt_str(data, "type")),
            owner_seat_id=opt_int(data, "ownerSeatId"),
            object_instance_ids=int_list(data, "objectInstanceIds"),
        )


@dataclasses.dataclass
class GameObject:
    instance_id: int
    grp_id: int
    owner_seat_id: Optional[int]
    zone_id: Optional[int]
    object_type: GameObjectType

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameObject":
        instance_id = opt_int(data, "instanceId")
        grp_id = opt_int(data, "grpId")
        if instance_id is None or grp_id is None:
            raise MessageDecodeError("Game object is missing 'instanceId' or 'grpId'")
        return cls(
            instance_id=instance_id,
            grp_id=grp_id,
            owner_seat_id=opt_int(data, "ownerSeatId"),
            zone_id=opt_int(data, "zoneId"),
            object_type=get_game_object_type(opt_str(data, "type")),
        )

    @property
    def is_card(self) -> bool:
        return self.object_type in (GameObjectType.CARD, GameObjectType.MDFC_BACK)


@dataclasses.dataclass
class TurnInfo:
    turn_number: Optional[int]
    active_player: Optional[int]
    decision_player: Optional[int]
    phase: Optional[str]
    step: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurnInfo":
        return cls(
            turn_number=opt_int(data, "turnNumber"),
            active_player=opt_int(data, "activePlayer"),
            decision_player=opt_int(data, "decisionPlayer"),
            phase=opt_str(data, "phase"),
            step=opt_str(data, "step"),
        )


@dataclasses.dataclass
class GameStateMessage:
    game_state_id: Optional[int]
    players: List[GamePlayer]
    zones: List[Zone]
    game_objects: List[GameObject]
    turn_info: Optional[TurnInfo]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameStateMessage":
        turn_info = opt_dict(data, "turnInfo")
        return cls(
            game_state_id=opt_int(data, "gameStateId"),
            players=[GamePlayer.from_dict(p) for p in dict_list(data, "players")],
            zones=[Zone.from_dict(z) for z in dict_list(data, "zones")],
            game_objects=[GameObject.from_dict(o) for o in dict_list(data, "gameObjects")],
            turn_info=TurnInfo.from_dict(turn_info) if turn_info is not None else None,
        )

    def hand_zone(self, seat_id: int) -> Optional[Zone]:
        for zone in self.zones:
            if zone.zone_type == ZoneType.HAND and zone.owner_seat_id == seat_id:
                return zone
        return None


@dataclasses.dataclass
class MulliganReq:
    mulligan_count: int
    mulligan_type: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MulliganReq":
        return cls(
            mulligan_count=opt_int(data, "mulliganCount") or 0,
            mulligan_type=opt_str(data, "mulliganType"),
        )


@dataclasses.dataclass
class GreMessage:
    """One engine message. Typed payloads are set only for their kind."""
    message_type: GreMessageType
    type_name: str
    msg_id: int
    system_seat_ids: List[int]
    game_state_id: Optional[int]
    raw: Dict[str, Any]
    connect_resp: Optional[ConnectResp] = None
    game_state: Optional[GameStateMessage] = None
    mulligan_req: Optional[MulliganReq] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GreMessage":
        type_name = require_str(data, "type")
        message_type = get_gre_message_type(type_name)
        message = cls(
            message_type=message_type,
            type_name=type_name,
            msg_id=opt_int(data, "msgId") or 0,
            system_seat_ids=int_list(data, "systemSeatIds"),
            game_state_id=opt_int(data, "gameStateId"),
            raw=data,
        )

        if message_type == GreMessageType.CONNECT_RESP:
            payload = opt_dict(data, "connectResp")
            if payload is None:
                raise MessageDecodeError("ConnectResp without 'connectResp' payload")
            message.connect_resp = ConnectResp.from_dict(payload)
        elif message_type == GreMessageType.GAME_STATE_MESSAGE:
            payload = opt_dict(data, "gameStateMessage")
            if payload is None:
                raise MessageDecodeError("GameStateMessage without 'gameStateMessage' payload")
            message.game_state = GameStateMessage.from_dict(payload)
        elif message_type == GreMessageType.MULLIGAN_REQ:
            message.mulligan_req = MulliganReq.from_dict(opt_dict(data, "mulliganReq") or {})
        return message


@dataclasses.dataclass
class EngineMessage:
    """A ``greToClientEvent`` envelope: a batch of engine messages."""
    messages: List[GreMessage]
    request_id: Optional[int]
    timestamp: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineMessage":
        event = opt_dict(data, "greToClientEvent")
        if event is None:
            raise MessageDecodeError("'greToClientEvent' should be an object")
        return cls(
            messages=[GreMessage.from_dict(m) for m in dict_list(event, "greToClientMessages")],
            request_id=opt_int(data, "requestId"),
            timestamp=_timestamp(data),
            raw=data,
        )


def _timestamp(data: Dict[str, Any]) -> Optional[str]:
    # Arena writes this as a string of epoch millis, occasionally as a number
    value = data.get("timestamp")
    if value is None:
        return None
    return str(value)
