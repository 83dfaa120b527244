"""Wire message types for the message families found in Player.log."""
from .business import DraftPackInfo, DraftPickInfo, TelemetryEvent, TelemetryKind
from .client import ClientMessage, ClientMessageType, ClientPayload, MulliganOption
from .draft import DraftNotify
from .gre import (
    ConnectResp,
    DeckMessage,
    EngineMessage,
    GameObject,
    GamePlayer,
    GameStateMessage,
    GreMessage,
    GreMessageType,
    MulliganReq,
    TurnInfo,
    Zone,
)
from .primitives import GameObjectType, ZoneType
from .room_state import FinalMatchResult, MatchStateEvent, ResultEntry, RoomPlayer, RoomStateType

__all__ = [
    'ClientMessage', 'ClientMessageType', 'ClientPayload', 'ConnectResp', 'DeckMessage',
    'DraftNotify', 'DraftPackInfo', 'DraftPickInfo', 'EngineMessage', 'FinalMatchResult',
    'GameObject', 'GameObjectType', 'GamePlayer', 'GameStateMessage', 'GreMessage',
    'GreMessageType', 'MatchStateEvent', 'MulliganOption', 'MulliganReq', 'ResultEntry',
    'RoomPlayer', 'RoomStateType', 'TelemetryEvent', 'TelemetryKind', 'TurnInfo', 'Zone',
    'ZoneType',
]
