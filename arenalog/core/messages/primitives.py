"""Shared field helpers and enums for decoding Arena wire messages."""
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..errors import MessageDecodeError


class ZoneType(Enum):
    """Zone types the replay derivations care about."""
    UNKNOWN = auto()
    HAND = auto()
    BATTLEFIELD = auto()
    GRAVEYARD = auto()
    EXILE = auto()
    LIBRARY = auto()
    STACK = auto()
    COMMAND = auto()
    LIMBO = auto()
    REVEALED = auto()
    SIDEBOARD = auto()
    PENDING = auto()


ZONE_TYPE_MAP = {
    "ZoneType_Hand": ZoneType.HAND,
    "ZoneType_Battlefield": ZoneType.BATTLEFIELD,
    "ZoneType_Graveyard": ZoneType.GRAVEYARD,
    "ZoneType_Exile": ZoneType.EXILE,
    "ZoneType_Library": ZoneType.LIBRARY,
    "ZoneType_Stack": ZoneType.STACK,
    "ZoneType_Command": ZoneType.COMMAND,
    "ZoneType_Limbo": ZoneType.LIMBO,
    "ZoneType_Revealed": ZoneType.REVEALED,
    "ZoneType_Sideboard": ZoneType.SIDEBOARD,
    "ZoneType_Pending": ZoneType.PENDING,
}


def get_zone_type(zone_type_str: Optional[str]) -> ZoneType:
    """Convert Arena zone type string to ZoneType enum."""
    return ZONE_TYPE_MAP.get(zone_type_str, ZoneType.UNKNOWN)


class GameObjectType(Enum):
    UNKNOWN = auto()
    CARD = auto()
    REVEALED_CARD = auto()
    TRIGGER_HOLDER = auto()
    MDFC_BACK = auto()
    ABILITY = auto()
    TOKEN = auto()
    ADVENTURE = auto()
    DISTURB_BACK = auto()
    SPLIT_LEFT = auto()
    SPLIT_RIGHT = auto()
    ROOM_LEFT = auto()
    ROOM_RIGHT = auto()
    OMEN = auto()


GAME_OBJECT_TYPE_MAP = {
    "GameObjectType_Card": GameObjectType.CARD,
    "GameObjectType_RevealedCard": GameObjectType.REVEALED_CARD,
    "GameObjectType_TriggerHolder": GameObjectType.TRIGGER_HOLDER,
    "GameObjectType_MDFCBack": GameObjectType.MDFC_BACK,
    "GameObjectType_Ability": GameObjectType.ABILITY,
    "GameObjectType_Token": GameObjectType.TOKEN,
    "GameObjectType_Adventure": GameObjectType.ADVENTURE,
    "GameObjectType_DisturbBack": GameObjectType.DISTURB_BACK,
    "GameObjectType_SplitLeft": GameObjectType.SPLIT_LEFT,
    "GameObjectType_SplitRight": GameObjectType.SPLIT_RIGHT,
    "GameObjectType_RoomLeft": GameObjectType.ROOM_LEFT,
    "GameObjectType_RoomRight": GameObjectType.ROOM_RIGHT,
    "GameObjectType_Omen": GameObjectType.OMEN,
}


def get_game_object_type(type_str: Optional[str]) -> GameObjectType:
    return GAME_OBJECT_TYPE_MAP.get(type_str, GameObjectType.UNKNOWN)


# Field readers. Absent fields are fine; present fields of the wrong
# shape mean the payload is not what its tag claims.

def opt_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MessageDecodeError(f"Field '{key}' should be an integer, got {value!r}")
    return value


def opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MessageDecodeError(f"Field '{key}' should be a string, got {value!r}")
    return value


def opt_dict(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MessageDecodeError(f"Field '{key}' should be an object")
    return value


def dict_list(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise MessageDecodeError(f"Field '{key}' should be a list of objects")
    return value


def int_list(data: Dict[str, Any], key: str) -> List[int]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MessageDecodeError(f"Field '{key}' should be a list of integers")
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int):
            raise MessageDecodeError(f"Field '{key}' should be a list of integers")
    return list(value)


def require_str(data: Dict[str, Any], key: str) -> str:
    value = opt_str(data, key)
    if value is None:
        raise MessageDecodeError(f"Missing required field '{key}'")
    return value
