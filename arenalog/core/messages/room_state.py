"""Match game room state change events: the match start/end boundaries."""
import dataclasses
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from ..errors import MessageDecodeError
from .gre import _timestamp
from .primitives import dict_list, opt_dict, opt_int, opt_str


class RoomStateType(Enum):
    PLAYING = auto()
    MATCH_COMPLETED = auto()
    OTHER = auto()


ROOM_STATE_TYPE_MAP = {
    "MatchGameRoomStateType_Playing": RoomStateType.PLAYING,
    "MatchGameRoomStateType_MatchCompleted": RoomStateType.MATCH_COMPLETED,
}


@dataclasses.dataclass
class RoomPlayer:
    player_name: str
    system_seat_id: int
    team_id: Optional[int]
    user_id: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoomPlayer":
        seat = opt_int(data, "systemSeatId")
        if seat is None:
            raise MessageDecodeError("Room player is missing 'systemSeatId'")
        return cls(
            player_name=opt_str(data, "playerName") or "",
            system_seat_id=seat,
            team_id=opt_int(data, "teamId"),
            user_id=opt_str(data, "userId"),
        )


@dataclasses.dataclass
class ResultEntry:
    scope: str
    winning_team_id: int
    reason: Optional[str]
    result: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultEntry":
        winning_team_id = opt_int(data, "winningTeamId")
        if winning_team_id is None:
            raise MessageDecodeError("Result entry is missing 'winningTeamId'")
        return cls(
            scope=opt_str(data, "scope") or "",
            winning_team_id=winning_team_id,
            reason=opt_str(data, "reason"),
            result=opt_str(data, "result"),
        )


@dataclasses.dataclass
class FinalMatchResult:
    match_id: Optional[str]
    result_list: List[ResultEntry]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinalMatchResult":
        return cls(
            match_id=opt_str(data, "matchId"),
            result_list=[ResultEntry.from_dict(r) for r in dict_list(data, "resultList")],
        )


@dataclasses.dataclass
class MatchStateEvent:
    """A ``matchGameRoomStateChangedEvent`` envelope."""
    state: RoomStateType
    state_name: str
    match_id: Optional[str]
    players: Optional[List[RoomPlayer]]
    final_match_result: Optional[FinalMatchResult]
    request_id: Optional[int]
    timestamp: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchStateEvent":
        event = opt_dict(data, "matchGameRoomStateChangedEvent")
        if event is None:
            raise MessageDecodeError("'matchGameRoomStateChangedEvent' should be an object")
        room = opt_dict(event, "gameRoomInfo")
        if room is None:
            raise MessageDecodeError("Room state event is missing 'gameRoomInfo'")

        state_name = opt_str(room, "stateType") or ""
        config = opt_dict(room, "gameRoomConfig") or {}
        final = opt_dict(room, "finalMatchResult")
        players = None
        if room.get("players") is not None:
            players = [RoomPlayer.from_dict(p) for p in dict_list(room, "players")]

        return cls(
            state=ROOM_STATE_TYPE_MAP.get(state_name, RoomStateType.OTHER),
            state_name=state_name,
            match_id=opt_str(config, "matchId") or None,
            players=players,
            final_match_result=FinalMatchResult.from_dict(final) if final is not None else None,
            request_id=opt_int(data, "requestId"),
            timestamp=_timestamp(data),
            raw=data,
        )

    @property
    def effective_match_id(self) -> Optional[str]:
        """Match id from the room config, falling back to the final result."""
        if self.match_id:
            return self.match_id
        if self.final_match_result is not None:
            return self.final_match_result.match_id
        return None
