"""Builders for Player.log message payloads used across the tests."""
import json
from typing import Dict, List, Optional, Sequence, Tuple

from arenalog.core.parser import classify

LOG_PREFIX = "[UnityCrossThreadLogger]"

MULLIGAN_PENDING = "ClientMessageType_MulliganResp"


def log_line(payload: Dict, prefix: str = LOG_PREFIX) -> str:
    return prefix + json.dumps(payload)


def playing_event(match_id: str = "m1", players: Sequence[Tuple[str, int]] = (("Alice", 2), ("Bob", 1))) -> Dict:
    return {
        "matchGameRoomStateChangedEvent": {
            "gameRoomInfo": {
                "gameRoomConfig": {"matchId": match_id},
                "players": [
                    {"playerName": name, "systemSeatId": seat, "teamId": seat, "userId": f"user-{seat}"}
                    for name, seat in players
                ],
                "stateType": "MatchGameRoomStateType_Playing",
            }
        },
        "requestId": 1,
        "timestamp": "1700000000000",
        "transactionId": "tx-start",
    }


def completed_event(match_id: str = "m1", results: Sequence[Tuple[str, int]] = (("MatchScope_Match", 2),)) -> Dict:
    return {
        "matchGameRoomStateChangedEvent": {
            "gameRoomInfo": {
                "gameRoomConfig": {"matchId": match_id},
                "finalMatchResult": {
                    "matchId": match_id,
                    "resultList": [
                        {"scope": scope, "winningTeamId": winner, "reason": "ResultReason_Game", "result": "ResultType_WinLoss"}
                        for scope, winner in results
                    ],
                },
                "stateType": "MatchGameRoomStateType_MatchCompleted",
            }
        },
        "requestId": 2,
        "timestamp": "1700000600000",
        "transactionId": "tx-end",
    }


def gre_event(*messages: Dict) -> Dict:
    return {
        "greToClientEvent": {"greToClientMessages": list(messages)},
        "requestId": 3,
        "timestamp": "1700000001000",
        "transactionId": "tx-gre",
    }


def connect_resp(seat_ids: Sequence[int] = (2,), deck: Sequence[int] = (1, 2, 3), sideboard: Sequence[int] = ()) -> Dict:
    return {
        "type": "GREMessageType_ConnectResp",
        "msgId": 1,
        "systemSeatIds": list(seat_ids),
        "connectResp": {
            "status": "ConnectionStatus_Success",
            "deckMessage": {"deckCards": list(deck), "sideboardCards": list(sideboard)},
        },
    }


def game_state(
    game_state_id: int,
    pending_seats: Sequence[int] = (),
    seats: Sequence[int] = (1, 2),
    decision_player: Optional[int] = None,
    hand_seat: Optional[int] = None,
    hand: Sequence[int] = (),
    objects: Sequence[Dict] = (),
) -> Dict:
    players = []
    for seat in seats:
        player = {"controllerSeatId": seat, "systemSeatNumber": seat, "teamId": seat, "lifeTotal": 20}
        if seat in pending_seats:
            player["pendingMessageType"] = MULLIGAN_PENDING
        players.append(player)

    gsm = {"gameStateId": game_state_id, "type": "GameStateType_Full", "players": players}
    game_objects = list(objects)
    if hand_seat is not None:
        hand_zone_id = 30 + hand_seat
        instance_ids = [100 + i for i in range(len(hand))]
        gsm["zones"] = [
            {"zoneId": hand_zone_id, "type": "ZoneType_Hand", "visibility": "Visibility_Private",
             "ownerSeatId": hand_seat, "objectInstanceIds": instance_ids},
            {"zoneId": 28, "type": "ZoneType_Battlefield", "visibility": "Visibility_Public"},
        ]
        game_objects += [
            {"instanceId": iid, "grpId": grp_id, "type": "GameObjectType_Card",
             "zoneId": hand_zone_id, "visibility": "Visibility_Private",
             "ownerSeatId": hand_seat, "controllerSeatId": hand_seat}
            for iid, grp_id in zip(instance_ids, hand)
        ]
    if game_objects:
        gsm["gameObjects"] = game_objects
    if decision_player is not None:
        gsm["turnInfo"] = {"decisionPlayer": decision_player, "activePlayer": decision_player}

    return {
        "type": "GREMessageType_GameStateMessage",
        "msgId": game_state_id,
        "systemSeatIds": [2],
        "gameStateId": game_state_id,
        "gameStateMessage": gsm,
    }


def card_object(instance_id: int, grp_id: int, owner: int, zone_id: int = 28, object_type: str = "GameObjectType_Card") -> Dict:
    return {"instanceId": instance_id, "grpId": grp_id, "type": object_type,
            "zoneId": zone_id, "ownerSeatId": owner, "controllerSeatId": owner}


def mulligan_req(game_state_id: int, mulligan_count: int = 0, seat: int = 2) -> Dict:
    req = {"mulliganType": "MulliganType_London"}
    if mulligan_count:
        req["mulliganCount"] = mulligan_count
    return {
        "type": "GREMessageType_MulliganReq",
        "msgId": game_state_id + 1000,
        "systemSeatIds": [seat],
        "gameStateId": game_state_id,
        "prompt": {"promptId": 34},
        "mulliganReq": req,
    }


def intermission_req() -> Dict:
    return {
        "type": "GREMessageType_IntermissionReq",
        "msgId": 900,
        "systemSeatIds": [1, 2],
        "intermissionReq": {"result": {"scope": "MatchScope_Game", "winningTeamId": 1}},
    }


def client_message(payload: Dict) -> Dict:
    return {
        "clientToMatchServiceMessageType": "ClientToMatchServiceMessageType_ClientToGREMessage",
        "requestId": 10,
        "payload": payload,
        "timestamp": "1700000002000",
        "transactionId": "tx-client",
    }


def mulligan_resp(game_state_id: int, accept: bool = True, seat: int = 2) -> Dict:
    decision = "MulliganOption_AcceptHand" if accept else "MulliganOption_Mulligan"
    return client_message({
        "type": "ClientMessageType_MulliganResp",
        "gameStateId": game_state_id,
        "respId": game_state_id + 1000,
        "systemSeatId": seat,
        "mulliganResp": {"decision": decision},
    })


def submit_deck_resp(deck: Sequence[int], sideboard: Sequence[int] = ()) -> Dict:
    return client_message({
        "type": "ClientMessageType_SubmitDeckResp",
        "systemSeatId": 2,
        "submitDeckResp": {"deck": {"deckCards": list(deck), "sideboardCards": list(sideboard)}},
    })


def business_event(request: Dict, request_id: str = "biz-1") -> Dict:
    return {"id": request_id, "request": json.dumps(request)}


def game_business_event(event_id: str = "Traditional_Explorer_Ranked", event_time: str = "2024-11-12T18:30:15.1234567Z",
                        match_id: str = "m1") -> Dict:
    return business_event({
        "EventId": event_id,
        "EventType": 4,
        "EventTime": event_time,
        "MatchId": match_id,
        "SeatId": 2,
        "TeamId": 2,
        "GameNumber": 1,
    })


def draft_pack_event(draft_id: str = "draft-1", pack: int = 1, pick: int = 1, picked: int = 500,
                     cards: Sequence[int] = (500, 501, 502), event_id: str = "PremierDraft_FDN_20241112") -> Dict:
    return business_event({
        "PlayerId": None,
        "ClientPlatform": "Windows",
        "DraftId": draft_id,
        "EventId": event_id,
        "SeatNumber": 1,
        "PackNumber": pack,
        "PickNumber": pick,
        "PickGrpId": picked,
        "CardsInPack": list(cards),
        "AutoPick": False,
        "TimeRemainingOnPick": 42.5,
        "EventType": 24,
        "EventTime": "2024-11-12T18:00:00Z",
    }, request_id=f"draft-{pack}-{pick}")


def draft_notify(draft_id: str = "draft-1", pack: int = 1, pick: int = 1, cards: Sequence[int] = (500, 501, 502)) -> Dict:
    return {"draftId": draft_id, "SelfPick": pick, "SelfPack": pack, "PackCards": ",".join(str(c) for c in cards)}


def single_game_match(match_id: str = "m1") -> List[Dict]:
    """One game: controller seat 2 on the play, keeps seven."""
    return [
        playing_event(match_id),
        gre_event(connect_resp(seat_ids=[2], deck=[1, 2, 3])),
        gre_event(game_state(3, pending_seats=[1, 2], decision_player=2)),
        gre_event(game_state(4, pending_seats=[2], hand_seat=2, hand=[10, 11, 12, 13, 14, 15, 16])),
        gre_event(mulligan_req(5)),
        mulligan_resp(5, accept=True),
        completed_event(match_id, results=[("MatchScope_Match", 2)]),
    ]


def draft_events(draft_id: str = "draft-1") -> List[Dict]:
    """A full 3 x 13 draft."""
    events = []
    for pack in range(1, 4):
        for pick in range(1, 14):
            grp = pack * 1000 + pick
            events.append(draft_pack_event(draft_id, pack, pick, picked=grp, cards=[grp, grp + 100]))
    return events


def classify_all(payloads: Sequence[Dict]) -> List:
    """Classify each payload as if it had been read from the log."""
    return [classify(log_line(p)) for p in payloads]
