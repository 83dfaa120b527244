"""
Match replays: accumulating one match's messages and reading them back.

MatchReplayBuilder is a small state machine fed with classified parse
outcomes. It is Idle until a "Playing" room state event opens a match,
collects engine/client messages and relevant telemetry while open, and
reports completion when the "MatchCompleted" room state event arrives.
``build()`` then turns the accumulated context into an immutable
MatchReplay, or raises a ReplayBuildError if the context can't be trusted.

MatchReplay exposes read-only derivations (player names, decklists,
mulligans, results). Each raises NotFoundError rather than returning a
default when the data it needs isn't in the log.
"""
import dataclasses
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .domain.deck import Deck, DeckDifference
from .domain.match_result import GAME_SCOPE, MatchResult
from .domain.mulligan import (
    DECISION_KEEP,
    DECISION_MATCH_ENDED,
    DECISION_MULLIGAN,
    DEFAULT_HAND_SIZE,
    DRAW,
    PLAY,
    UNKNOWN_IDENTITY,
    UNKNOWN_PLAY_DRAW,
    MulliganRecord,
)
from .errors import (
    BoundaryMismatchError,
    ControllerSeatNotFoundError,
    MissingEndBoundaryError,
    MissingMatchIdError,
    MissingStartBoundaryError,
    NotFoundError,
)
from .messages import (
    ClientMessage,
    ClientMessageType,
    DeckMessage,
    EngineMessage,
    GameObjectType,
    GameStateMessage,
    GreMessage,
    GreMessageType,
    MatchStateEvent,
    MulliganOption,
    RoomStateType,
    TelemetryEvent,
)
from .ports import CardLookup

logger = logging.getLogger(__name__)

ReplayMessage = Union[EngineMessage, ClientMessage]


@dataclasses.dataclass
class MatchContext:
    """Mutable accumulator for the match currently being played."""
    match_id: Optional[str] = None
    match_start_message: Optional[MatchStateEvent] = None
    match_end_message: Optional[MatchStateEvent] = None
    client_server_messages: List[ReplayMessage] = dataclasses.field(default_factory=list)
    business_messages: List[TelemetryEvent] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(frozen=True)
class MatchReplay:
    """Immutable record of one finished match, from the controller's seat."""
    match_id: str
    controller_seat_id: int
    match_start_message: MatchStateEvent
    match_end_message: MatchStateEvent
    client_server_messages: Tuple[ReplayMessage, ...]
    business_messages: Tuple[TelemetryEvent, ...]

    # --- message views ----------------------------------------------------

    def gre_messages(self) -> Iterator[GreMessage]:
        for message in self.client_server_messages:
            if isinstance(message, EngineMessage):
                yield from message.messages

    def game_state_messages(self) -> Iterator[GameStateMessage]:
        for gre in self.gre_messages():
            if gre.game_state is not None:
                yield gre.game_state

    def client_messages(self) -> Iterator[ClientMessage]:
        for message in self.client_server_messages:
            if isinstance(message, ClientMessage):
                yield message

    # --- players ----------------------------------------------------------

    def get_player_names(self, seat_id: Optional[int] = None) -> Tuple[str, str]:
        """Return (controller name, opponent name) from the match start roster."""
        if seat_id is None:
            seat_id = self.controller_seat_id
        players = self.match_start_message.players or []
        controller = next((p for p in players if p.system_seat_id == seat_id), None)
        opponent = next((p for p in players if p.system_seat_id != seat_id), None)
        if controller is None or opponent is None:
            raise NotFoundError("Player names")
        return controller.player_name, opponent.player_name

    def get_opponent_cards(self) -> List[int]:
        """grpIds of every opponent-owned card object seen anywhere in the match."""
        cards = []
        for gsm in self.game_state_messages():
            for game_object in gsm.game_objects:
                if game_object.owner_seat_id is None or game_object.owner_seat_id == self.controller_seat_id:
                    continue
                if game_object.is_card:
                    cards.append(game_object.grp_id)
        return cards

    def get_opponent_color_identity(self, cards: CardLookup) -> str:
        colors = set()
        for grp_id in self.get_opponent_cards():
            card = cards.get(grp_id)
            if card is not None:
                colors.update(card.color_identity)
        return "".join(sorted(colors))

    # --- decks ------------------------------------------------------------

    def get_initial_decklist(self) -> DeckMessage:
        for gre in self.gre_messages():
            if gre.connect_resp is not None and gre.connect_resp.deck is not None:
                return gre.connect_resp.deck
        raise NotFoundError("Initial decklist")

    def get_sideboarded_decklists(self) -> List[DeckMessage]:
        decks = []
        for message in self.client_messages():
            if message.payload is not None and message.payload.submitted_deck is not None:
                decks.append(message.payload.submitted_deck)
        return decks

    def get_decklists(self) -> List[Deck]:
        """Decks in the order they were seen, numbered 1..N."""
        deck_messages = [self.get_initial_decklist()] + self.get_sideboarded_decklists()
        return [
            Deck.from_cards(i + 1, deck.deck_cards, deck.sideboard_cards)
            for i, deck in enumerate(deck_messages)
        ]

    def get_decklist_differences(self) -> List[DeckDifference]:
        decks = self.get_decklists()
        return [DeckDifference.between(prev, cur) for prev, cur in zip(decks, decks[1:])]

    # --- mulligans --------------------------------------------------------

    def get_mulligan_infos(self, cards: CardLookup) -> List[MulliganRecord]:
        """
        Rebuild one record per mulligan offer.

        Walks the engine messages once, tracking the game number (bumped on
        each IntermissionReq), who is on the play in each game, the
        controller's hand whenever they are asked to keep or mulligan, and
        the mulligan offers themselves. Hands and offers are paired in order;
        if their counts disagree the whole derivation fails.
        """
        controller_id = self.controller_seat_id

        game_number = 1
        opening_hands: List[Tuple[int, List[int]]] = []
        mulligan_requests: List[Tuple[int, GreMessage]] = []
        play_or_draw: Dict[int, str] = {}

        for gre in self.gre_messages():
            if gre.message_type == GreMessageType.GAME_STATE_MESSAGE and gre.game_state is not None:
                gsm = gre.game_state

                if len(gsm.players) == 2 and all(p.awaiting_mulligan for p in gsm.players):
                    if gsm.turn_info is not None and gsm.turn_info.decision_player is not None:
                        pd = PLAY if gsm.turn_info.decision_player == controller_id else DRAW
                        logger.debug(f"game_number: {game_number}, play_or_draw: {pd}")
                        play_or_draw[game_number] = pd

                if any(p.controller_seat_id == controller_id and p.awaiting_mulligan for p in gsm.players):
                    hand_zone = gsm.hand_zone(controller_id)
                    if hand_zone is None:
                        logger.debug(f"No controller hand zone in game state {gsm.game_state_id}")
                        continue
                    hand = [
                        go.grp_id for go in gsm.game_objects
                        if go.zone_id == hand_zone.zone_id and go.object_type == GameObjectType.CARD
                    ]
                    opening_hands.append((game_number, hand))

            elif gre.message_type == GreMessageType.MULLIGAN_REQ:
                mulligan_requests.append((game_number, gre))

            elif gre.message_type == GreMessageType.INTERMISSION_REQ:
                game_number += 1
                logger.debug(f"Intermission Request, game_number: {game_number}")

        mulligan_responses: Dict[int, MulliganOption] = {}
        for message in self.client_messages():
            payload = message.payload
            if payload is None or payload.message_type != ClientMessageType.MULLIGAN_RESP:
                continue
            if payload.game_state_id is not None and payload.mulligan_decision is not None:
                mulligan_responses[payload.game_state_id] = payload.mulligan_decision

        if len(opening_hands) != len(mulligan_requests):
            logger.warning(
                f"Missing mulligan data for {self.match_id}. "
                f"# of hands: {len(opening_hands)}, # of mulligan requests: {len(mulligan_requests)}"
            )
            raise NotFoundError("Mulligan data")

        opponent_color_identity = self.get_opponent_color_identity(cards)

        records = []
        for (hand_game, hand), (request_game, request) in zip(opening_hands, mulligan_requests):
            if hand_game != request_game:
                logger.warning(f"Invalid mulligan data for {self.match_id}: hand from game {hand_game}, offer from game {request_game}")
                continue
            if request.game_state_id is None:
                logger.warning("No game state ID found for mulligan request")
                continue

            mulligan_count = request.mulligan_req.mulligan_count if request.mulligan_req else 0
            response = mulligan_responses.get(request.game_state_id)
            if response == MulliganOption.ACCEPT_HAND:
                decision = DECISION_KEEP
            elif response == MulliganOption.MULLIGAN:
                decision = DECISION_MULLIGAN
            else:
                decision = DECISION_MATCH_ENDED

            records.append(MulliganRecord(
                match_id=self.match_id,
                game_number=hand_game,
                number_to_keep=DEFAULT_HAND_SIZE - mulligan_count,
                hand=tuple(hand),
                play_draw=play_or_draw.get(hand_game, UNKNOWN_PLAY_DRAW),
                opponent_identity=UNKNOWN_IDENTITY if hand_game == 1 else opponent_color_identity,
                decision=decision,
            ))
        return records

    # --- results and telemetry --------------------------------------------

    def get_match_results(self) -> List[MatchResult]:
        final = self.match_end_message.final_match_result
        if final is None:
            raise NotFoundError("Match results")

        results = []
        game_number = 0
        for entry in final.result_list:
            if entry.scope == GAME_SCOPE:
                game_number += 1
                number = game_number
            else:
                number = 0
            results.append(MatchResult(
                match_id=self.match_id,
                game_number=number,
                winning_team_id=entry.winning_team_id,
                result_scope=entry.scope,
            ))
        return results

    def match_start_time(self):
        """EventTime of the first telemetry event that has one, else None."""
        return next((bm.event_time for bm in self.business_messages if bm.event_time is not None), None)

    def match_format(self) -> Optional[str]:
        """Format label such as "Traditional_Explorer_Ranked", if telemetry had one."""
        return next((bm.event_id for bm in self.business_messages if bm.event_id is not None), None)

    # --- serialization ----------------------------------------------------

    def iter_events(self) -> Iterator[Dict[str, Any]]:
        """Raw events in replay order: start, messages, end, telemetry."""
        yield self.match_start_message.raw
        for message in self.client_server_messages:
            yield message.raw
        yield self.match_end_message.raw
        for bm in self.business_messages:
            yield bm.raw

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(list(self.iter_events()), indent=indent)


class MatchReplayBuilder:
    """Idle / Open state machine over parse outcomes for one log stream."""

    def __init__(self):
        self._context: Optional[MatchContext] = None

    @property
    def is_open(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[MatchContext]:
        return self._context

    def ingest(self, outcome) -> bool:
        """
        Feed one parse outcome. Returns True when the open match just completed
        and ``build()`` should be called.
        """
        if isinstance(outcome, MatchStateEvent):
            return self._ingest_state_event(outcome)

        if self._context is None:
            return False

        if isinstance(outcome, (EngineMessage, ClientMessage)):
            self._context.client_server_messages.append(outcome)
        elif isinstance(outcome, TelemetryEvent) and outcome.is_relevant():
            self._context.business_messages.append(outcome)
        return False

    def _ingest_state_event(self, event: MatchStateEvent) -> bool:
        if event.state == RoomStateType.PLAYING:
            if self._context is None:
                self._context = MatchContext()
                logger.info(f"Match started: {event.match_id}")
            elif self._context.match_id == event.match_id:
                logger.debug(f"Match {event.match_id} reported as playing again")
            else:
                logger.warning(
                    f"Match {event.match_id} opened while {self._context.match_id} was still open; "
                    f"keeping {len(self._context.client_server_messages)} accumulated messages"
                )
            self._context.match_id = event.match_id
            self._context.match_start_message = event
            return False

        if event.state == RoomStateType.MATCH_COMPLETED:
            if self._context is None:
                logger.debug(f"Ignoring match end for {event.effective_match_id}: no match open")
                return False
            self._context.match_end_message = event
            logger.info(f"Match completed: {event.effective_match_id}")
            return True

        return False

    def abandon(self) -> Optional[MatchContext]:
        """Drop the open match, if any, without building it."""
        context, self._context = self._context, None
        if context is not None:
            logger.info(f"Abandoned in-progress match {context.match_id}")
        return context

    def build(self) -> MatchReplay:
        """Consume the open context. The builder is Idle afterwards either way."""
        context, self._context = self._context, None
        if context is None or not context.match_id:
            raise MissingMatchIdError()
        if context.match_start_message is None:
            raise MissingStartBoundaryError()
        if context.match_end_message is None:
            raise MissingEndBoundaryError()

        end_id = context.match_end_message.effective_match_id
        if end_id is not None and end_id != context.match_id:
            raise BoundaryMismatchError(context.match_id, end_id)

        controller_seat_id = _find_controller_seat_id(context.client_server_messages)
        if controller_seat_id is None:
            raise ControllerSeatNotFoundError()

        return MatchReplay(
            match_id=context.match_id,
            controller_seat_id=controller_seat_id,
            match_start_message=context.match_start_message,
            match_end_message=context.match_end_message,
            client_server_messages=tuple(context.client_server_messages),
            business_messages=tuple(context.business_messages),
        )


def _find_controller_seat_id(messages: List[ReplayMessage]) -> Optional[int]:
    for message in messages:
        if not isinstance(message, EngineMessage):
            continue
        for gre in message.messages:
            if gre.message_type == GreMessageType.CONNECT_RESP and gre.system_seat_ids:
                return gre.system_seat_ids[0]
    return None
