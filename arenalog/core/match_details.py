"""
Presentation-ready summary of a match replay.

Unlike the replay derivations, assembly here never fails: each sub-record
that can't be derived is logged and replaced by an empty default, so one
missing piece (say, the mulligan data) doesn't blank the whole record.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .domain.deck import Deck, DeckDifference
from .domain.match_result import MatchResult
from .domain.mulligan import MulliganRecord
from .errors import NotFoundError
from .ports import CardLookup
from .replay import MatchReplay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameResultDisplay:
    game_number: int
    winning_player: str

    @classmethod
    def from_match_result(
        cls,
        result: MatchResult,
        controller_seat_id: int,
        controller_player_name: str,
        opponent_player_name: str,
    ) -> "GameResultDisplay":
        winner = controller_player_name if result.winning_team_id == controller_seat_id else opponent_player_name
        return cls(game_number=result.game_number, winning_player=winner)


@dataclass
class MatchDetails:
    id: str
    controller_seat_id: int
    controller_player_name: str = ""
    opponent_player_name: str = ""
    did_controller_win: bool = False
    created_at: Optional[datetime] = None
    format: Optional[str] = None
    primary_decklist: Optional[Deck] = None
    decklists: List[Deck] = field(default_factory=list)
    differences: List[DeckDifference] = field(default_factory=list)
    mulligans: List[MulliganRecord] = field(default_factory=list)
    game_results: List[GameResultDisplay] = field(default_factory=list)

    @classmethod
    def from_replay(cls, replay: MatchReplay, cards: CardLookup) -> "MatchDetails":
        details = cls(
            id=replay.match_id,
            controller_seat_id=replay.controller_seat_id,
            created_at=replay.match_start_time(),
            format=replay.match_format(),
        )

        try:
            details.controller_player_name, details.opponent_player_name = replay.get_player_names()
        except NotFoundError as e:
            logger.error(f"{replay.match_id}: {e}")

        try:
            details.decklists = replay.get_decklists()
            details.differences = replay.get_decklist_differences()
        except NotFoundError as e:
            logger.error(f"{replay.match_id}: {e}")
        details.primary_decklist = details.decklists[0] if details.decklists else None

        try:
            mulligans = replay.get_mulligan_infos(cards)
            details.mulligans = sorted(mulligans, key=lambda m: (m.game_number, -m.number_to_keep))
        except NotFoundError as e:
            logger.error(f"{replay.match_id}: {e}")

        try:
            results = replay.get_match_results()
        except NotFoundError as e:
            logger.error(f"{replay.match_id}: {e}")
            results = []

        for result in results:
            if result.is_match_result:
                details.did_controller_win = result.winning_team_id == replay.controller_seat_id
            elif result.is_game_result:
                details.game_results.append(GameResultDisplay.from_match_result(
                    result,
                    replay.controller_seat_id,
                    details.controller_player_name,
                    details.opponent_player_name,
                ))
        return details

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "controller_seat_id": self.controller_seat_id,
            "controller_player_name": self.controller_player_name,
            "opponent_player_name": self.opponent_player_name,
            "did_controller_win": self.did_controller_win,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "format": self.format,
            "primary_decklist": self.primary_decklist.to_dict() if self.primary_decklist else None,
            "decklists": [d.to_dict() for d in self.decklists],
            "differences": [d.to_dict() for d in self.differences],
            "mulligans": [m.to_dict() for m in self.mulligans],
            "game_results": [
                {"game_number": g.game_number, "winning_player": g.winning_player}
                for g in self.game_results
            ],
        }
