from dataclasses import dataclass
from typing import Dict

GAME_SCOPE = "MatchScope_Game"
MATCH_SCOPE = "MatchScope_Match"


@dataclass(frozen=True)
class MatchResult:
    """A single result entry. Match-scoped results use game number 0."""

    match_id: str
    game_number: int
    winning_team_id: int
    result_scope: str

    @property
    def is_game_result(self) -> bool:
        return self.result_scope == GAME_SCOPE

    @property
    def is_match_result(self) -> bool:
        return self.result_scope == MATCH_SCOPE

    def to_dict(self) -> Dict:
        return {
            "match_id": self.match_id,
            "game_number": self.game_number,
            "winning_team_id": self.winning_team_id,
            "result_scope": self.result_scope,
        }
