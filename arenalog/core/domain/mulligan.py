"""Opening-hand decisions recovered from a match replay."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

DEFAULT_HAND_SIZE = 7

PLAY = "Play"
DRAW = "Draw"
UNKNOWN_PLAY_DRAW = "Unknown"

DECISION_KEEP = "Keep"
DECISION_MULLIGAN = "Mulligan"
DECISION_MATCH_ENDED = "Match Ended"

UNKNOWN_IDENTITY = "Unknown"


@dataclass(frozen=True)
class MulliganRecord:
    """
    One opening-hand decision.

    Attributes:
        match_id: Match the decision belongs to
        game_number: Game within the match (1-based)
        number_to_keep: Hand size threshold, 7 minus mulligans taken so far
        hand: grpIds in the controller's hand when the offer was made
        play_draw: "Play", "Draw", or "Unknown" when it couldn't be determined
        opponent_identity: Sorted color letters seen from the opponent, or "Unknown"
        decision: "Keep", "Mulligan", or "Match Ended" when no response was logged
    """

    match_id: str
    game_number: int
    number_to_keep: int
    hand: Tuple[int, ...] = field(default_factory=tuple)
    play_draw: str = UNKNOWN_PLAY_DRAW
    opponent_identity: str = UNKNOWN_IDENTITY
    decision: str = DECISION_MATCH_ENDED

    @property
    def hand_string(self) -> str:
        return ",".join(str(card) for card in self.hand)

    @property
    def kept(self) -> bool:
        return self.decision == DECISION_KEEP

    def to_dict(self) -> Dict:
        return {
            "match_id": self.match_id,
            "game_number": self.game_number,
            "number_to_keep": self.number_to_keep,
            "hand": list(self.hand),
            "play_draw": self.play_draw,
            "opponent_identity": self.opponent_identity,
            "decision": self.decision,
        }
