"""Draft.Notify: the engine telling the client which cards are in the current pack."""
import dataclasses
from typing import Any, Dict, List

from ..errors import MessageDecodeError
from .primitives import opt_int, require_str


@dataclasses.dataclass
class DraftNotify:
    draft_id: str
    pack_number: int
    pick_number: int
    pack_cards: List[int]
    raw: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DraftNotify":
        # PackCards is a comma-separated string of grpIds
        pack_cards_str = data.get("PackCards", "")
        if not isinstance(pack_cards_str, str):
            raise MessageDecodeError("'PackCards' should be a string")
        try:
            pack_cards = [int(x) for x in pack_cards_str.split(",") if x.strip()]
        except ValueError as e:
            raise MessageDecodeError(f"Invalid card id in PackCards {pack_cards_str!r}") from e

        return cls(
            draft_id=require_str(data, "draftId"),
            pack_number=opt_int(data, "SelfPack") or 0,
            pick_number=opt_int(data, "SelfPick") or 0,
            pack_cards=pack_cards,
            raw=data,
        )
