"""
Decklists recovered from a match replay.

Card ids are Arena grpIds. A deck's game number is assigned by the order in
which decks were observed during the match (1, 2, 3...), never read from
the log.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

FOUND_DECK_NAME = "Found Deck"

Quantities = Dict[int, int]


def quantities(cards: List[int]) -> Quantities:
    """Count copies of each card id."""
    return dict(Counter(cards))


@dataclass(frozen=True)
class Deck:
    """One game's mainboard and sideboard."""

    name: str
    game_number: int
    mainboard: Tuple[int, ...] = field(default_factory=tuple)
    sideboard: Tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_cards(
        cls,
        game_number: int,
        mainboard: List[int],
        sideboard: List[int],
        name: str = FOUND_DECK_NAME,
    ) -> "Deck":
        return cls(name=name, game_number=game_number, mainboard=tuple(mainboard), sideboard=tuple(sideboard))

    @classmethod
    def empty(cls, name: str = FOUND_DECK_NAME) -> "Deck":
        return cls(name=name, game_number=0)

    @property
    def mainboard_size(self) -> int:
        return len(self.mainboard)

    @property
    def sideboard_size(self) -> int:
        return len(self.sideboard)

    def mainboard_quantities(self) -> Quantities:
        return quantities(list(self.mainboard))

    def sideboard_quantities(self) -> Quantities:
        return quantities(list(self.sideboard))

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "game_number": self.game_number,
            "mainboard": list(self.mainboard),
            "sideboard": list(self.sideboard),
        }

    def __str__(self) -> str:
        main = "".join(f"{card}\n" for card in self.mainboard)
        side = "".join(f"{card}\n" for card in self.sideboard)
        return (
            f"{self.name}\n"
            f"Mainboard: {self.mainboard_size} cards\n{main}"
            f"Sideboard: {self.sideboard_size} cards\n{side}"
        )


@dataclass(frozen=True)
class DeckDifference:
    """
    Mainboard changes between two consecutive games.

    Attributes:
        from_game: Game number of the earlier deck
        to_game: Game number of the later deck
        added: Cards brought in, with how many copies
        removed: Cards taken out, with how many copies
    """

    from_game: int
    to_game: int
    added: Quantities
    removed: Quantities

    @classmethod
    def between(cls, previous: Deck, current: Deck) -> "DeckDifference":
        before = Counter(previous.mainboard)
        after = Counter(current.mainboard)
        return cls(
            from_game=previous.game_number,
            to_game=current.game_number,
            added=dict(after - before),
            removed=dict(before - after),
        )

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def to_dict(self) -> Dict:
        return {
            "from_game": self.from_game,
            "to_game": self.to_game,
            "added": {str(k): v for k, v in self.added.items()},
            "removed": {str(k): v for k, v in self.removed.items()},
        }
