from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional

from .grid import Grid


class Faction(Enum):
    ELF = "E"
    GOBLIN = "G"

    @property
    def opponent(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF


class Position(NamedTuple):
    """Grid coordinate. Tuple ordering is reading order: row first, then column."""
    row: int
    col: int

    def neighbors(self) -> Iterator["Position"]:
        """Yield the four orthogonal neighbors in reading order."""
        yield Position(self.row - 1, self.col)
        yield Position(self.row, self.col - 1)
        yield Position(self.row, self.col + 1)
        yield Position(self.row + 1, self.col)


@dataclass
class Unit:
    id: int  # Stable handle into State.units
    faction: Faction
    pos: Position
    hp: int
    attack_power: int

    @property
    def alive(self) -> bool:
        return self.hp > 0


@dataclass
class Event:
    kind: str
    round: int
    data: Dict


@dataclass
class State:
    grid: Grid
    units: List[Unit] = field(default_factory=list)
    rounds: int = 0

    def living(self, faction: Optional[Faction] = None) -> List[Unit]:
        """Live units, optionally restricted to one faction."""
        return [u for u in self.units
                if u.alive and (faction is None or u.faction is faction)]

    def hp_remaining(self) -> int:
        return sum(u.hp for u in self.units if u.alive)


@dataclass
class Outcome:
    rounds: int
    hp_remaining: int
    winner: Optional[Faction]
    elf_power: int
    elf_losses: int

    @property
    def score(self) -> int:
        """Completed rounds times surviving hit points."""
        return self.rounds * self.hp_remaining
