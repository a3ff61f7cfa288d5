import logging
from typing import List

from .config import DEFAULT_ATTACK_POWER, DEFAULT_HIT_POINTS, ELF, GOBLIN, OPEN, WALL
from .errors import ParseError
from .grid import Grid
from .model import Faction, Position, State, Unit

log = logging.getLogger(__name__)

_FACTIONS = {ELF: Faction.ELF, GOBLIN: Faction.GOBLIN}


def _rows(text: str) -> List[str]:
    rows = [line.rstrip("\r") for line in text.splitlines()]
    while rows and not rows[0].strip():
        rows.pop(0)
    while rows and not rows[-1].strip():
        rows.pop()
    return rows


def parse_battlefield(text: str, hp: int = DEFAULT_HIT_POINTS,
                      goblin_power: int = DEFAULT_ATTACK_POWER,
                      elf_power: int = DEFAULT_ATTACK_POWER) -> State:
    """Turn a battlefield drawing into a fresh State.

    '#' is wall, '.' is open floor, 'E' and 'G' are elves and goblins standing
    on open floor. Units get handles in reading order.
    """
    rows = _rows(text)
    if not rows:
        raise ParseError("Battlefield is empty")

    width = len(rows[0])
    units: List[Unit] = []
    for r, row in enumerate(rows):
        if len(row) != width:
            raise ParseError(f"Row {r} has width {len(row)}, expected {width}")
        for c, ch in enumerate(row):
            if ch in (WALL, OPEN):
                continue
            faction = _FACTIONS.get(ch)
            if faction is None:
                raise ParseError(f"Unexpected character {ch!r} at row {r}, column {c}")
            power = elf_power if faction is Faction.ELF else goblin_power
            units.append(Unit(id=len(units), faction=faction, pos=Position(r, c),
                              hp=hp, attack_power=power))

    grid = Grid.from_rows(rows)
    log.debug("Parsed %dx%d battlefield with %d units", grid.height, grid.width, len(units))
    return State(grid=grid, units=units)


def render_state(state: State) -> str:
    """Draw the board with live units, followed by their hit points per row."""
    markers = {u.pos: u.faction.value for u in state.units if u.alive}
    lines = []
    for r, line in enumerate(state.grid.render(markers)):
        on_row = sorted((u for u in state.units if u.alive and u.pos.row == r),
                        key=lambda u: u.pos)
        if on_row:
            line += "   " + ", ".join(f"{u.faction.value}({u.hp})" for u in on_row)
        lines.append(line)
    return "\n".join(lines)
