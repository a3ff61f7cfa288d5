from typing import List, Optional

from .model import Unit
from .occupancy import OccupancyIndex


def adjacent_enemies(unit: Unit, units: List[Unit], occupancy: OccupancyIndex) -> List[Unit]:
    """Live enemies orthogonally adjacent to unit, in reading order."""
    enemies: List[Unit] = []
    for pos in unit.pos.neighbors():
        handle = occupancy.get(pos)
        if handle is None:
            continue
        other = units[handle]
        if other.faction is unit.faction.opponent and other.alive:
            enemies.append(other)
    return enemies


def select_target(unit: Unit, units: List[Unit], occupancy: OccupancyIndex) -> Optional[Unit]:
    """Weakest adjacent enemy; equal hit points go to the first in reading order."""
    enemies = adjacent_enemies(unit, units, occupancy)
    if not enemies:
        return None
    return min(enemies, key=lambda e: (e.hp, e.pos))
