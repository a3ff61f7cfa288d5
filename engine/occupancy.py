from typing import Dict, Iterable, Iterator, Optional

from .errors import OccupancyError
from .model import Position, Unit


class OccupancyIndex:
    """Position -> unit handle for every live unit.

    Exactly one entry per live unit. Every mutation is checked, so a move or
    death that would desync the index raises instead of corrupting it.
    """

    def __init__(self, units: Iterable[Unit] = ()):
        self._by_pos: Dict[Position, int] = {}
        for u in units:
            if u.alive:
                self.insert(u.pos, u.id)

    def insert(self, pos: Position, handle: int) -> None:
        if pos in self._by_pos:
            raise OccupancyError(
                f"Cannot place unit {handle} at {tuple(pos)}: occupied by unit {self._by_pos[pos]}")
        self._by_pos[pos] = handle

    def remove(self, pos: Position) -> int:
        try:
            return self._by_pos.pop(pos)
        except KeyError:
            raise OccupancyError(f"No unit indexed at {tuple(pos)}") from None

    def move(self, old: Position, new: Position) -> int:
        """Re-index the unit at old to new, returning its handle."""
        if new in self._by_pos:
            raise OccupancyError(f"Cannot move onto {tuple(new)}: occupied by unit {self._by_pos[new]}")
        handle = self.remove(old)
        self._by_pos[new] = handle
        return handle

    def get(self, pos: Position) -> Optional[int]:
        return self._by_pos.get(pos)

    def __contains__(self, pos: object) -> bool:
        return pos in self._by_pos

    def __len__(self) -> int:
        return len(self._by_pos)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._by_pos)
