from typing import Mapping, Sequence, Tuple

import numpy as np

from .config import OPEN, WALL

Coord = Tuple[int, int]  # (row, col)


class Grid:
    """Immutable wall/open tile map.

    Occupancy is not tracked here; callers layer an OccupancyIndex on top
    when they need "open and unoccupied".
    """

    def __init__(self, walls: np.ndarray):
        if walls.ndim != 2:
            raise ValueError(f"Grid needs a 2-D wall mask, got {walls.ndim} dimensions")
        self._walls = walls.astype(bool, copy=True)
        self._walls.setflags(write=False)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from rows of '#' (wall) and anything else (open)."""
        return cls(np.array([[c == WALL for c in row] for row in rows], dtype=bool))

    @property
    def height(self) -> int:
        return int(self._walls.shape[0])

    @property
    def width(self) -> int:
        return int(self._walls.shape[1])

    def in_bounds(self, pos: Coord) -> bool:
        row, col = pos
        return 0 <= row < self.height and 0 <= col < self.width

    def passable(self, pos: Coord) -> bool:
        """True if pos is inside the grid and not a wall."""
        return self.in_bounds(pos) and not self._walls[pos[0], pos[1]]

    def render(self, markers: Mapping[Coord, str]) -> list[str]:
        """Draw the grid, overlaying single-character markers at given coordinates."""
        lines = []
        for row in range(self.height):
            chars = []
            for col in range(self.width):
                if self._walls[row, col]:
                    chars.append(WALL)
                else:
                    chars.append(markers.get((row, col), OPEN))
            lines.append("".join(chars))
        return lines
