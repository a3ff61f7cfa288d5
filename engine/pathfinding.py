"""Breadth-first movement for a single unit turn.

A unit steps toward the closest "in range" tile: an open, unoccupied tile
orthogonally adjacent to a living enemy. Ties are resolved in reading order
twice: first among equally-close destinations, then among the first steps
that start a shortest path to the chosen destination.
"""
from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from .grid import Grid
from .model import Position, Unit
from .occupancy import OccupancyIndex
from .targeting import adjacent_enemies


def _open(grid: Grid, occupancy: OccupancyIndex, pos: Position) -> bool:
    return grid.passable(pos) and pos not in occupancy


def in_range_tiles(unit: Unit, units: List[Unit], grid: Grid,
                   occupancy: OccupancyIndex) -> Set[Position]:
    """Open, unoccupied tiles next to any living enemy of unit."""
    tiles: Set[Position] = set()
    for enemy in units:
        if not enemy.alive or enemy.faction is not unit.faction.opponent:
            continue
        for pos in enemy.pos.neighbors():
            if _open(grid, occupancy, pos):
                tiles.add(pos)
    return tiles


def distances_from(origin: Position, grid: Grid, occupancy: OccupancyIndex,
                   stop_at: Optional[Set[Position]] = None) -> Dict[Position, int]:
    """BFS distances from origin over open, unoccupied tiles.

    origin itself is always at distance 0 even though it is occupied. With
    stop_at, expansion ends after the first level that reaches any of those
    tiles.
    """
    dist: Dict[Position, int] = {origin: 0}
    frontier = deque([origin])
    limit: Optional[int] = None
    while frontier:
        cur = frontier.popleft()
        d = dist[cur]
        if limit is not None and d >= limit:
            break
        for nxt in cur.neighbors():
            if nxt in dist or not _open(grid, occupancy, nxt):
                continue
            dist[nxt] = d + 1
            frontier.append(nxt)
            if stop_at is not None and limit is None and nxt in stop_at:
                limit = d + 1
    return dist


def choose_destination(origin: Position, targets: Set[Position], grid: Grid,
                       occupancy: OccupancyIndex) -> Optional[Tuple[Position, int]]:
    """Closest reachable target tile and its distance, reading order on ties."""
    dist = distances_from(origin, grid, occupancy, stop_at=targets)
    reached = [(d, pos) for pos, d in dist.items() if pos in targets]
    if not reached:
        return None
    d, pos = min(reached)
    return pos, d


def first_step(origin: Position, destination: Position, distance: int, grid: Grid,
               occupancy: OccupancyIndex) -> Position:
    """Reading-order-first neighbor of origin lying on a shortest path to destination."""
    back = distances_from(destination, grid, occupancy)
    # neighbors() is in reading order, so the first hit wins
    return next(pos for pos in origin.neighbors() if back.get(pos) == distance - 1)


def next_step(unit: Unit, units: List[Unit], grid: Grid, occupancy: OccupancyIndex,
              targets: Optional[Set[Position]] = None) -> Optional[Position]:
    """Tile unit should step onto this turn, or None to stay put."""
    if adjacent_enemies(unit, units, occupancy):
        return None
    if targets is None:
        targets = in_range_tiles(unit, units, grid, occupancy)
    if not targets:
        return None
    found = choose_destination(unit.pos, targets, grid, occupancy)
    if found is None:
        return None
    destination, distance = found
    return first_step(unit.pos, destination, distance, grid, occupancy)
