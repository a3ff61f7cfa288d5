"""Movement choices, including both reading-order tie-breaks."""
from boards import board
from engine.engine import Engine
from engine.model import Position
from engine.occupancy import OccupancyIndex
from engine.parser import parse_battlefield
from engine.pathfinding import choose_destination, first_step, in_range_tiles, next_step


def setup(*rows):
    state = parse_battlefield(board(*rows))
    return state, OccupancyIndex(state.units)


def test_in_range_tiles_skip_walls_and_units():
    state, occ = setup(
        "#######",
        "#E..G.#",
        "#...#.#",
        "#.G.#G#",
        "#######",
    )
    elf = state.units[0]
    assert in_range_tiles(elf, state.units, state.grid, occ) == {
        (1, 3), (1, 5), (2, 2), (3, 1), (3, 3), (2, 5),
    }


def test_nearest_destination_in_reading_order():
    state, occ = setup(
        "#######",
        "#E..G.#",
        "#...#.#",
        "#.G.#G#",
        "#######",
    )
    elf = state.units[0]
    targets = in_range_tiles(elf, state.units, state.grid, occ)
    assert choose_destination(elf.pos, targets, state.grid, occ) == ((1, 3), 2)
    assert next_step(elf, state.units, state.grid, occ) == (1, 2)


def test_first_step_prefers_reading_order():
    state, occ = setup(
        "#######",
        "#.E...#",
        "#.....#",
        "#...G.#",
        "#######",
    )
    elf = state.units[0]
    targets = in_range_tiles(elf, state.units, state.grid, occ)
    dest, dist = choose_destination(elf.pos, targets, state.grid, occ)
    assert (dest, dist) == ((2, 4), 3)
    assert first_step(elf.pos, dest, dist, state.grid, occ) == (1, 3)


def test_equal_destinations_pick_top_left():
    state, occ = setup(
        "#####",
        "#G.G#",
        "#.E.#",
        "#G.G#",
        "#####",
    )
    elf = state.units[2]
    assert next_step(elf, state.units, state.grid, occ) == Position(1, 2)


def test_unreachable_enemy_means_no_move():
    state, occ = setup(
        "#######",
        "#E.#.G#",
        "#######",
    )
    assert next_step(state.units[0], state.units, state.grid, occ) is None


def test_adjacent_enemy_means_no_move():
    state, occ = setup(
        "#####",
        "#EG.#",
        "#####",
    )
    assert next_step(state.units[0], state.units, state.grid, occ) is None


def test_units_block_paths():
    state, occ = setup(
        "#######",
        "#.E.E.#",
        "#######",
        "#G....#",
        "#######",
    )
    # the goblin is sealed off below the wall row
    assert next_step(state.units[0], state.units, state.grid, occ) is None

    state, occ = setup(
        "######",
        "#EE.G#",
        "######",
    )
    assert next_step(state.units[0], state.units, state.grid, occ) is None
    assert next_step(state.units[1], state.units, state.grid, occ) == (1, 3)


def walk(*rows, steps):
    eng = Engine(parse_battlefield(board(*rows)))
    elf = eng.state.units[2]
    visited = []
    for _ in range(steps):
        eng.take_turn(elf)
        visited.append(elf.pos)
    return visited


def test_multiple_paths_2x2():
    visited = walk(
        "#######",
        "#G...G#",
        "#.....#",
        "#..E..#",
        "#.....#",
        "#G...G#",
        "#######",
        steps=3,
    )
    assert visited == [(2, 3), (1, 3), (1, 2)]


def test_multiple_paths_with_blocker():
    visited = walk(
        "#######",
        "#G#..G#",
        "#.....#",
        "#..E..#",
        "#.....#",
        "#G...G#",
        "#######",
        steps=3,
    )
    assert visited == [(2, 3), (1, 3), (1, 4)]


def test_multiple_paths_with_blocker_in_middle():
    visited = walk(
        "#######",
        "#G.#.G#",
        "#.....#",
        "#..E..#",
        "#.....#",
        "#G...G#",
        "#######",
        steps=3,
    )
    assert visited == [(2, 3), (2, 2), (1, 2)]
