import pytest
from boards import EXAMPLE_1, board
from engine.errors import ParseError
from engine.model import Faction
from engine.parser import parse_battlefield, render_state


def test_units_in_reading_order():
    state = parse_battlefield(EXAMPLE_1, hp=100, goblin_power=5, elf_power=9)
    assert [u.id for u in state.units] == list(range(6))
    assert [tuple(u.pos) for u in state.units] == [(1, 2), (2, 4), (2, 5), (3, 5), (4, 3), (4, 5)]
    assert [u.faction for u in state.units] == [
        Faction.GOBLIN, Faction.ELF, Faction.GOBLIN, Faction.GOBLIN, Faction.GOBLIN, Faction.ELF,
    ]
    assert all(u.hp == 100 for u in state.units)
    assert {u.faction: u.attack_power for u in state.units} == {Faction.ELF: 9, Faction.GOBLIN: 5}


def test_grid_shape_and_walls():
    state = parse_battlefield(EXAMPLE_1)
    assert (state.grid.height, state.grid.width) == (7, 7)
    assert not state.grid.passable((0, 0))
    assert not state.grid.passable((3, 2))
    assert state.grid.passable((1, 2))  # a unit stands on open floor
    assert not state.grid.passable((-1, 3))
    assert not state.grid.passable((3, 7))


def test_surrounding_blank_lines_ignored():
    state = parse_battlefield("\n\n" + EXAMPLE_1 + "\n\n")
    assert state.grid.height == 7


def test_borderless_grid():
    state = parse_battlefield("E..G")
    assert state.grid.passable((0, 0))
    assert not state.grid.passable((0, 4))


@pytest.mark.parametrize("text,msg", [
    ("", "empty"),
    ("#####\n#E.X#\n#####", "'X' at row 1, column 3"),
    ("#####\n#E.G\n#####", "Row 1 has width 4"),
])
def test_malformed_input(text, msg):
    with pytest.raises(ParseError, match=msg):
        parse_battlefield(text)


def test_render_state():
    state = parse_battlefield(board("#######", "#E..G.#", "#######"))
    state.units[1].hp = 7
    assert render_state(state) == "#######\n#E..G.#   E(200), G(7)\n#######"
    state.units[1].hp = 0
    assert render_state(state) == "#######\n#E....#   E(200)\n#######"
