import pytest
from engine.errors import OccupancyError
from engine.model import Faction, Position, Unit
from engine.occupancy import OccupancyIndex


def make_units():
    return [
        Unit(id=0, faction=Faction.ELF, pos=Position(1, 1), hp=200, attack_power=3),
        Unit(id=1, faction=Faction.GOBLIN, pos=Position(1, 2), hp=200, attack_power=3),
        Unit(id=2, faction=Faction.GOBLIN, pos=Position(2, 2), hp=0, attack_power=3),
    ]


def test_built_from_live_units_only():
    occ = OccupancyIndex(make_units())
    assert len(occ) == 2
    assert occ.get(Position(1, 1)) == 0
    assert occ.get(Position(1, 2)) == 1
    assert Position(2, 2) not in occ


def test_move_reindexes():
    occ = OccupancyIndex(make_units())
    assert occ.move(Position(1, 1), Position(2, 1)) == 0
    assert occ.get(Position(2, 1)) == 0
    assert occ.get(Position(1, 1)) is None
    assert len(occ) == 2


def test_desync_raises():
    occ = OccupancyIndex(make_units())
    with pytest.raises(OccupancyError):
        occ.insert(Position(1, 2), 5)
    with pytest.raises(OccupancyError):
        occ.remove(Position(3, 3))
    with pytest.raises(OccupancyError):
        occ.move(Position(1, 1), Position(1, 2))
    # failed move leaves the index untouched
    assert occ.get(Position(1, 1)) == 0


def test_stacked_units_rejected():
    units = make_units()
    units[1].pos = Position(1, 1)
    with pytest.raises(OccupancyError):
        OccupancyIndex(units)
