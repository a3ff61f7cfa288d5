class CombatError(Exception):
    """Base class for everything the combat engine raises."""


class ParseError(CombatError):
    """Battlefield text could not be turned into a grid."""


class OccupancyError(CombatError):
    """Occupancy index disagrees with unit positions."""


class SimulationError(CombatError):
    """Simulation did not terminate within its round limit."""


class CalibrationError(CombatError):
    """No attack power up to the ceiling keeps every elf alive."""
