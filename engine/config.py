"""Combat configuration constants."""

# Board markers
WALL = "#"
OPEN = "."
ELF = "E"
GOBLIN = "G"

# Units
DEFAULT_HIT_POINTS = 200
DEFAULT_ATTACK_POWER = 3

# Calibration search over elf attack power
CALIBRATION_START = 4
CALIBRATION_STEP = 1
CALIBRATION_CEILING = 200

# Live runner cadence
ROUND_MS = 500
TIME_COMPRESSION = 30.0

# Battles still running after this many rounds are abandoned
MAX_ROUNDS = 5000
