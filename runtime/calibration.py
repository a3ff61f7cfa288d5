"""Elf attack power calibration.

Every candidate power is an independent simulation on a freshly parsed
battlefield, so candidates can be evaluated in worker processes. The answer
is always the smallest power whose battle ends with no dead elves,
regardless of how many workers are used. A candidate whose battle stalls
counts as a failure.
"""
import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional

from engine.config import (
    CALIBRATION_CEILING, CALIBRATION_START, CALIBRATION_STEP,
    DEFAULT_ATTACK_POWER, DEFAULT_HIT_POINTS, MAX_ROUNDS,
)
from engine.engine import Engine
from engine.errors import CalibrationError, SimulationError
from engine.model import Outcome
from engine.parser import parse_battlefield

log = logging.getLogger(__name__)


def simulate(text: str, elf_power: int = DEFAULT_ATTACK_POWER,
             hp: int = DEFAULT_HIT_POINTS,
             goblin_power: int = DEFAULT_ATTACK_POWER,
             max_rounds: Optional[int] = MAX_ROUNDS) -> Outcome:
    """Run one battle to completion from its text drawing.

    Raises SimulationError if the battle stalls or outlasts max_rounds.
    """
    state = parse_battlefield(text, hp=hp, goblin_power=goblin_power, elf_power=elf_power)
    return Engine(state).run(max_rounds=max_rounds)


def _attempt(text: str, elf_power: int, hp: int, goblin_power: int) -> Optional[Outcome]:
    """Outcome of one candidate, or None when the battle never finishes."""
    try:
        return simulate(text, elf_power, hp=hp, goblin_power=goblin_power)
    except SimulationError as e:
        log.debug("Elf power %d: %s", elf_power, e)
        return None


def _flawless(outcome: Optional[Outcome]) -> bool:
    return outcome is not None and outcome.elf_losses == 0


def calibrate(text: str, start: int = CALIBRATION_START, step: int = CALIBRATION_STEP,
              ceiling: int = CALIBRATION_CEILING, workers: int = 1,
              hp: int = DEFAULT_HIT_POINTS,
              goblin_power: int = DEFAULT_ATTACK_POWER) -> Outcome:
    """Smallest elf power in start..ceiling that wins without losing an elf."""
    if step <= 0:
        raise ValueError(f"Calibration step must be positive, got {step}")
    parse_battlefield(text)  # fail fast on malformed input, before spawning workers
    powers = list(range(start, ceiling + 1, step))

    if workers <= 1:
        for power in powers:
            outcome = _attempt(text, power, hp, goblin_power)
            if _flawless(outcome):
                log.info("Calibrated elf power %d (outcome %d)", power, outcome.score)
                return outcome
    else:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            for i in range(0, len(powers), workers):
                batch = powers[i:i + workers]
                outcomes: List[Optional[Outcome]] = list(pool.map(
                    _attempt, [text] * len(batch), batch,
                    [hp] * len(batch), [goblin_power] * len(batch)))
                for outcome in outcomes:
                    if _flawless(outcome):
                        log.info("Calibrated elf power %d (outcome %d)",
                                 outcome.elf_power, outcome.score)
                        return outcome

    raise CalibrationError(
        f"No elf attack power in {start}..{ceiling} keeps every elf alive")
