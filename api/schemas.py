from typing import Optional
from pydantic import BaseModel, Field, model_validator

from engine.config import (
    CALIBRATION_CEILING, CALIBRATION_START, CALIBRATION_STEP,
    DEFAULT_ATTACK_POWER, DEFAULT_HIT_POINTS,
)

class BattleIn(BaseModel):
    """Battlefield drawing plus unit stats."""
    grid: str
    elf_power: int = Field(default=DEFAULT_ATTACK_POWER, ge=1)
    goblin_power: int = Field(default=DEFAULT_ATTACK_POWER, ge=1)
    hit_points: int = Field(default=DEFAULT_HIT_POINTS, ge=1)

class CalibrateIn(BaseModel):
    """Calibration request schema."""
    grid: str
    start: int = Field(default=CALIBRATION_START, ge=1)
    step: int = Field(default=CALIBRATION_STEP, ge=1)
    ceiling: int = Field(default=CALIBRATION_CEILING, ge=1)
    workers: int = Field(default=1, ge=1, le=16)

    @model_validator(mode="after")
    def check_range(self) -> "CalibrateIn":
        if self.ceiling < self.start:
            raise ValueError(f"ceiling {self.ceiling} is below start {self.start}")
        return self

class OutcomeOut(BaseModel):
    """Result of a finished battle."""
    rounds: int
    hp_remaining: int
    outcome: int
    winner: Optional[str]
    elf_power: int
    elf_losses: int

class StartRequest(BattleIn):
    """Live battle start request schema."""

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]
