import logging
from enum import Enum
from typing import List, Optional

from .errors import SimulationError
from .model import Event, Faction, Outcome, State, Unit
from .occupancy import OccupancyIndex
from .pathfinding import in_range_tiles, next_step
from .targeting import select_target

log = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = "running"
    ENDED = "ended"
    STALEMATE = "stalemate"  # a full round passed with no move and no attack


class Engine:
    """Pure, deterministic round-based combat engine."""

    def __init__(self, initial_state: State):
        self.state = initial_state
        self.phase = Phase.RUNNING
        self._occupancy = OccupancyIndex(self.state.units)
        self._elf_count = len(self.state.living(Faction.ELF))

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def ended(self) -> bool:
        return self.phase is Phase.ENDED

    @property
    def stalemate(self) -> bool:
        return self.phase is Phase.STALEMATE

    @property
    def occupancy(self) -> OccupancyIndex:
        return self._occupancy

    def _combat_possible(self) -> bool:
        """Both factions still have a living member."""
        factions = {u.faction for u in self.state.units if u.alive}
        return len(factions) == 2

    def _move(self, u: Unit) -> List[Event]:
        """Step u one tile toward the nearest enemy, if it is not already engaged."""
        units, grid = self.state.units, self.state.grid
        targets = in_range_tiles(u, units, grid, self._occupancy)
        dest = next_step(u, units, grid, self._occupancy, targets)
        if dest is None:
            return []
        old = u.pos
        self._occupancy.move(old, dest)
        u.pos = dest
        log.debug("Round %d: unit %d %s -> %s", self.state.rounds, u.id, tuple(old), tuple(dest))
        return [Event("UnitMoved", self.state.rounds,
                      {"unit_id": u.id, "from": list(old), "to": list(dest)})]

    def _attack(self, u: Unit) -> List[Event]:
        """Hit the weakest adjacent enemy, removing it from the board if it dies."""
        t = select_target(u, self.state.units, self._occupancy)
        if t is None:
            return []
        t.hp = max(0, t.hp - u.attack_power)
        evts = [Event("Attack", self.state.rounds,
                      {"attacker": u.id, "target": t.id, "dmg": u.attack_power, "hp": t.hp})]
        if not t.alive:
            self._occupancy.remove(t.pos)
            log.debug("Round %d: unit %d killed unit %d at %s",
                      self.state.rounds, u.id, t.id, tuple(t.pos))
            evts.append(Event("UnitKilled", self.state.rounds,
                              {"unit_id": t.id, "faction": t.faction.value, "killer": u.id}))
        return evts

    def take_turn(self, u: Unit) -> List[Event]:
        """Move (unless already adjacent to an enemy), then attack."""
        evts = self._move(u)
        evts += self._attack(u)
        return evts

    def step(self) -> List[Event]:
        """Run one full round. A round interrupted by elimination is not counted."""
        if not self.running:
            return []
        evts: List[Event] = []
        if not self._combat_possible():
            self.phase = Phase.ENDED
            return [self._ended_event()]
        order = sorted(self.state.living(), key=lambda u: u.pos)
        for u in order:
            if not u.alive:
                continue
            if not self._combat_possible():
                self.phase = Phase.ENDED
                evts.append(self._ended_event())
                return evts
            evts += self.take_turn(u)
        evts.append(Event("RoundCompleted", self.state.rounds,
                          {"completed": self.state.rounds + 1,
                           "hp_remaining": self.state.hp_remaining()}))
        self.state.rounds += 1
        if not any(e.kind in ("UnitMoved", "Attack") for e in evts):
            # nothing changed, so every later round would be identical
            self.phase = Phase.STALEMATE
            log.info("Stalemate after %d rounds: no unit can move or attack", self.state.rounds)
            evts.append(Event("Stalemate", self.state.rounds - 1, {"rounds": self.state.rounds}))
        return evts

    def _ended_event(self) -> Event:
        outcome = self.outcome()
        log.info("Combat ended after %d full rounds: %s wins with %d hp (outcome %d)",
                 outcome.rounds, outcome.winner.name if outcome.winner else "nobody",
                 outcome.hp_remaining, outcome.score)
        return Event("CombatEnded", self.state.rounds,
                     {"rounds": outcome.rounds, "hp_remaining": outcome.hp_remaining,
                      "winner": outcome.winner.value if outcome.winner else None,
                      "outcome": outcome.score})

    def run(self, max_rounds: Optional[int] = None) -> Outcome:
        """Step until one faction is left standing.

        Raises SimulationError on stalemate or once max_rounds full rounds pass.
        """
        while self.running:
            if max_rounds is not None and self.state.rounds >= max_rounds:
                raise SimulationError(f"Combat still running after {max_rounds} rounds")
            self.step()
        if self.stalemate:
            raise SimulationError(
                f"Stalemate after {self.state.rounds} rounds: the factions cannot reach each other")
        return self.outcome()

    def elf_losses(self) -> int:
        return self._elf_count - len(self.state.living(Faction.ELF))

    def outcome(self) -> Outcome:
        survivors = {u.faction for u in self.state.units if u.alive}
        winner = survivors.pop() if len(survivors) == 1 else None
        elves = [u for u in self.state.units if u.faction is Faction.ELF]
        return Outcome(
            rounds=self.state.rounds,
            hp_remaining=self.state.hp_remaining(),
            winner=winner,
            elf_power=elves[0].attack_power if elves else 0,
            elf_losses=self.elf_losses(),
        )

    def snapshot(self) -> State:
        """Return current state."""
        return self.state
