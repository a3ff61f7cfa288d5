import logging

from fastapi import FastAPI, HTTPException
from engine.engine import Engine
from engine.errors import CalibrationError, ParseError, SimulationError
from engine.model import Outcome
from engine.parser import parse_battlefield, render_state
from runtime.calibration import calibrate, simulate
from runtime.runner import RoundRunner
from .schemas import BattleIn, CalibrateIn, EventsResponse, OutcomeOut, StartRequest

log = logging.getLogger(__name__)

app = FastAPI(title="Grid Combat Engine API")
runner: RoundRunner | None = None

def _outcome_out(o: Outcome) -> OutcomeOut:
    return OutcomeOut(
        rounds=o.rounds,
        hp_remaining=o.hp_remaining,
        outcome=o.score,
        winner=o.winner.value if o.winner else None,
        elf_power=o.elf_power,
        elf_losses=o.elf_losses,
    )

def _live() -> RoundRunner:
    """The running battle, or 400 if none was started."""
    if not runner:
        raise HTTPException(400, "Battle not started")
    return runner

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Grid Combat Engine API",
        "docs": "/docs",
    }

@app.post("/combat/outcome", response_model=OutcomeOut)
def combat_outcome(req: BattleIn):
    """Play a battle to the end and report its outcome."""
    try:
        o = simulate(req.grid, req.elf_power, hp=req.hit_points, goblin_power=req.goblin_power)
    except ParseError as e:
        raise HTTPException(400, str(e))
    except SimulationError as e:
        raise HTTPException(422, str(e))
    return _outcome_out(o)

@app.post("/combat/calibrate", response_model=OutcomeOut)
def combat_calibrate(req: CalibrateIn):
    """Find the weakest elf attack power that loses no elves."""
    try:
        o = calibrate(req.grid, start=req.start, step=req.step, ceiling=req.ceiling,
                      workers=req.workers)
    except ParseError as e:
        raise HTTPException(400, str(e))
    except CalibrationError as e:
        raise HTTPException(422, str(e))
    return _outcome_out(o)

@app.on_event("shutdown")
async def shutdown():
    """Abandon the live battle on app shutdown."""
    if runner:
        await runner.stop()

@app.post("/battle/start")
async def start_battle(req: StartRequest):
    """Replace any live battle with a new one on the given battlefield."""
    try:
        state = parse_battlefield(req.grid, hp=req.hit_points,
                                  goblin_power=req.goblin_power, elf_power=req.elf_power)
    except ParseError as e:
        raise HTTPException(400, str(e))
    await shutdown()
    global runner
    runner = RoundRunner(Engine(state))
    await runner.start()
    log.info("Started live battle with %d units", len(state.units))
    return {"battle_id": "local", "units": len(state.units)}

@app.get("/battle/local/state")
async def get_state():
    """Board, phase and living units as of the last completed round."""
    live = _live()
    s = await live.snapshot()
    return {
        "rounds": s.rounds,
        "finished": live.finished,
        "phase": live.engine.phase.value,
        "board": render_state(s),
        "units": {
            u.id: {
                "id": u.id,
                "faction": u.faction.value,
                "pos": list(u.pos),
                "hp": u.hp,
                "attack_power": u.attack_power,
            } for u in s.units if u.alive
        }
    }

@app.get("/battle/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Page through combat events by offset."""
    evts, next_offset = _live().events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "round": e.round, "data": e.data} for e in evts]
    )

@app.get("/battle/local/rounds/{rnd}")
async def get_round(rnd: int):
    """Every event of one round (0 = first round)."""
    evts = _live().events.in_round(rnd)
    if not evts:
        raise HTTPException(404, f"No events for round {rnd}")
    return {"round": rnd, "events": [{"kind": e.kind, "data": e.data} for e in evts]}

@app.post("/battle/local/time-control")
async def set_time_control(time_compression: float):
    """Change replay speed (1.0 = one round per round_ms, higher = faster)."""
    live = _live()
    live.set_time_compression(time_compression)
    return {"time_compression": live.time_compression}

@app.get("/battle/local/time-control")
async def get_time_control():
    """Current replay speed."""
    return {"time_compression": _live().time_compression}
