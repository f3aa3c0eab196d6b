"""Race API: betting, race lifecycle, payouts and read-only queries."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from karera.engine.fixed_point import SEED_MASK
from karera.engine.race import RaceEngine
from karera.models.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

CALLER_HEADER = "X-Karera-Caller"


class BetRequest(BaseModel):
    first_pick: int
    second_pick: int
    amount: int
    bettor: str | None = None  # defaults to the caller


class StartRequest(BaseModel):
    seed: int = Field(ge=0, le=SEED_MASK)


class DepositRequest(BaseModel):
    account: str
    amount: int


class WithdrawRequest(BaseModel):
    amount: int


class OwnerRequest(BaseModel):
    new_owner: str


def get_engine(request: Request) -> RaceEngine:
    return request.app.state.race_engine


def get_caller(x_karera_caller: str = Header(default="anonymous")) -> str:
    """Caller identity. Authenticating it is the host's job."""
    return x_karera_caller


def _drain(engine: RaceEngine) -> list[dict]:
    return [e.to_dict() for e in engine.drain_events()]


# ──────────────────────────────────────────────
# Mutations
# ──────────────────────────────────────────────

# Held by every mutating endpoint. Persisting endpoints await the database
# inside an engine transaction, and no other mutation may interleave there.
_engine_lock = asyncio.Lock()


@router.post("/bets")
async def place_bet(
    body: BetRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    """Place an exacta bet on the active race."""
    async with _engine_lock:
        bet = engine.place_bet(body.bettor or caller, body.first_pick, body.second_pick, body.amount)
        return {"bet": bet.to_dict(), "total_pot": engine.get_total_pot(), "events": _drain(engine)}


@router.post("/start")
async def start_race(
    body: StartRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    async with _engine_lock:
        engine.start_race(caller, body.seed)
        return {"status": engine.get_status().value, "race_id": engine.get_race_id(), "events": _drain(engine)}


@router.post("/simulate")
async def run_simulation(
    engine: RaceEngine = Depends(get_engine),
    db: AsyncSession = Depends(get_db),
):
    """Run the started race and persist its result. Rolled back if the write fails."""
    from karera.results.tracker import store_race_result

    async with _engine_lock:
        with engine.transaction():
            result = engine.run_simulation()
            await store_race_result(db, result, engine.get_bets())
        return {"result": result.to_dict(), "events": _drain(engine)}


@router.post("/simulate-complete")
async def simulate_complete_race(
    body: StartRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Start and run a race in one step."""
    from karera.results.tracker import store_race_result

    async with _engine_lock:
        with engine.transaction():
            result = engine.simulate_complete_race(caller, body.seed)
            await store_race_result(db, result, engine.get_bets())
        return {"result": result.to_dict(), "events": _drain(engine)}


@router.post("/payouts")
async def distribute_payouts(
    engine: RaceEngine = Depends(get_engine),
    db: AsyncSession = Depends(get_db),
):
    from karera.results.tracker import store_payouts

    async with _engine_lock:
        with engine.transaction():
            payouts = engine.distribute_payouts()
            await store_payouts(db, engine.get_race_id(), payouts)
        return {"payouts": [p.to_dict() for p in payouts], "events": _drain(engine)}


@router.post("/reset")
async def reset(
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    async with _engine_lock:
        engine.reset(caller)
        return {"status": engine.get_status().value, "race_id": engine.get_race_id(), "events": _drain(engine)}


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    async with _engine_lock:
        balance = engine.deposit(caller, body.account, body.amount)
        return {"account": body.account, "balance": balance, "events": _drain(engine)}


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    async with _engine_lock:
        balance = engine.withdraw(caller, body.amount)
        return {"account": caller, "balance": balance, "events": _drain(engine)}


@router.post("/owner")
async def set_owner(
    body: OwnerRequest,
    engine: RaceEngine = Depends(get_engine),
    caller: str = Depends(get_caller),
):
    async with _engine_lock:
        engine.set_owner(caller, body.new_owner)
        return {"owner": engine.get_owner(), "events": _drain(engine)}


# ──────────────────────────────────────────────
# Queries
# ──────────────────────────────────────────────

@router.get("/state")
async def race_state(engine: RaceEngine = Depends(get_engine)):
    """Status, race id, pot and owner in one call."""
    return {
        "race_id": engine.get_race_id(),
        "status": engine.get_status().value,
        "total_pot": engine.get_total_pot(),
        "bet_count": len(engine.get_bets()),
        "owner": engine.get_owner(),
        "version": engine.get_state_version(),
    }


@router.get("/horses")
async def horses(engine: RaceEngine = Depends(get_engine)):
    return [h.to_dict() for h in engine.get_horses()]


@router.get("/horses/{horse_id}")
async def horse(horse_id: int, engine: RaceEngine = Depends(get_engine)):
    found = engine.get_horse(horse_id)
    if not found:
        raise HTTPException(status_code=404, detail=f"No horse {horse_id}")
    return {**found.to_dict(), "normalized_strength": engine.get_normalized_strength(horse_id)}


@router.get("/bets")
async def bets(engine: RaceEngine = Depends(get_engine)):
    return {"bets": [b.to_dict() for b in engine.get_bets()], "total_pot": engine.get_total_pot()}


@router.get("/odds")
async def odds_table(engine: RaceEngine = Depends(get_engine)):
    """The full exacta probability and multiplier table."""
    return [row.to_dict() for row in engine.get_exacta_probability_table()]


@router.get("/odds/{first}/{second}")
async def exacta_odds(first: int, second: int, engine: RaceEngine = Depends(get_engine)):
    return {
        "first": first,
        "second": second,
        "probability": engine.calculate_exacta_probability(first, second),
        "multiplier": engine.get_reward_multiplier(first, second),
    }


@router.get("/results/latest")
async def latest_result(engine: RaceEngine = Depends(get_engine)):
    latest = engine.get_latest_result()
    return {"result": latest.to_dict() if latest else None}


@router.get("/results")
async def race_history(engine: RaceEngine = Depends(get_engine)):
    return [r.to_dict() for r in engine.get_race_history()]


@router.get("/results/{race_id}/summary")
async def race_summary(race_id: int, db: AsyncSession = Depends(get_db)):
    """Stored summary of a settled race."""
    from karera.results.tracker import get_race_summary

    summary = await get_race_summary(db, race_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Race not found")
    return summary


@router.get("/payouts")
async def payouts(engine: RaceEngine = Depends(get_engine)):
    return [p.to_dict() for p in engine.get_payouts()]


@router.get("/balances/{account}")
async def balance(account: str, engine: RaceEngine = Depends(get_engine)):
    return {"account": account, "balance": engine.get_balance(account)}
