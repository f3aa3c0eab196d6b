"""Race history tracker. Stores engine results in the database and loads them back."""

import json
import logging
from typing import Iterable

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from karera.engine.ledger import ExactaBet
from karera.engine.payouts import Payout
from karera.engine.race import RaceEngine, RaceResult
from karera.models.race import BetRecord, PayoutRecord, RaceRecord

logger = logging.getLogger(__name__)


def _record_to_result(record: RaceRecord) -> RaceResult:
    """Pure function: rebuild an engine RaceResult from its row."""
    return RaceResult(
        race_id=record.race_id,
        rankings=tuple(json.loads(record.rankings)),
        finish_times=tuple(json.loads(record.finish_times)),
        winning_exacta=(record.winning_first, record.winning_second),
        total_pot=record.total_pot,
        seed_used=int(record.seed_used),
    )


async def store_race_result(
    db: AsyncSession, result: RaceResult, bets: Iterable[ExactaBet] = ()
) -> RaceRecord:
    """Persist a race result and the bets it was run against. Idempotent per race id."""
    existing = await db.get(RaceRecord, result.race_id)
    if existing:
        if _record_to_result(existing) != result:
            raise ValueError(
                f"Race {result.race_id} is already stored with a different result "
                f"(stored seed {existing.seed_used}, new seed {result.seed_used})"
            )
        logger.info(f"Race {result.race_id} already stored, skipping")
        return existing

    record = RaceRecord(
        race_id=result.race_id,
        rankings=json.dumps(list(result.rankings)),
        finish_times=json.dumps(list(result.finish_times)),
        winning_first=result.winning_exacta[0],
        winning_second=result.winning_exacta[1],
        total_pot=result.total_pot,
        seed_used=str(result.seed_used),
    )
    db.add(record)
    for seq, bet in enumerate(bets):
        db.add(BetRecord(
            race_id=result.race_id,
            seq=seq,
            bettor=bet.bettor,
            amount=bet.amount,
            first_pick=bet.first_pick,
            second_pick=bet.second_pick,
            timestamp=bet.timestamp,
        ))
    await db.commit()
    logger.info(f"Stored race {result.race_id}: exacta {result.winning_exacta}")
    return record


async def store_payouts(db: AsyncSession, race_id: int, payouts: Iterable[Payout]) -> int:
    """Replace the stored payouts of a race. Returns how many were written."""
    await db.execute(delete(PayoutRecord).where(PayoutRecord.race_id == race_id))
    count = 0
    for seq, payout in enumerate(payouts):
        db.add(PayoutRecord(
            race_id=race_id,
            seq=seq,
            bettor=payout.bettor,
            bet_amount=payout.bet_amount,
            multiplier=payout.multiplier,
            payout_amount=payout.payout_amount,
            exacta_first=payout.exacta[0],
            exacta_second=payout.exacta[1],
        ))
        count += 1
    await db.commit()
    logger.info(f"Stored {count} payouts for race {race_id}")
    return count


async def load_race_history(db: AsyncSession) -> list[RaceResult]:
    """All stored results in race id order."""
    result = await db.execute(select(RaceRecord).order_by(RaceRecord.race_id))
    return [_record_to_result(r) for r in result.scalars().all()]


async def restore_engine_history(db: AsyncSession, engine: RaceEngine) -> int:
    """Seed a fresh engine with the stored history. Returns the next race id."""
    history = await load_race_history(db)
    return engine.load_history(history)


async def load_race_bets(db: AsyncSession, race_id: int) -> list[ExactaBet]:
    result = await db.execute(
        select(BetRecord).where(BetRecord.race_id == race_id).order_by(BetRecord.seq)
    )
    return [
        ExactaBet(
            bettor=b.bettor,
            amount=b.amount,
            first_pick=b.first_pick,
            second_pick=b.second_pick,
            timestamp=b.timestamp,
        )
        for b in result.scalars().all()
    ]


async def get_race_summary(db: AsyncSession, race_id: int) -> dict | None:
    """Result, bet count and payout totals for one stored race."""
    result = await db.execute(
        select(RaceRecord)
        .where(RaceRecord.race_id == race_id)
        .options(selectinload(RaceRecord.bets), selectinload(RaceRecord.payouts))
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one_or_none()
    if not record:
        return None

    total_paid = sum(p.payout_amount for p in record.payouts)
    return {
        **record.to_dict(),
        "bet_count": len(record.bets),
        "winning_bets": len(record.payouts),
        "total_paid": total_paid,
        "house_net": record.total_pot - total_paid,
    }
