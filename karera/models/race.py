"""Models for persisted race results, bets and payouts."""

import json
from datetime import datetime
from typing import List

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from karera.config import manila_now_naive
from karera.models.database import Base


class RaceRecord(Base):
    """A settled race, one row per RaceResult."""

    __tablename__ = "race_results"

    race_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rankings: Mapped[str] = mapped_column(Text)       # JSON array of horse ids
    finish_times: Mapped[str] = mapped_column(Text)   # JSON array, parallel to rankings
    winning_first: Mapped[int] = mapped_column(Integer)
    winning_second: Mapped[int] = mapped_column(Integer)
    total_pot: Mapped[int] = mapped_column(BigInteger)
    seed_used: Mapped[str] = mapped_column(String(20))  # u64 does not fit a signed BIGINT

    created_at: Mapped[datetime] = mapped_column(DateTime, default=manila_now_naive)

    # Relationships
    bets: Mapped[List["BetRecord"]] = relationship(
        "BetRecord", back_populates="race", cascade="all, delete-orphan"
    )
    payouts: Mapped[List["PayoutRecord"]] = relationship(
        "PayoutRecord", back_populates="race", cascade="all, delete-orphan"
    )

    def to_dict(self) -> dict:
        return {
            "race_id": self.race_id,
            "rankings": json.loads(self.rankings),
            "finish_times": json.loads(self.finish_times),
            "winning_exacta": [self.winning_first, self.winning_second],
            "total_pot": self.total_pot,
            "seed_used": int(self.seed_used),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class BetRecord(Base):
    """An exacta bet as accepted by the ledger."""

    __tablename__ = "bets"
    __table_args__ = (Index("ix_bets_race_id", "race_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[int] = mapped_column(Integer, ForeignKey("race_results.race_id"))
    seq: Mapped[int] = mapped_column(Integer)  # ledger order within the race
    bettor: Mapped[str] = mapped_column(String(100))
    amount: Mapped[int] = mapped_column(BigInteger)
    first_pick: Mapped[int] = mapped_column(Integer)
    second_pick: Mapped[int] = mapped_column(Integer)
    timestamp: Mapped[int] = mapped_column(BigInteger)

    race: Mapped["RaceRecord"] = relationship("RaceRecord", back_populates="bets")


class PayoutRecord(Base):
    """A winning bet's settlement."""

    __tablename__ = "payouts"
    __table_args__ = (Index("ix_payouts_race_id", "race_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[int] = mapped_column(Integer, ForeignKey("race_results.race_id"))
    seq: Mapped[int] = mapped_column(Integer)
    bettor: Mapped[str] = mapped_column(String(100))
    bet_amount: Mapped[int] = mapped_column(BigInteger)
    multiplier: Mapped[int] = mapped_column(Integer)
    payout_amount: Mapped[int] = mapped_column(BigInteger)
    exacta_first: Mapped[int] = mapped_column(Integer)
    exacta_second: Mapped[int] = mapped_column(Integer)
    settled_at: Mapped[datetime] = mapped_column(DateTime, default=manila_now_naive)

    race: Mapped["RaceRecord"] = relationship("RaceRecord", back_populates="payouts")
