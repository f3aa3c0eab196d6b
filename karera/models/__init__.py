"""Database models for Karera."""

from karera.models.database import Base, get_db, init_db
from karera.models.race import RaceRecord, BetRecord, PayoutRecord

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "RaceRecord",
    "BetRecord",
    "PayoutRecord",
]
