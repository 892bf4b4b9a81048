# backoffice/adapters/outbound/persistence/models/base_model.py

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import declarative_base

# ─── Base definition ───────────────────────────────────────────────────────────
# Parent class of every ORM model, holds the shared metadata
Base = declarative_base()
# ────────────────────────────────────────────────────────────────────────────────

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer, "sqlite")
