# pantrypal/orm_types.py
from datetime import datetime, timezone

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

# JSONB on PostgreSQL, plain JSON (TEXT) on SQLite
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Python-side timestamp default.

    Microsecond precision keeps "newest first" ordering stable on SQLite,
    where CURRENT_TIMESTAMP only has one-second resolution.
    """
    return datetime.now(timezone.utc)
