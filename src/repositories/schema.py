"""Schema bootstrap for the result ladder tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Base


def ensure_schema(engine: Engine) -> None:
    """Create all ladder tables and indexes if they do not exist."""
    with engine.begin() as connection:
        for table in Base.metadata.sorted_tables:
            table.create(bind=connection, checkfirst=True)


__all__ = ["ensure_schema"]
