"""
Portable column types.

The hub runs on PostgreSQL in production and SQLite in development/tests:
- GUID: native UUID on PostgreSQL, CHAR(36) elsewhere
- JSONType: JSONB on PostgreSQL, JSON elsewhere
- utcnow: naive UTC timestamps, comparable on both backends
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, String, TypeDecorator
from sqlalchemy.dialects import postgresql


def utcnow() -> datetime:
    """Current UTC time without tzinfo (SQLite drops it anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GUID(TypeDecorator):
    """UUID column that round-trips ``uuid.UUID`` on every dialect."""

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        return value if dialect.name == "postgresql" else str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))


class JSONType(TypeDecorator):
    """JSON document column (JSONB where available)."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.JSONB)
        return dialect.type_descriptor(JSON)
