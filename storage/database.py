"""Database layer — SQLAlchemy engine, schema, and table-wide maintenance.

Works against PostgreSQL (JSONB, native UUID) or SQLite (JSON, CHAR(32) UUID).
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    Uuid,
    create_engine,
    delete,
    event,
    func,
    select,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

JsonDocument = JSON().with_variant(JSONB(), "postgresql")

# Pass as ``extra`` to keep a record out of the ``logs`` table.
SKIP_DATABASE_LOG = {"skip_database_log": True}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def create_db_engine(database_url: str) -> Engine:
    """Create the pooled engine shared by every seeding operation."""
    engine = create_engine(database_url)

    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless enabled per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# ---------------------------------------------------------------------------
# ORM Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"))
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"))
    title = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    equipment = Column(JsonDocument, default=list)  # ordered list of item names
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"))
    listing_id = Column(Uuid, ForeignKey("listings.id", ondelete="CASCADE"))
    booked_at = Column(DateTime(timezone=True), default=utcnow)


class LogEntry(Base):
    __tablename__ = "logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    level = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    context = Column(JsonDocument, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow)


# Parents before children; flushing walks the same order.
MANAGED_TABLES = (Account, Organization, Listing, Reservation, LogEntry)


# ---------------------------------------------------------------------------
# Schema lifecycle
# ---------------------------------------------------------------------------
def create_tables(engine: Engine) -> None:
    """Create every managed table that does not exist yet."""
    logger.info("Create tables called")
    Base.metadata.create_all(engine, checkfirst=True)
    logger.info("Tables created/already exist")


def flush_tables(engine: Engine) -> dict[str, int]:
    """Delete every row from every managed table in a single transaction.

    Returns the number of rows each DELETE removed directly; rows removed by
    a cascade from a parent table are not counted again.
    """
    logger.info("Flush tables called")
    create_tables(engine)  # tables may not exist yet on a fresh database
    deleted: dict[str, int] = {}
    with engine.begin() as conn:
        for model in MANAGED_TABLES:
            result = conn.execute(delete(model))
            deleted[model.__tablename__] = result.rowcount
    # logged after the commit; kept out of the logs table it just emptied
    logger.info("Flushed tables: %s", deleted, extra=SKIP_DATABASE_LOG)
    return deleted


def count_rows(engine: Engine) -> dict[str, int]:
    """Return the current row count of every managed table."""
    with engine.connect() as conn:
        return {
            model.__tablename__: conn.execute(
                select(func.count()).select_from(model)
            ).scalar_one()
            for model in MANAGED_TABLES
        }
