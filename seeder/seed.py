"""Seeders — generate synthetic hobby-platform rows with Faker and insert them.

Every seeder ensures the schema exists, checks that enough parent rows are
available, then inserts one row per transaction. A storage error stops the
loop and propagates; rows inserted before it are kept.
"""

from __future__ import annotations

import logging
import random
from datetime import timedelta
from typing import Optional
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import HashingError
from faker import Faker
from pydantic import BaseModel
from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from storage.database import (
    Account,
    Listing,
    Organization,
    Reservation,
    create_tables,
    utcnow,
)

from .config import SeedContent
from .errors import NotEnoughParentsError
from .records import AccountRecord, ListingRecord, OrganizationRecord, ReservationRecord

logger = logging.getLogger(__name__)

fake = Faker()
_password_hasher = PasswordHasher()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def hash_password(password: str) -> str:
    """Argon2id hash with a fresh random salt on every call."""
    return _password_hasher.hash(password)


def _check_total(total: int) -> None:
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise ValueError(f"total must be a non-negative integer, got {total!r}")


def _fetch_ids(engine: Engine, model, limit: int) -> list[UUID]:
    with engine.connect() as conn:
        return list(conn.execute(select(model.id).limit(limit)).scalars())


def _require_parents(ids: list[UUID], table: str, total: int) -> None:
    if len(ids) < total:
        logger.error(
            "Not enough rows in %s to seed %d record(s): found %d",
            table, total, len(ids),
        )
        raise NotEnoughParentsError(table, total, len(ids))


def _persist(engine: Engine, model, record: BaseModel) -> None:
    with engine.begin() as conn:
        conn.execute(insert(model), record.model_dump())


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
def seed_accounts(engine: Engine, total: int, content: Optional[SeedContent] = None) -> int:
    """Insert ``total`` accounts whose password is the fixture password.

    A record whose hash cannot be computed is logged and skipped, so the
    return value (rows inserted) may be lower than ``total``.
    """
    _check_total(total)
    content = content or SeedContent()
    logger.info("Seed accounts called (total=%d)", total)
    create_tables(engine)

    inserted = 0
    for i in range(total):
        try:
            password_hash = hash_password(content.fixture_password)
        except HashingError:
            logger.exception("Error creating password hash for account %d, skipping", i)
            continue

        account = AccountRecord(
            email=f"user{i}-{fake.safe_email()}",
            password_hash=password_hash,
        )
        _persist(engine, Account, account)
        inserted += 1
        logger.debug("Account %s inserted (%s)", account.id, account.email)

    logger.info("Seeding accounts completed: %d inserted", inserted)
    return inserted


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------
def seed_organizations(engine: Engine, total: int, content: Optional[SeedContent] = None) -> int:
    """Insert ``total`` organizations, the i-th owned by the i-th fetched account."""
    _check_total(total)
    content = content or SeedContent()
    logger.info("Seed organizations called (total=%d)", total)
    create_tables(engine)

    owner_ids = _fetch_ids(engine, Account, total)
    _require_parents(owner_ids, Account.__tablename__, total)

    for i in range(total):
        organization = OrganizationRecord(
            name=f"Business-{i}-{fake.company()}",
            description=content.organization_description,
            owner_id=owner_ids[i],
        )
        _persist(engine, Organization, organization)
        logger.debug("Organization %s inserted", organization.id)

    logger.info("Seeding organizations completed: %d inserted", total)
    return total


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------
def seed_listings(engine: Engine, total: int, content: Optional[SeedContent] = None) -> int:
    """Insert ``total`` listings, the i-th belonging to the i-th fetched organization."""
    _check_total(total)
    content = content or SeedContent()
    logger.info("Seed listings called (total=%d)", total)
    create_tables(engine)

    organization_ids = _fetch_ids(engine, Organization, total)
    _require_parents(organization_ids, Organization.__tablename__, total)

    for i in range(total):
        offset = timedelta(days=random.randint(0, content.max_schedule_offset_days))
        listing = ListingRecord(
            organization_id=organization_ids[i],
            title=content.listing_title,
            location=fake.city(),
            capacity=content.listing_capacity,
            scheduled_at=utcnow() + offset,
            equipment=list(content.listing_equipment),
        )
        _persist(engine, Listing, listing)
        logger.debug("Listing %s inserted (%s)", listing.id, listing.location)

    logger.info("Seeding listings completed: %d inserted", total)
    return total


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------
def seed_reservations(engine: Engine, total: int, content: Optional[SeedContent] = None) -> int:
    """Insert ``total`` reservations pairing the i-th account with the i-th listing."""
    _check_total(total)
    logger.info("Seed reservations called (total=%d)", total)
    create_tables(engine)

    account_ids = _fetch_ids(engine, Account, total)
    listing_ids = _fetch_ids(engine, Listing, total)
    _require_parents(account_ids, Account.__tablename__, total)
    _require_parents(listing_ids, Listing.__tablename__, total)

    for i in range(total):
        reservation = ReservationRecord(account_id=account_ids[i], listing_id=listing_ids[i])
        _persist(engine, Reservation, reservation)
        logger.debug("Reservation %s inserted", reservation.id)

    logger.info("Seeding reservations completed: %d inserted", total)
    return total


# ---------------------------------------------------------------------------
# Everything
# ---------------------------------------------------------------------------
def seed_all(engine: Engine, total: int, content: Optional[SeedContent] = None) -> dict[str, int]:
    """Run every seeder in dependency order with the same ``total``.

    The first error propagates; steps that already completed are not undone.
    """
    logger.info("Seed all called (total=%d)", total)
    inserted = {
        Account.__tablename__: seed_accounts(engine, total, content),
        Organization.__tablename__: seed_organizations(engine, total, content),
        Listing.__tablename__: seed_listings(engine, total, content),
        Reservation.__tablename__: seed_reservations(engine, total, content),
    }
    logger.info("Completed all seeding: %s", inserted)
    return inserted
