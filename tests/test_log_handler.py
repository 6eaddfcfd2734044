"""Tests for the database-backed logging handler."""

import logging

import pytest
from sqlalchemy import select

from storage.database import LogEntry, count_rows, create_db_engine, create_tables
from storage.log_handler import DatabaseLogHandler


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test_hobby.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_logger(engine):
    logger = logging.getLogger("hobby.test")
    logger.setLevel(logging.DEBUG)
    handler = DatabaseLogHandler(engine, logging.INFO)
    logger.addHandler(handler)
    yield logger
    logger.removeHandler(handler)


class TestDatabaseLogHandler:
    def test_writes_record(self, engine, db_logger):
        db_logger.warning("Seeded %d accounts", 4)

        with engine.connect() as conn:
            row = conn.execute(select(LogEntry)).mappings().one()
        assert row["level"] == "WARNING"
        assert row["message"] == "Seeded 4 accounts"
        assert row["context"]["logger"] == "hobby.test"
        assert row["context"]["function"] == "test_writes_record"

    def test_respects_level(self, engine, db_logger):
        db_logger.debug("too chatty")
        assert count_rows(engine)["logs"] == 0

    def test_ignores_sqlalchemy_records(self, engine):
        handler = DatabaseLogHandler(engine)
        record = logging.LogRecord("sqlalchemy.engine.Engine", logging.INFO, __file__, 1, "SELECT 1", None, None)
        handler.handle(record)
        assert count_rows(engine)["logs"] == 0

    def test_records_exception_text(self, engine, db_logger):
        try:
            raise RuntimeError("storage unreachable")
        except RuntimeError:
            db_logger.exception("Seeding failed")

        with engine.connect() as conn:
            row = conn.execute(select(LogEntry)).mappings().one()
        assert row["level"] == "ERROR"
        assert "storage unreachable" in row["context"]["exception"]
