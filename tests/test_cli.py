"""Tests for the interactive menu loop."""

import io
import logging

import pytest
from sqlalchemy import select

import cli.main as cli_main
from cli.main import configure_logging, run_menu
from seeder.config import Settings, load_settings
from storage.database import LogEntry, count_rows, create_db_engine


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite database for each test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test_hobby.db'}")
    yield engine
    engine.dispose()


def _run(engine, text):
    stdout = io.StringIO()
    run_menu(engine, stdin=io.StringIO(text), stdout=stdout)
    return stdout.getvalue()


class TestRunMenu:
    def test_exit(self, engine):
        output = _run(engine, "0\n")
        assert "Please select an operation" in output
        assert "Goodbye!" in output

    def test_non_numeric_selection_reprompts(self, engine):
        """Garbage input is reported and the menu is shown again."""
        output = _run(engine, "abc\n0\n")
        assert "'abc' is not a valid selection" in output
        assert output.count("Please select an operation") == 2
        assert "Goodbye!" in output

    def test_unknown_selection(self, engine):
        output = _run(engine, "42\n0\n")
        assert "Unknown selection: 42" in output
        assert "Goodbye!" in output

    def test_end_of_input_exits(self, engine):
        output = _run(engine, "")
        assert output.count("Please select an operation") == 1

    def test_seed_accounts(self, engine):
        output = _run(engine, "1\n2\n0\n")
        assert "How many accounts?" in output
        assert "Seeded 2 accounts." in output
        assert count_rows(engine)["accounts"] == 2

    def test_invalid_count(self, engine):
        output = _run(engine, "1\nlots\n1\n-3\n0\n")
        assert "'lots' is not a number." in output
        assert "The count cannot be negative." in output
        assert count_rows(engine)["accounts"] == 0

    def test_precondition_failure_is_reported(self, engine):
        """A seeder error is reported and the loop keeps running."""
        output = _run(engine, "2\n3\n0\n")
        assert "Operation failed: not found" in output
        assert "Goodbye!" in output

    def test_seed_all_then_flush(self, engine):
        output = _run(engine, "5\n1\n6\n0\n")
        assert "How many records per table?" in output
        assert "Seeded all tables (accounts: 1, organizations: 1, listings: 1, reservations: 1)." in output
        assert "Flushed all tables" in output
        assert all(n == 0 for n in count_rows(engine).values())


class TestMain:
    def test_missing_database_url_is_fatal(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setattr(cli_main, "load_settings", lambda: load_settings({}))
        assert cli_main.main() == 1

    def test_runs_menu_until_exit(self, tmp_path, monkeypatch):
        url = f"sqlite:///{tmp_path / 'main.db'}"
        monkeypatch.setattr(
            cli_main, "load_settings", lambda: cli_main.Settings(database_url=url)
        )
        monkeypatch.setattr("sys.stdin", io.StringIO("0\n"))
        assert cli_main.main() == 0


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        root = logging.getLogger()
        sql_logger = logging.getLogger("sqlalchemy.engine")
        handlers, root_level, sql_level = list(root.handlers), root.level, sql_logger.level
        yield
        for handler in root.handlers[:]:
            if handler not in handlers:
                root.removeHandler(handler)
        root.setLevel(root_level)
        sql_logger.setLevel(sql_level)

    def test_sql_echo_uses_logger_level(self, engine):
        """SQL echo goes through the sqlalchemy.engine logger, not an extra handler."""
        settings = Settings(database_url="sqlite://", sql_echo=True)
        configure_logging(settings, engine)

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger("sqlalchemy.engine").handlers == []
        assert engine.echo is False

    def test_flush_leaves_no_log_rows(self, engine):
        """With the database sink attached, a flush still empties every table."""
        settings = Settings(database_url="sqlite://", log_to_database=True)
        configure_logging(settings, engine)
        logging.getLogger().setLevel(logging.INFO)

        output = _run(engine, "5\n1\n6\n")

        assert "logs: 0)." in output
        with engine.connect() as conn:
            messages = conn.execute(select(LogEntry.message)).scalars().all()
        # only the end-of-input record written after the flush remains
        assert messages == ["End of input, exiting"]
        counts = count_rows(engine)
        assert counts["accounts"] == counts["reservations"] == 0
