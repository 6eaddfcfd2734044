"""Interactive menu for seeding and flushing the hobby-platform database.

Run:
    python -m cli.main
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from seeder.config import SeedContent, Settings, load_settings
from seeder.errors import ConfigurationError, SeederError
from seeder.seed import (
    seed_accounts,
    seed_all,
    seed_listings,
    seed_organizations,
    seed_reservations,
)
from storage.database import count_rows, create_db_engine, create_tables, flush_tables
from storage.log_handler import DatabaseLogHandler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s"

MENU = (
    "> Welcome to [T]he [H]obby [P]roject CLI tool!\n"
    "> Please select an operation\n"
    "  0) Exit\n"
    "  1) Seed Accounts\n"
    "  2) Seed Organizations\n"
    "  3) Seed Listings\n"
    "  4) Seed Reservations\n"
    "  5) Seed All\n"
    "  6) Flush"
)

EXIT = 0
FLUSH = 6

# selection -> (what gets seeded, seeder)
SEED_OPERATIONS: dict[int, tuple[str, Callable]] = {
    1: ("accounts", seed_accounts),
    2: ("organizations", seed_organizations),
    3: ("listings", seed_listings),
    4: ("reservations", seed_reservations),
    5: ("records per table", seed_all),
}


# ---------------------------------------------------------------------------
# Menu loop
# ---------------------------------------------------------------------------
def _prompt_count(stdin: TextIO, stdout: TextIO, label: str) -> Optional[int]:
    print(f"> How many {label}?", file=stdout)
    text = stdin.readline().strip()
    try:
        total = int(text)
    except ValueError:
        logger.error("Error parsing count %r", text)
        print(f"'{text}' is not a number.", file=stdout)
        return None
    if total < 0:
        logger.error("Rejected negative count %d", total)
        print("The count cannot be negative.", file=stdout)
        return None
    return total


def _report(result, label: str, stdout: TextIO) -> None:
    if isinstance(result, dict):
        summary = ", ".join(f"{table}: {n}" for table, n in result.items())
        print(f"Seeded all tables ({summary}).", file=stdout)
    else:
        print(f"Seeded {result} {label}.", file=stdout)


def _flush(engine: Engine, stdout: TextIO) -> None:
    flush_tables(engine)
    remaining = count_rows(engine)
    summary = ", ".join(f"{table}: {n}" for table, n in remaining.items())
    print(f"Flushed all tables (rows remaining: {summary}).", file=stdout)


def run_menu(
    engine: Engine,
    content: Optional[SeedContent] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Show the menu and dispatch selections until Exit or end of input.

    Seeder and storage errors are logged and reported; the loop keeps going.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    while True:
        print(MENU, file=stdout)
        line = stdin.readline()
        if not line:
            logger.info("End of input, exiting")
            return

        text = line.strip()
        logger.info("User selected an option: %r", text)
        try:
            selection = int(text)
        except ValueError:
            logger.error("Error parsing selection %r", text)
            print(f"'{text}' is not a valid selection, please enter a number.", file=stdout)
            continue

        if selection == EXIT:
            print("Goodbye!", file=stdout)
            return

        if selection != FLUSH and selection not in SEED_OPERATIONS:
            print(f"Unknown selection: {selection}", file=stdout)
            continue

        try:
            if selection == FLUSH:
                _flush(engine, stdout)
            else:
                label, seeder = SEED_OPERATIONS[selection]
                total = _prompt_count(stdin, stdout, label)
                if total is not None:
                    _report(seeder(engine, total, content), label, stdout)
        except (SeederError, SQLAlchemyError) as e:
            logger.exception("Operation %d failed", selection)
            print(f"Operation failed: {e}", file=stdout)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def configure_logging(settings: Settings, engine: Optional[Engine] = None) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    if settings.sql_echo:
        # no echo=True on the engine: records already reach the root handler
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    if engine is not None and settings.log_to_database:
        create_tables(engine)
        logging.getLogger().addHandler(DatabaseLogHandler(engine, settings.log_level))


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.critical("Cannot start: %s", e)
        return 1

    engine = create_db_engine(settings.database_url)
    try:
        configure_logging(settings, engine)
        logger.info(
            "DB URL established and pool created: %s",
            engine.url.render_as_string(hide_password=True),
        )
        run_menu(engine, settings.seed)
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
