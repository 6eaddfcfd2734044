"""Exceptions raised by the seeding layer.

Storage failures are not wrapped here: ``sqlalchemy.exc.SQLAlchemyError``
propagates unchanged from every seeder and from the flusher.
"""

from __future__ import annotations


class SeederError(Exception):
    """Base class for errors raised by the hobby seeder."""


class ConfigurationError(SeederError):
    """Required configuration is missing or invalid."""


class NotEnoughParentsError(SeederError):
    """A seeder could not find enough parent rows to reference."""

    def __init__(self, table: str, required: int, found: int):
        self.table = table
        self.required = required
        self.found = found
        super().__init__(
            f"not found: need {required} row(s) in '{table}', only {found} exist"
        )
