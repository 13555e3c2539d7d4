# file: revlookup/providers/content_db.py
"""
Area-code lookup backed by a local SQLite table.

The table maps a 3-character area code to a location name, e.g. a
Chinese mobile prefix table where `8613912345678` resolves through key `139`:

    CREATE TABLE area_codes (area_code TEXT PRIMARY KEY, region TEXT, name TEXT)

The number's leading carrier/country prefix is dropped, the next characters
form the key and the display name is read from a fixed column of the matching
row. The database is opened read-only; cursor and connection are closed on
every path.
"""

from __future__ import annotations

import asyncio
import logging
import re
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from revlookup.contact import ContactRecord

from .base import LookupContext, LookupProvider, ProviderConfigError, business_record

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class AreaCodeDbConfig:
    db_path: Path
    table: str = "area_codes"
    key_column: str = "area_code"
    name_column_index: int = 2
    min_length: int = 11
    prefix_length: int = 2
    area_code_length: int = 3


def area_code_for(normalized_number: str, config: AreaCodeDbConfig) -> str | None:
    """
    Return the area-code key for a number, or None if the number is too short.

    The length check runs on the number as given; one leading `+` is then
    dropped, so `+8613912345678` and `8613912345678` both yield `139`.
    """

    if len(normalized_number) < config.min_length:
        return None
    digits = normalized_number[1:] if normalized_number.startswith("+") else normalized_number
    start = config.prefix_length
    return digits[start : start + config.area_code_length]


class AreaCodeDbProvider(LookupProvider):
    """Resolve numbers to a location name through a local area-code table."""

    name = "area_codes"

    def __init__(self, config: AreaCodeDbConfig) -> None:
        for ident in (config.table, config.key_column):
            if not _IDENTIFIER.match(ident):
                raise ProviderConfigError(f"Not a valid SQL identifier: {ident!r}")
        if config.name_column_index < 0:
            raise ProviderConfigError("name_column_index must be >= 0")
        if not Path(config.db_path).is_file():
            raise ProviderConfigError(f"Area-code database not found: {config.db_path}")
        self._config = config
        self._query = f"SELECT * FROM {config.table} WHERE {config.key_column} = ? LIMIT 1"

    def _connect(self) -> sqlite3.Connection:
        uri = f"{Path(self._config.db_path).resolve().as_uri()}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    def query_name(self, area_code: str) -> str | None:
        """Blocking single-row query; returns the display name column or None."""

        with closing(self._connect()) as conn:
            with closing(conn.cursor()) as cursor:
                cursor.execute(self._query, (area_code,))
                row = cursor.fetchone()
        if row is None or len(row) <= self._config.name_column_index:
            return None
        value = row[self._config.name_column_index]
        if value is None:
            return None
        return str(value).strip() or None

    async def lookup(
        self,
        context: LookupContext,
        normalized_number: str,
        formatted_number: str | None = None,
    ) -> ContactRecord | None:
        area_code = area_code_for(normalized_number, self._config)
        if area_code is None:
            self._log_outcome(logger, "not_found", normalized_number)
            return None

        try:
            display_name = await asyncio.to_thread(self.query_name, area_code)
        except sqlite3.Error as exc:
            self._log_failure(logger, "store_failure", exc)
            return None

        if display_name is None:
            self._log_outcome(logger, "not_found", normalized_number)
            return None

        self._log_outcome(logger, "match", normalized_number)
        return business_record(display_name, normalized_number, formatted_number)


def create_area_code_db(
    path: Path,
    rows: Iterable[tuple[str, str, str]],
    *,
    table: str = "area_codes",
) -> int:
    """
    Create (or extend) an area-code table and load `(area_code, region, name)` rows.

    Returns the number of rows written.
    """

    if not _IDENTIFIER.match(table):
        raise ValueError(f"Not a valid SQL identifier: {table!r}")
    path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(path)) as conn:
        with conn:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {table} ("
                "area_code TEXT PRIMARY KEY, region TEXT, name TEXT NOT NULL)"
            )
            cur = conn.executemany(
                f"INSERT OR REPLACE INTO {table}(area_code, region, name) VALUES (?, ?, ?)",
                list(rows),
            )
            return int(cur.rowcount or 0)
