# sqltemplates — database-backed template sources for Jinja2
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Database connection factories.

Each function returns a standard DB-API 2.0 connection.  SQLite uses the
built-in ``sqlite3`` module; PostgreSQL uses ``psycopg2`` (optional
dependency).

:func:`default_connection` is the factory a template loader falls back to
when it is given neither a connection nor a factory of its own.  It reads
the ``SQLTEMPLATES_DATABASE`` environment variable.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DATABASE_ENV_VAR = "SQLTEMPLATES_DATABASE"

_POSTGRES_SCHEMES = ("postgresql://", "postgres://")


def connect_sqlite(
    path: str | Path,
    *,
    wal_mode: bool = True,
    foreign_keys: bool = True,
) -> sqlite3.Connection:
    """Open (or create) a SQLite database and return a connection.

    The connection is opened with ``check_same_thread=False`` so that a
    single loader can serve several rendering threads; the loader itself
    serialises every statement.

    Args:
        path: File path (``":memory:"`` for in-memory).
        wal_mode: Enable WAL journal mode for better concurrent access.
        foreign_keys: Enforce foreign key constraints.
    """
    path = str(Path(path).expanduser()) if path != ":memory:" else ":memory:"

    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row

    if wal_mode and path != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys=ON")

    logger.debug("SQLite connection opened: %s", path)
    return conn


def connect_postgresql(
    dsn: str | None = None,
    *,
    host: str = "localhost",
    port: int = 5432,
    database: str = "sqltemplates",
    user: str = "sqltemplates",
    password: str = "",
) -> Any:
    """Open a PostgreSQL connection via psycopg2.

    Either provide a full *dsn* string, or individual parameters.  The
    connection uses plain tuple cursors: call handles read the first
    column of the first row by position.
    """
    try:
        import psycopg2
    except ImportError:
        raise ImportError(
            "psycopg2 not installed. Install with: pip install sqltemplates[postgresql]"
        )

    if dsn:
        conn = psycopg2.connect(dsn)
    else:
        conn = psycopg2.connect(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
        )

    logger.debug("PostgreSQL connection opened: %s:%s/%s", host, port, database)
    return conn


def default_connection() -> Any:
    """Open the connection named by ``$SQLTEMPLATES_DATABASE``.

    A ``postgresql://`` (or ``postgres://``) URL opens PostgreSQL; any other
    value is treated as a SQLite database path.

    Raises:
        ValueError: if the environment variable is not set.
    """
    target = os.environ.get(DATABASE_ENV_VAR, "").strip()
    if not target:
        raise ValueError(
            f"No template database configured; set {DATABASE_ENV_VAR} "
            "or pass a connection explicitly"
        )
    if target.startswith(_POSTGRES_SCHEMES):
        return connect_postgresql(target)
    return connect_sqlite(target)
