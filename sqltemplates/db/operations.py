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

"""Pure-function query helpers.

All functions take a DB-API connection as their first argument.  SQL is
passed in directly; callers write backend-appropriate SQL (``?`` for
SQLite, ``%s`` for PostgreSQL) or build it with :func:`placeholder`.

The template loader itself does not use these helpers: it keeps its own
long-lived cursors (see :mod:`sqltemplates.loaders.handles`).  They serve
the schema, migration and template-store code.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

logger = logging.getLogger(__name__)


def is_sqlite(conn: Any) -> bool:
    """Return True if the connection is SQLite."""
    return "sqlite3" in type(conn).__module__


def placeholder(conn: Any) -> str:
    """Return the positional parameter marker for this connection."""
    return "?" if is_sqlite(conn) else "%s"


def execute(conn: Any, sql: str, params: Sequence = ()) -> Any:
    """Execute a single statement and return the cursor."""
    cur = conn.cursor()
    cur.execute(sql, params)
    return cur


def fetch_one(conn: Any, sql: str, params: Sequence = ()) -> Any:
    """Execute and return the first row, or ``None``."""
    cur = conn.cursor()
    cur.execute(sql, params)
    return cur.fetchone()


def fetch_all(conn: Any, sql: str, params: Sequence = ()) -> list[Any]:
    """Execute and return all rows."""
    cur = conn.cursor()
    cur.execute(sql, params)
    return cur.fetchall()


def fetch_scalar(conn: Any, sql: str, params: Sequence = ()) -> Any:
    """Execute and return the first column of the first row, or ``None``."""
    row = fetch_one(conn, sql, params)
    if row is None:
        return None
    return row[0]


def table_exists(conn: Any, name: str) -> bool:
    """Check whether a table exists (works on both SQLite and PostgreSQL)."""
    if is_sqlite(conn):
        sql = "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?"
    else:
        sql = "SELECT 1 FROM information_schema.tables WHERE table_name=%s"
    return fetch_one(conn, sql, (name,)) is not None


def create_tables(conn: Any, schema_sql: str) -> None:
    """Execute a (possibly multi-statement) schema DDL string.

    SQLite runs the whole string through ``executescript()``, which commits
    any pending transaction first.  PostgreSQL executes it on one cursor and
    commits.
    """
    if is_sqlite(conn):
        conn.executescript(schema_sql)
    else:
        cur = conn.cursor()
        cur.execute(schema_sql)
        conn.commit()
    logger.debug("Schema DDL applied (%d chars)", len(schema_sql))
