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

"""A ready-made SQLite template store.

Templates live in one table::

    templates(name TEXT PRIMARY KEY, body TEXT, modified_ms INTEGER)

and :data:`DEFAULT_SQLITE_CALLS` are the resolve/load/check calls a
:class:`~sqltemplates.loaders.DatabaseTemplateLoader` needs to serve it.
They rely on the ``locator_make``/``locator_name`` SQL functions, which
:func:`install_schema` and :func:`open_template_store` register on the
connection.  A connection opened any other way needs
:func:`~sqltemplates.locator.register_locator_functions` before use.

Usage::

    conn = open_template_store("~/.myapp/templates.db")
    save_template(conn, "greet", "Hello, {{ name }}!")
    loader = DatabaseTemplateLoader.from_descriptors(DEFAULT_SQLITE_CALLS, connection=conn)
"""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from sqltemplates.db.connection import connect_sqlite
from sqltemplates.db.migrations import Migration, run_migrations
from sqltemplates.db.operations import execute, fetch_scalar
from sqltemplates.db.transactions import transaction
from sqltemplates.loaders.handles import CallDescriptors
from sqltemplates.locator import register_locator_functions

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_CALLS = CallDescriptors(
    resolve="SELECT locator_make(name) FROM templates WHERE name = ?",
    load="SELECT body FROM templates WHERE name = locator_name(?)",
    check="SELECT modified_ms FROM templates WHERE name = locator_name(?)",
)


def _m001_create_templates(conn: Any) -> None:
    execute(
        conn,
        """\
CREATE TABLE IF NOT EXISTS templates (
    name TEXT PRIMARY KEY,
    body TEXT NOT NULL,
    modified_ms INTEGER NOT NULL
)""",
    )


TEMPLATE_MIGRATIONS = [
    Migration(1, "create_templates", _m001_create_templates),
]


def install_schema(conn: sqlite3.Connection) -> int:
    """Register the locator functions and bring the store schema up to date.

    Returns the number of migrations applied.
    """
    register_locator_functions(conn)
    return run_migrations(conn, TEMPLATE_MIGRATIONS)


def open_template_store(path: str | Path) -> sqlite3.Connection:
    """Open (or create) a SQLite template store ready for the default calls."""
    conn = connect_sqlite(path)
    applied = install_schema(conn)
    if applied:
        logger.info("Initialised template store at %s", path)
    return conn


def save_template(conn: sqlite3.Connection, name: str, body: str) -> int:
    """Insert or replace a template and stamp it; returns the new ``modified_ms``.

    The stamp is strictly greater than the previous one for the same name,
    even when two saves land in the same millisecond.  Inside an open
    :func:`~sqltemplates.db.transactions.transaction` the write joins it.
    """
    now = time.time_ns() // 1_000_000
    with transaction(conn):
        previous = fetch_scalar(conn, "SELECT modified_ms FROM templates WHERE name = ?", (name,))
        modified = now if previous is None else max(now, previous + 1)
        execute(
            conn,
            "INSERT OR REPLACE INTO templates (name, body, modified_ms) VALUES (?, ?, ?)",
            (name, body, modified),
        )
    logger.debug("Saved template %r (%d chars)", name, len(body))
    return modified


def delete_template(conn: sqlite3.Connection, name: str) -> bool:
    """Delete a template; returns whether it existed."""
    with transaction(conn):
        cur = execute(conn, "DELETE FROM templates WHERE name = ?", (name,))
    return cur.rowcount > 0
