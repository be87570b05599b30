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

"""Idempotent, sequential schema migrations.

Applied versions are recorded in a ``schema_version`` table, so running the
same list twice is harmless.  The template store ships its own list (see
:mod:`sqltemplates.db.schema`); applications may run further migrations of
their own against the same table.

Usage::

    MIGRATIONS = [Migration(1, "create_templates", _m001_create_templates)]
    run_migrations(conn, MIGRATIONS)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from sqltemplates.db.operations import (
    create_tables,
    execute,
    fetch_all,
    is_sqlite,
    placeholder,
    table_exists,
)
from sqltemplates.db.transactions import transaction

logger = logging.getLogger(__name__)

VERSION_TABLE = "schema_version"

_SQLITE_VERSION_DDL = f"""\
CREATE TABLE {VERSION_TABLE} (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_POSTGRES_VERSION_DDL = f"""\
CREATE TABLE {VERSION_TABLE} (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TIMESTAMP NOT NULL DEFAULT NOW()
);
"""


@dataclass(frozen=True)
class Migration:
    """A single schema step.

    Attributes:
        version: Sequential integer, unique within a migration list.
        name: Short descriptive name (e.g. ``"create_templates"``).
        up: Callable that receives the connection and applies the DDL.
    """

    version: int
    name: str
    up: Callable[[Any], None]


def get_applied_versions(conn: Any) -> set[int]:
    """Return the migration versions already recorded, or an empty set."""
    if not table_exists(conn, VERSION_TABLE):
        return set()
    return {row[0] for row in fetch_all(conn, f"SELECT version FROM {VERSION_TABLE}")}


def run_migrations(conn: Any, migrations: list[Migration]) -> int:
    """Apply every pending migration in version order.

    Each migration runs in its own transaction together with its
    ``schema_version`` row.  Returns the number of migrations applied.
    """
    if not table_exists(conn, VERSION_TABLE):
        create_tables(conn, _SQLITE_VERSION_DDL if is_sqlite(conn) else _POSTGRES_VERSION_DDL)
        logger.info("Created %s table", VERSION_TABLE)

    applied = get_applied_versions(conn)
    ph = placeholder(conn)
    pending = [m for m in sorted(migrations, key=lambda m: m.version) if m.version not in applied]

    for migration in pending:
        logger.info("Applying migration %d: %s", migration.version, migration.name)
        with transaction(conn):
            migration.up(conn)
            execute(
                conn,
                f"INSERT INTO {VERSION_TABLE} (version, name) VALUES ({ph}, {ph})",
                (migration.version, migration.name),
            )

    if pending:
        logger.info("Applied %d migration(s)", len(pending))
    return len(pending)
