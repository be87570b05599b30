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

"""Thin database layer: pure functions over DB-API connections.

Supports SQLite (built-in) and PostgreSQL (optional, via psycopg2), plus a
ready-made SQLite template store.

Usage::

    from sqltemplates.db import open_template_store, save_template

    conn = open_template_store("~/.myapp/templates.db")
    save_template(conn, "greet", "Hello, {{ name }}!")
"""

from sqltemplates.db.connection import (
    DATABASE_ENV_VAR,
    connect_postgresql,
    connect_sqlite,
    default_connection,
)
from sqltemplates.db.migrations import Migration, run_migrations
from sqltemplates.db.operations import (
    create_tables,
    execute,
    fetch_all,
    fetch_one,
    fetch_scalar,
    table_exists,
)
from sqltemplates.db.schema import (
    DEFAULT_SQLITE_CALLS,
    delete_template,
    install_schema,
    open_template_store,
    save_template,
)
from sqltemplates.db.transactions import transaction

__all__ = [
    "DATABASE_ENV_VAR",
    "connect_sqlite",
    "connect_postgresql",
    "default_connection",
    "execute",
    "fetch_one",
    "fetch_all",
    "fetch_scalar",
    "table_exists",
    "create_tables",
    "transaction",
    "Migration",
    "run_migrations",
    "DEFAULT_SQLITE_CALLS",
    "install_schema",
    "open_template_store",
    "save_template",
    "delete_template",
]
