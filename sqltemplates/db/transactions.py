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

"""Transaction scope for template-store writes.

On SQLite, :func:`transaction` owns a transaction only when none is open
yet.  Inside an open one (an outer ``with transaction(conn)``, or the
implicit sqlite3 transaction after an uncommitted write) it joins it and
leaves commit or rollback to the owner, so :func:`~sqltemplates.db.schema.save_template`
calls can be batched::

    with transaction(conn):
        save_template(conn, "header", "...")
        save_template(conn, "page", "{% include 'header' %}")
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqltemplates.db.operations import is_sqlite

logger = logging.getLogger(__name__)

def in_transaction(conn: Any) -> bool:
    """Return True if a SQLite connection already has an open transaction.

    psycopg2 opens a transaction implicitly on every statement, reads
    included, so there an open transaction says nothing about ownership and
    every block commits.
    """
    return is_sqlite(conn) and conn.in_transaction


@contextmanager
def transaction(conn: Any) -> Generator[Any, None, None]:
    """Commit on success, roll back and re-raise on exception; join an open transaction.

    Do not enter this while the same connection is serving a template
    loader on another thread; the loader's lock does not cover it.
    """
    if in_transaction(conn):
        yield conn
        return

    if is_sqlite(conn):
        conn.execute("BEGIN")
    try:
        yield conn
    except Exception:
        logger.debug("Rolling back transaction", exc_info=True)
        conn.rollback()
        raise
    conn.commit()
