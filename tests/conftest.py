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

"""Shared fixtures: an instrumented stand-in for a DB-API connection."""

from __future__ import annotations

import sqlite3
import threading
import time
from collections.abc import Callable
from typing import Any

import pytest

RESOLVE_SQL = "SELECT find_template(?)"
LOAD_SQL = "SELECT load_template(?)"
CHECK_SQL = "SELECT check_template(?)"

NO_ROW = object()


class StubCursor:
    def __init__(self, backend: StubBackend) -> None:
        self.backend = backend
        self.broken = False
        self._row: tuple | None = None

    def execute(self, sql: str, params: tuple) -> None:
        if self.broken:
            raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
        value = self.backend.run(sql, params[0])
        self._row = None if value is NO_ROW else (value,)

    def fetchone(self) -> tuple | None:
        return self._row

    def close(self) -> None:
        self.backend.closed += 1
        if self.backend.fail_close:
            raise sqlite3.OperationalError("close failed")


class StubBackend:
    """Fake connection: SQL text -> function of the single parameter.

    Counts cursors (prepared handles), closes and calls, and records any
    overlapping round-trips.
    """

    def __init__(self, routines: dict[str, Callable[[Any], Any]], delay: float = 0.0) -> None:
        self.routines = routines
        self.delay = delay
        self.cursors: list[StubCursor] = []
        self.calls: list[tuple[str, Any]] = []
        self.closed = 0
        self.fail_close = False
        self.overlaps = 0
        self._busy = False
        self._guard = threading.Lock()

    @property
    def cursors_created(self) -> int:
        return len(self.cursors)

    def cursor(self) -> StubCursor:
        cur = StubCursor(self)
        self.cursors.append(cur)
        return cur

    def break_cursors(self) -> None:
        """Simulate a connection reset: every existing cursor becomes unusable."""
        for cur in self.cursors:
            cur.broken = True

    def calls_to(self, sql: str) -> int:
        return sum(1 for s, _ in self.calls if s == sql)

    def run(self, sql: str, value: Any) -> Any:
        with self._guard:
            if self._busy:
                self.overlaps += 1
            self._busy = True
        try:
            if self.delay:
                time.sleep(self.delay)
            self.calls.append((sql, value))
            return self.routines[sql](value)
        finally:
            with self._guard:
                self._busy = False


def _greet_routines() -> dict[str, Callable[[Any], Any]]:
    sources = {"loc://greet": "Hello, ${name}!", "loc://bye": "Bye, ${name}."}

    def resolve(name):
        if name == "missing_template":
            raise sqlite3.OperationalError("no such template container")
        locator = f"loc://{name}"
        return locator if locator in sources else NO_ROW

    def load(locator):
        return sources.get(locator, NO_ROW)

    return {RESOLVE_SQL: resolve, LOAD_SQL: load, CHECK_SQL: lambda locator: 1_700_000_000_000}


@pytest.fixture
def backend() -> StubBackend:
    return StubBackend(_greet_routines())
