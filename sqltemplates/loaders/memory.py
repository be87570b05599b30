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

"""Dict-backed source loader for tests, fixtures and built-in snippets."""

from __future__ import annotations

import io
import threading
from typing import TextIO

from sqltemplates.errors import FreshnessCheckError, TemplateLoadError
from sqltemplates.loaders.base import SourceLoader
from sqltemplates.locator import Locator

_PREFIX = "memory:"


class MemoryLoader(SourceLoader):
    """Serve templates from a name -> source mapping.

    Timestamps are revision counters: every :meth:`set` of a name bumps its
    revision, so an engine sees the change on its next freshness probe.
    """

    def __init__(self, templates: dict[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._sources: dict[str, str] = {}
        self._revisions: dict[str, int] = {}
        for name, source in (templates or {}).items():
            self.set(name, source)

    def set(self, name: str, source: str) -> None:
        with self._lock:
            self._sources[name] = source
            self._revisions[name] = self._revisions.get(name, 0) + 1

    def remove(self, name: str) -> None:
        with self._lock:
            if self._sources.pop(name, None) is not None:
                self._revisions[name] += 1

    def _name(self, locator: Locator) -> str:
        return locator[len(_PREFIX):] if locator.startswith(_PREFIX) else locator

    def find(self, name: str) -> Locator | None:
        with self._lock:
            return _PREFIX + name if name in self._sources else None

    def last_modified(self, locator: Locator) -> int:
        with self._lock:
            try:
                return self._revisions[self._name(locator)]
            except KeyError as exc:
                raise FreshnessCheckError(locator) from exc

    def read(self, locator: Locator, encoding: str = "utf-8") -> TextIO:
        with self._lock:
            try:
                return io.StringIO(self._sources[self._name(locator)])
            except KeyError as exc:
                raise TemplateLoadError(locator) from exc
