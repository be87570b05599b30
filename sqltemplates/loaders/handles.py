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

"""Lazily prepared call handles over one shared connection.

A :class:`CallHandle` is a DB-API cursor bound to the SQL text of one
backend call (resolve, load or check).  It is created the first time the
call is needed and reused for every later call, so drivers that cache
prepared statements per cursor only prepare once.

:class:`CallHandleCache` owns the handles of one loader.  Its re-entrant
lock is also the loader's lock: the loader holds it for a whole
round-trip, so a handle can never be invalidated between its creation and
its first use, and two statements never run on the connection at once.

State per descriptor::

    UNCREATED --get_or_create--> PREPARED --invalidate_all--> UNCREATED

A handle whose call raises stays PREPARED.  Nothing evicts it except
:meth:`CallHandleCache.invalidate_all`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


def _is_blank(call: str | None) -> bool:
    return call is None or not call.strip()


@dataclass(frozen=True)
class CallDescriptors:
    """The three backend calls of a database template loader.

    Attributes:
        resolve: SQL taking a template name, returning a locator.
        load: SQL taking a locator, returning the template source.
        check: SQL taking a locator, returning an integer timestamp.
            Optional; ``None`` or a blank string disables freshness checks.
    """

    resolve: str
    load: str
    check: str | None = None

    def __post_init__(self) -> None:
        if _is_blank(self.resolve):
            raise ValueError("A resolve call is required")
        if _is_blank(self.load):
            raise ValueError("A load call is required")
        if _is_blank(self.check):
            object.__setattr__(self, "check", None)

    @property
    def has_check(self) -> bool:
        return self.check is not None


class CallHandle:
    """One backend call bound to a cursor on the loader's connection."""

    def __init__(self, connection: Any, descriptor: str) -> None:
        self.descriptor = descriptor
        self._cursor = connection.cursor()

    def call(self, value: Any) -> Any:
        """Run the call with *value* as its only parameter.

        Returns the first column of the first row, or ``None`` when the
        call produced no row.
        """
        self._cursor.execute(self.descriptor, (value,))
        row = self._cursor.fetchone()
        if row is None:
            return None
        return row[0]

    def close(self) -> None:
        self._cursor.close()


class CallHandleCache:
    """Get-or-create cache of :class:`CallHandle` objects, keyed by SQL text."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self.lock = threading.RLock()
        self._handles: dict[str, CallHandle] = {}

    def __len__(self) -> int:
        with self.lock:
            return len(self._handles)

    def __contains__(self, descriptor: object) -> bool:
        with self.lock:
            return descriptor in self._handles

    def get_or_create(self, descriptor: str) -> CallHandle:
        """Return the cached handle for *descriptor*, preparing it on first use."""
        if _is_blank(descriptor):
            raise ValueError("Cannot prepare a handle for an empty call")
        with self.lock:
            handle = self._handles.get(descriptor)
            if handle is None:
                handle = CallHandle(self.connection, descriptor)
                self._handles[descriptor] = handle
                logger.debug("Prepared call handle: %s", format_call(descriptor))
            return handle

    def invalidate_all(self) -> None:
        """Close and forget every cached handle; close failures are ignored."""
        with self.lock:
            if not self._handles:
                return
            handles = list(self._handles.values())
            self._handles.clear()
            for handle in handles:
                try:
                    handle.close()
                except Exception:
                    logger.debug(
                        "Ignoring failure while closing call handle %s",
                        format_call(handle.descriptor), exc_info=True,
                    )
            logger.info("Invalidated %d call handle(s)", len(handles))


def format_call(call: str | None, limit: int = 100) -> str:
    """Render a call for log and ``repr`` output: whitespace collapsed, truncated, quoted."""
    if call is None:
        return "None"
    text = " ".join(call.split())
    if len(text) > limit:
        text = text[:limit] + "..."
    return f'"{text}"'
