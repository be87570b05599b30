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

"""Template sources stored in a relational database.

:class:`DatabaseTemplateLoader` finds, checks and loads templates by
running three SQL calls on one long-lived DB-API connection:

* **resolve** — takes the template name, returns a locator (text).  No row,
  ``NULL`` or an empty string means "no such template".
* **load** — takes the locator, returns the source body (text or a LOB).
* **check** — optional; takes the locator, returns an integer timestamp.
  No row or ``NULL`` reads as ``0``, so a deleted template looks changed.
  Without it :meth:`~DatabaseTemplateLoader.last_modified` returns the
  current time, so every freshness probe reports a change.

Each call uses the connection's paramstyle with one positional parameter
and yields its result as the first column of the first row::

    loader = DatabaseTemplateLoader(
        "SELECT template_api.find(%s)",
        "SELECT template_api.load(%s)",
        "SELECT template_api.check(%s)",
        connection=conn,
    )

With PostgreSQL procedures that use OUT parameters, ``CALL proc(%s, NULL)``
works the same way.

Every public method holds the handle cache's lock for the whole round-trip.
A call that fails leaves its handle cached; after a connection reset call
:meth:`~DatabaseTemplateLoader.reset` to force the handles to be recreated.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TextIO

from sqltemplates.db.connection import default_connection
from sqltemplates.errors import (
    FreshnessCheckError,
    TemplateLoadError,
    TemplateResolutionError,
)
from sqltemplates.loaders.base import SourceLoader
from sqltemplates.loaders.handles import CallDescriptors, CallHandleCache, format_call
from sqltemplates.loaders.values import to_locator, to_stream, to_timestamp
from sqltemplates.locator import Locator

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class DatabaseTemplateLoader(SourceLoader):
    """Stateful source loader backed by three database calls.

    Args:
        resolve_call: SQL resolving a template name to a locator.
        load_call: SQL returning the source for a locator.
        check_call: SQL returning a locator's timestamp.  ``None`` or blank
            disables freshness checking.
        connection: An open DB-API connection.  The loader never closes it.
        connection_factory: Zero-argument callable returning a connection,
            used when *connection* is not given.  Defaults to
            :func:`sqltemplates.db.default_connection`.
    """

    def __init__(
        self,
        resolve_call: str,
        load_call: str,
        check_call: str | None = None,
        *,
        connection: Any = None,
        connection_factory: Callable[[], Any] | None = None,
    ) -> None:
        if connection is not None and connection_factory is not None:
            raise ValueError("Pass either a connection or a connection_factory, not both")

        self.calls = CallDescriptors(resolve_call, load_call, check_call)
        self._check_enabled = self.calls.has_check

        if connection is None:
            connection = (connection_factory or default_connection)()

        self.connection = connection
        self._handles = CallHandleCache(connection)

    @classmethod
    def from_descriptors(
        cls,
        descriptors: CallDescriptors,
        *,
        connection: Any = None,
        connection_factory: Callable[[], Any] | None = None,
    ) -> DatabaseTemplateLoader:
        """Build a loader from a :class:`CallDescriptors` bundle."""
        return cls(
            descriptors.resolve,
            descriptors.load,
            descriptors.check,
            connection=connection,
            connection_factory=connection_factory,
        )

    @property
    def checks_freshness(self) -> bool:
        """Whether a check call is configured."""
        return self._check_enabled

    @property
    def handles(self) -> CallHandleCache:
        return self._handles

    # --- Loader contract ---

    def find(self, name: str) -> Locator | None:
        with self._handles.lock:
            try:
                handle = self._handles.get_or_create(self.calls.resolve)
                locator = to_locator(handle.call(name))
            except Exception as exc:
                raise TemplateResolutionError(name) from exc

        if locator is None:
            logger.debug("Template %r not found", name)
        return locator

    def last_modified(self, locator: Locator) -> int:
        if not self._check_enabled:
            return _now_ms()

        with self._handles.lock:
            try:
                handle = self._handles.get_or_create(self.calls.check)
                value = handle.call(locator)
                # NULL or no row: the source is gone. 0 makes the engine re-resolve it.
                return 0 if value is None else to_timestamp(value)
            except Exception as exc:
                raise FreshnessCheckError(locator) from exc

    def read(self, locator: Locator, encoding: str = "utf-8") -> TextIO:
        with self._handles.lock:
            try:
                handle = self._handles.get_or_create(self.calls.load)
                return to_stream(handle.call(locator), encoding)
            except Exception as exc:
                raise TemplateLoadError(locator) from exc

    def close(self, locator: Locator) -> None:
        """Nothing to release: the stream from :meth:`read` owns its data."""

    def reset(self) -> None:
        """Close every prepared call handle.  Safe at any time; never raises."""
        self._handles.invalidate_all()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"resolve_call={format_call(self.calls.resolve)}; "
            f"load_call={format_call(self.calls.load)}; "
            f"check_call={format_call(self.calls.check)})"
        )

    __str__ = __repr__
