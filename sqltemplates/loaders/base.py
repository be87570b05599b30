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

"""Abstract base class for template source loaders.

A source loader answers four questions for a template engine:

* ``find(name)`` — where is this template?  Returns a locator or ``None``.
* ``last_modified(locator)`` — when did it last change?
* ``read(locator)`` — give me its source as a character stream.
* ``close(locator)`` — I am done with this locator.

plus ``reset()``, which drops whatever internal state the loader keeps so
the next call starts from scratch.  The engine only depends on this
interface; :class:`~sqltemplates.templates.SourceLoaderBridge` adapts it
to Jinja2.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TextIO

from sqltemplates.locator import Locator


class SourceLoader(ABC):
    """Abstract base class for template source loaders."""

    @abstractmethod
    def find(self, name: str) -> Locator | None:
        """Resolve *name* to a locator, or ``None`` if there is no such template.

        Raises :class:`~sqltemplates.errors.TemplateResolutionError` when
        the lookup itself fails.
        """

    @abstractmethod
    def last_modified(self, locator: Locator) -> int:
        """Return the source's timestamp; a changed value means a stale copy.

        Raises :class:`~sqltemplates.errors.FreshnessCheckError` on failure.
        """

    @abstractmethod
    def read(self, locator: Locator, encoding: str = "utf-8") -> TextIO:
        """Open the source behind *locator*.  The caller closes the stream.

        Raises :class:`~sqltemplates.errors.TemplateLoadError` on failure.
        """

    def close(self, locator: Locator) -> None:
        """Release per-locator resources.  Nothing to release by default."""

    def reset(self) -> None:
        """Drop internal state.  Stateless loaders have nothing to drop."""
