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

"""Exceptions raised by template source loaders.

Resolution and load failures are per-template and recoverable: other
templates may still be found.  They derive from :class:`OSError` so that
callers treating template sources like files can catch them as I/O errors.

A failed freshness check is different.  The caller's template cache can no
longer tell stale sources from fresh ones, so :class:`FreshnessCheckError`
is a :class:`RuntimeError` meant to abort the current load or render.
"""

from __future__ import annotations


class TemplateSourceError(OSError):
    """Recoverable failure to obtain one template's source."""


class TemplateResolutionError(TemplateSourceError):
    """The backend failed while resolving a template name to a locator."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Unable to find template named {name!r}")


class TemplateLoadError(TemplateSourceError):
    """The backend failed while loading the source behind a locator."""

    def __init__(self, locator: str, message: str | None = None) -> None:
        self.locator = locator
        super().__init__(message or f"Unable to load template source for locator {locator!r}")


class FreshnessCheckError(RuntimeError):
    """The backend failed while checking a template's timestamp."""

    def __init__(self, locator: str, message: str | None = None) -> None:
        self.locator = locator
        super().__init__(message or f"Unable to check timestamp for locator {locator!r}")
