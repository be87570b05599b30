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

"""Filesystem source loader with a user-override directory.

Resolution order for ``find("scoring.txt")``:

1. ``<user_dir>/scoring.txt`` — user's customised version
2. ``<default_dir>/scoring.txt`` — package-shipped default

This lets users override any template without touching installed code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from sqltemplates.errors import TemplateLoadError
from sqltemplates.loaders.base import SourceLoader
from sqltemplates.locator import Locator

logger = logging.getLogger(__name__)


class DirectoryLoader(SourceLoader):
    """Serve templates from a user directory, falling back to a default one.

    Locators are absolute file paths; timestamps are mtimes in milliseconds.
    """

    def __init__(
        self,
        user_dir: str | Path | None = None,
        default_dir: str | Path | None = None,
    ) -> None:
        self.user_dir = Path(user_dir).expanduser() if user_dir else None
        self.default_dir = Path(default_dir).expanduser() if default_dir else None

    def find(self, name: str) -> Locator | None:
        for directory in (self.user_dir, self.default_dir):
            if directory is None:
                continue
            path = directory / name
            if path.is_file():
                return str(path.resolve())
        return None

    def last_modified(self, locator: Locator) -> int:
        try:
            return Path(locator).stat().st_mtime_ns // 1_000_000
        except OSError:
            # Vanished file: report a change so the engine re-resolves it.
            logger.debug("Cannot stat %s", locator)
            return -1

    def read(self, locator: Locator, encoding: str = "utf-8") -> TextIO:
        try:
            return open(locator, encoding=encoding)
        except OSError as exc:
            raise TemplateLoadError(locator) from exc
