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

"""Template source loaders.

:class:`SourceLoader` is the contract a template engine consumes;
:class:`DatabaseTemplateLoader` is the database-backed implementation.
:class:`MemoryLoader` and :class:`DirectoryLoader` serve tests and
filesystem setups through the same interface.
"""

from sqltemplates.loaders.base import SourceLoader
from sqltemplates.loaders.database import DatabaseTemplateLoader
from sqltemplates.loaders.directory import DirectoryLoader
from sqltemplates.loaders.handles import CallDescriptors, CallHandle, CallHandleCache
from sqltemplates.loaders.memory import MemoryLoader

__all__ = [
    "SourceLoader",
    "DatabaseTemplateLoader",
    "DirectoryLoader",
    "MemoryLoader",
    "CallDescriptors",
    "CallHandle",
    "CallHandleCache",
]
