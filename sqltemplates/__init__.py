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

"""sqltemplates — Jinja2 template sources from a relational database.

Usage::

    from sqltemplates import DatabaseTemplateLoader, TemplateEngine
    from sqltemplates.db import DEFAULT_SQLITE_CALLS, open_template_store, save_template

    conn = open_template_store("~/.myapp/templates.db")
    save_template(conn, "greet", "Hello, {{ name }}!")

    loader = DatabaseTemplateLoader.from_descriptors(DEFAULT_SQLITE_CALLS, connection=conn)
    engine = TemplateEngine(loader)
    engine.render("greet", name="World")
"""

from sqltemplates.errors import (
    FreshnessCheckError,
    TemplateLoadError,
    TemplateResolutionError,
    TemplateSourceError,
)
from sqltemplates.loaders import (
    CallDescriptors,
    DatabaseTemplateLoader,
    DirectoryLoader,
    MemoryLoader,
    SourceLoader,
)
from sqltemplates.templates import TemplateEngine

__all__ = [
    "CallDescriptors",
    "DatabaseTemplateLoader",
    "DirectoryLoader",
    "MemoryLoader",
    "SourceLoader",
    "TemplateEngine",
    "TemplateSourceError",
    "TemplateResolutionError",
    "TemplateLoadError",
    "FreshnessCheckError",
]
