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

"""Jinja2 template engine over pluggable source loaders.

Usage::

    from sqltemplates.templates import TemplateEngine
    from sqltemplates.loaders import DatabaseTemplateLoader

    engine = TemplateEngine(DatabaseTemplateLoader(find_sql, load_sql, check_sql, connection=conn))
    rendered = engine.render("greet", name="World")
"""

from sqltemplates.templates.engine import SourceLoaderBridge, TemplateEngine

__all__ = ["SourceLoaderBridge", "TemplateEngine"]
