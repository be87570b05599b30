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

"""Jinja2 integration for :class:`~sqltemplates.loaders.SourceLoader`.

:class:`SourceLoaderBridge` adapts any source loader to Jinja2's loader
protocol; :class:`TemplateEngine` wraps a Jinja2 environment around one.

Failure mapping in the bridge:

* template not found, resolution or load failure — ``TemplateNotFound``
  (chained to the loader error), so one broken template does not stop
  others from rendering;
* freshness-check failure — propagates unchanged and aborts the render.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from jinja2 import BaseLoader, Environment, TemplateNotFound

from sqltemplates.errors import TemplateLoadError, TemplateResolutionError
from sqltemplates.ext.shell import shell_exec
from sqltemplates.loaders.base import SourceLoader
from sqltemplates.loaders.directory import DirectoryLoader

logger = logging.getLogger(__name__)


class SourceLoaderBridge(BaseLoader):
    """Jinja2 loader that delegates to a :class:`SourceLoader`."""

    def __init__(self, loader: SourceLoader) -> None:
        self.loader = loader

    def get_source(
        self, environment: Environment, template: str,
    ) -> tuple[str, str, Callable[[], bool]]:
        try:
            locator = self.loader.find(template)
        except TemplateResolutionError as exc:
            logger.warning("Resolving template %r via %s failed: %s", template, self.loader, exc.__cause__)
            raise TemplateNotFound(template) from exc
        if locator is None:
            raise TemplateNotFound(template)

        mtime = self.loader.last_modified(locator)
        try:
            with self.loader.read(locator) as stream:
                source = stream.read()
        except TemplateLoadError as exc:
            logger.warning("Loading template %r via %s failed: %s", template, self.loader, exc.__cause__)
            raise TemplateNotFound(template) from exc
        finally:
            self.loader.close(locator)

        return source, locator, lambda: self.loader.last_modified(locator) == mtime


class TemplateEngine:
    """Load and render Jinja2 templates from a source loader.

    Args:
        loader: Where template sources come from.
        enable_shell: Expose :func:`~sqltemplates.ext.shell.shell_exec` to
            templates as the global ``shell_exec``.  Only for trusted
            templates.
    """

    def __init__(self, loader: SourceLoader, *, enable_shell: bool = False) -> None:
        self._loader = loader
        self._env = Environment(
            loader=SourceLoaderBridge(loader),
            keep_trailing_newline=True,
            autoescape=False,  # Templates generate code and plain text, not HTML
        )
        if enable_shell:
            self._env.globals["shell_exec"] = shell_exec

    @classmethod
    def from_directories(
        cls,
        user_dir: Path | None = None,
        default_dir: Path | None = None,
        **kwargs: Any,
    ) -> TemplateEngine:
        """Engine over a :class:`DirectoryLoader` (user dir first, then defaults)."""
        return cls(DirectoryLoader(user_dir, default_dir), **kwargs)

    @property
    def loader(self) -> SourceLoader:
        return self._loader

    @property
    def environment(self) -> Environment:
        return self._env

    def render(self, template_name: str, **variables: Any) -> str:
        """Render a template with the given variables.

        Raises ``jinja2.TemplateNotFound`` if the template cannot be found
        or loaded.
        """
        tmpl = self._env.get_template(template_name)
        return tmpl.render(**variables)

    def has_template(self, template_name: str) -> bool:
        """Check whether a template can be found and loaded."""
        try:
            self._env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False

    def reset(self) -> None:
        """Drop compiled templates and the loader's internal state."""
        if self._env.cache is not None:
            self._env.cache.clear()
        self._loader.reset()
        logger.info("Template engine reset (%s)", self._loader)
