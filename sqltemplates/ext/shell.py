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

"""``shell_exec`` — run an OS command from a template.

Returns the command's standard output and standard error as lists of
lines::

    {% for line in shell_exec("git log --oneline -3").stdout %}
    -- {{ line }}
    {% endfor %}

Registered as a template global by ``TemplateEngine(enable_shell=True)``.
The command runs without a shell; a string is split with :mod:`shlex`.
A non-zero exit status is not an error: inspect ``stderr``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence

logger = logging.getLogger(__name__)


class ShellExecError(Exception):
    """The command could not be started."""


def _to_argv(command: str | Sequence[str]) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    if isinstance(command, Sequence):
        argv = []
        for i, part in enumerate(command, start=1):
            if not isinstance(part, str):
                raise TypeError(
                    f"Illegal type of command element #{i}: expected str, got {type(part).__name__}"
                )
            argv.append(part)
        return argv
    raise TypeError(f"Illegal command type: expected str or sequence, got {type(command).__name__}")


def shell_exec(command: str | Sequence[str], encoding: str = "utf-8") -> dict[str, list[str]]:
    """Run *command* and return ``{"stdout": [...], "stderr": [...]}``."""
    argv = _to_argv(command)
    if not argv:
        raise ValueError("Empty command")

    logger.debug("shell_exec: %s", argv)
    try:
        proc = subprocess.run(argv, capture_output=True, check=False)
    except OSError as exc:
        raise ShellExecError(f"Shell command execution failed: {argv[0]}") from exc

    return {
        "stdout": proc.stdout.decode(encoding, errors="replace").splitlines(),
        "stderr": proc.stderr.decode(encoding, errors="replace").splitlines(),
    }
