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

"""Template locators.

A locator is whatever text the resolve call returns.  Loaders treat it as
opaque and only hand it back to the same loader's check and load calls.

The bundled SQLite store uses a small XML fragment::

    <template name="greet" />

:func:`register_locator_functions` exposes :func:`make_locator` and the
name lookup to SQLite as SQL functions, so resolve/check/load calls can be
written in plain SQL.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any

logger = logging.getLogger(__name__)

Locator = str

LOCATOR_TAG = "template"


def make_locator(name: str, **attrs: str) -> Locator:
    """Build a ``<template name="..."/>`` locator with optional extra attributes."""
    element = ET.Element(LOCATOR_TAG)
    element.set("name", name)
    for key in sorted(attrs):
        element.set(key, str(attrs[key]))
    return ET.tostring(element, encoding="unicode")


def parse_locator(text: str) -> dict[str, str]:
    """Return the attributes of a locator built by :func:`make_locator`.

    Raises:
        ValueError: if *text* is not a ``<template>`` element with a name.
    """
    try:
        element = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ValueError(f"Malformed locator: {text[:100]!r}") from exc
    if element.tag != LOCATOR_TAG or "name" not in element.attrib:
        raise ValueError(f"Not a template locator: {text[:100]!r}")
    return dict(element.attrib)


def _sql_locator_make(name: Any) -> str | None:
    if name is None:
        return None
    return make_locator(str(name))


def _sql_locator_name(text: Any) -> str | None:
    # SQLite swallows Python exceptions from user functions into a generic
    # error, so a bad locator simply matches no row.
    if text is None:
        return None
    try:
        return parse_locator(str(text))["name"]
    except ValueError:
        logger.debug("locator_name() got a malformed locator: %r", text)
        return None


def register_locator_functions(conn: Any) -> None:
    """Register ``locator_make(name)`` and ``locator_name(locator)`` on a SQLite connection."""
    conn.create_function("locator_make", 1, _sql_locator_make, deterministic=True)
    conn.create_function("locator_name", 1, _sql_locator_name, deterministic=True)
