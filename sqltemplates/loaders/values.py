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

"""Conversion of raw DB-API output values.

Drivers disagree on what a text, CLOB or timestamp column comes back as:
``str`` or ``bytes``, a ``memoryview`` for PostgreSQL ``bytea``, a LOB
object with ``read()`` for Oracle, ``int``, ``Decimal`` or ``datetime``
for timestamps.  These helpers turn them into the three shapes the loader
contract promises: locator text, an integer timestamp in epoch
milliseconds, and a character stream.

Each helper raises :class:`TypeError` or :class:`ValueError` on output it
cannot convert; the loader wraps those in its own error types.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, TextIO

_BINARY_TYPES = (bytes, bytearray, memoryview)


def _read_lob(value: Any) -> Any:
    """Materialise LOB-like objects (anything with ``read()``)."""
    if hasattr(value, "read") and not isinstance(value, (str, *_BINARY_TYPES)):
        return value.read()
    return value


def _decode(value: Any, encoding: str) -> str:
    if isinstance(value, memoryview):
        value = value.tobytes()
    return bytes(value).decode(encoding)


def to_locator(value: Any, encoding: str = "utf-8") -> str | None:
    """Return resolve output as locator text; ``None`` or ``""`` means not found."""
    value = _read_lob(value)
    if value is None:
        return None
    if isinstance(value, _BINARY_TYPES):
        value = _decode(value, encoding)
    if not isinstance(value, str):
        raise TypeError(f"Expected locator text, got {type(value).__name__}")
    return value or None


def to_timestamp(value: Any) -> int:
    """Return check output as an integer timestamp (epoch milliseconds for datetimes)."""
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Expected an integer timestamp, got {value!r}")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, (int, Decimal)):
        return int(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Timestamp is not integral: {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"Expected an integer timestamp, got {type(value).__name__}")


def to_stream(value: Any, encoding: str = "utf-8") -> TextIO:
    """Return load output as a character stream over the whole source body."""
    value = _read_lob(value)
    if value is None:
        raise ValueError("Load call returned no source")
    if isinstance(value, _BINARY_TYPES):
        value = _decode(value, encoding)
    if not isinstance(value, str):
        raise TypeError(f"Expected template source text, got {type(value).__name__}")
    return io.StringIO(value)
