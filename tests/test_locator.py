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

"""Tests for sqltemplates.locator."""

from __future__ import annotations

import pytest

from sqltemplates.db import connect_sqlite, fetch_scalar
from sqltemplates.locator import make_locator, parse_locator, register_locator_functions


class TestMakeLocator:
    def test_name_only(self):
        assert make_locator("greet") == '<template name="greet" />'

    def test_extra_attributes_sorted(self):
        text = make_locator("greet", schema="app", container="pkg")
        assert text == '<template name="greet" container="pkg" schema="app" />'

    def test_escapes_markup(self):
        text = make_locator('a"<b>&c')
        assert parse_locator(text)["name"] == 'a"<b>&c'


class TestParseLocator:
    def test_round_trip_attributes(self):
        assert parse_locator(make_locator("x", container="c")) == {"name": "x", "container": "c"}

    @pytest.mark.parametrize("text", ["not xml", "<other name='x'/>", "<template/>"])
    def test_rejects_bad_locators(self, text):
        with pytest.raises(ValueError):
            parse_locator(text)


class TestSqlFunctions:
    def test_registered_on_sqlite(self):
        conn = connect_sqlite(":memory:")
        register_locator_functions(conn)
        locator = fetch_scalar(conn, "SELECT locator_make(?)", ("greet",))
        assert parse_locator(locator) == {"name": "greet"}
        assert fetch_scalar(conn, "SELECT locator_name(?)", (locator,)) == "greet"

    def test_bad_locator_yields_null(self):
        conn = connect_sqlite(":memory:")
        register_locator_functions(conn)
        assert fetch_scalar(conn, "SELECT locator_name(?)", ("garbage",)) is None
        assert fetch_scalar(conn, "SELECT locator_make(NULL)") is None
