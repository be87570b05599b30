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

"""Tests for the memory and directory source loaders."""

from __future__ import annotations

import os

import pytest

from sqltemplates.errors import FreshnessCheckError, TemplateLoadError
from sqltemplates.loaders import DirectoryLoader, MemoryLoader, SourceLoader


class TestMemoryLoader:
    def test_is_a_source_loader(self):
        assert isinstance(MemoryLoader(), SourceLoader)

    def test_find_and_read(self):
        loader = MemoryLoader({"a": "alpha"})
        locator = loader.find("a")
        assert locator == "memory:a"
        assert loader.read(locator).read() == "alpha"
        assert loader.find("b") is None

    def test_revisions(self):
        loader = MemoryLoader({"a": "alpha"})
        locator = loader.find("a")
        assert loader.last_modified(locator) == 1
        loader.set("a", "again")
        assert loader.last_modified(locator) == 2

    def test_unknown_locator(self):
        loader = MemoryLoader()
        with pytest.raises(TemplateLoadError):
            loader.read("memory:x")
        with pytest.raises(FreshnessCheckError):
            loader.last_modified("memory:x")

    def test_reset_and_close_are_noops(self):
        loader = MemoryLoader({"a": "alpha"})
        loader.close("memory:a")
        loader.reset()
        assert loader.find("a") == "memory:a"


class TestDirectoryLoader:
    def test_user_dir_first(self, tmp_path):
        (tmp_path / "user").mkdir()
        (tmp_path / "defaults").mkdir()
        (tmp_path / "user" / "t.txt").write_text("user")
        (tmp_path / "defaults" / "t.txt").write_text("default")

        loader = DirectoryLoader(tmp_path / "user", tmp_path / "defaults")
        locator = loader.find("t.txt")
        with loader.read(locator) as stream:
            assert stream.read() == "user"

    def test_mtime_in_milliseconds(self, tmp_path):
        path = tmp_path / "t.txt"
        path.write_text("x")
        os.utime(path, ns=(1_700_000_000_123_000_000, 1_700_000_000_123_000_000))

        loader = DirectoryLoader(default_dir=tmp_path)
        assert loader.last_modified(loader.find("t.txt")) == 1_700_000_000_123

    def test_vanished_file_reports_change(self, tmp_path):
        path = tmp_path / "t.txt"
        path.write_text("x")
        loader = DirectoryLoader(default_dir=tmp_path)
        locator = loader.find("t.txt")
        path.unlink()
        assert loader.last_modified(locator) == -1
        with pytest.raises(TemplateLoadError):
            loader.read(locator)

    def test_no_directories(self):
        assert DirectoryLoader().find("t.txt") is None
