# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for writing generated files."""

import os

import pytest

from permkeys.keys.emitter import GeneratedFile
from permkeys.keys.errors import KeyGenerationError, OutputWriteError
from permkeys.keys.writer import STAGING_PREFIX, stale_files, write_files


@pytest.fixture
def files():
    """Two rendered files."""
    return [
        GeneratedFile(path="Administration.ts", content="admin\n", module_name="Administration"),
        GeneratedFile(path="Combined.ts", content="combined\n", module_name="Combined"),
    ]


class TestWriteFiles:
    """Tests for write_files function."""

    def test_creates_output_directory(self, tmp_path, files):
        """Test that a missing output directory is created."""
        output_dir = tmp_path / "a" / "b"
        changed = write_files(files, output_dir)

        assert changed == 2
        assert (output_dir / "Administration.ts").read_text(encoding="utf-8") == "admin\n"
        assert (output_dir / "Combined.ts").read_text(encoding="utf-8") == "combined\n"

    def test_overwrites_existing_files(self, tmp_path, files):
        """Test that earlier output with the same name is replaced."""
        (tmp_path / "Administration.ts").write_text("old\n", encoding="utf-8")
        write_files(files, tmp_path)
        assert (tmp_path / "Administration.ts").read_text(encoding="utf-8") == "admin\n"

    def test_counts_only_changed_files(self, tmp_path, files):
        """Test that unchanged files are not reported as changed."""
        write_files(files, tmp_path)
        assert write_files(files, tmp_path) == 0

    def test_leaves_unrelated_files(self, tmp_path, files):
        """Test that files not produced by the run are kept."""
        (tmp_path / "Legacy.ts").write_text("legacy\n", encoding="utf-8")
        write_files(files, tmp_path)
        assert (tmp_path / "Legacy.ts").exists()

    def test_uses_unix_newlines(self, tmp_path):
        """Test that line endings are written as-is."""
        generated = GeneratedFile(path="A.ts", content="a\nb\n", module_name="A")
        write_files([generated], tmp_path)
        assert (tmp_path / "A.ts").read_bytes() == b"a\nb\n"

    def test_removes_staging_directory(self, tmp_path, files):
        """Test that no staging directory is left behind."""
        output_dir = tmp_path / "out"
        write_files(files, output_dir)
        leftovers = [p for p in tmp_path.iterdir() if p.name.startswith(STAGING_PREFIX)]
        assert leftovers == []

    def test_output_path_is_a_file(self, tmp_path, files):
        """Test that an unusable output directory raises OutputWriteError."""
        blocker = tmp_path / "out"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(OutputWriteError) as exc_info:
            write_files(files, blocker)

        assert isinstance(exc_info.value, OSError)
        assert isinstance(exc_info.value, KeyGenerationError)

    def test_staging_failure_keeps_old_output(self, tmp_path, monkeypatch, files):
        """Test that a failure before replacing leaves old files untouched."""
        (tmp_path / "Administration.ts").write_text("old\n", encoding="utf-8")

        def failing_replace(src, dst):
            raise PermissionError("read-only")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(OutputWriteError):
            write_files(files, tmp_path)

        assert (tmp_path / "Administration.ts").read_text(encoding="utf-8") == "old\n"
        assert not (tmp_path / "Combined.ts").exists()

    def test_failure_midway_restores_old_output(self, tmp_path, monkeypatch):
        """Test that a failure after some files were replaced rolls them back."""
        for name in ("A.ts", "B.ts"):
            (tmp_path / name).write_text(f"old{name[0]}\n", encoding="utf-8")
        files = [
            GeneratedFile(path=f"{name}.ts", content=f"new{name}\n", module_name=name)
            for name in ("A", "B", "C")
        ]
        real_replace = os.replace
        calls = []

        def replace_failing_second(src, dst):
            calls.append((src, dst))
            if len(calls) == 2:
                raise PermissionError("read-only")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", replace_failing_second)

        with pytest.raises(OutputWriteError):
            write_files(files, tmp_path)

        assert {p.name: p.read_text(encoding="utf-8") for p in tmp_path.glob("*.ts")} == {
            "A.ts": "oldA\n",
            "B.ts": "oldB\n",
        }

    def test_failure_on_last_file_removes_new_files(self, tmp_path, monkeypatch):
        """Test that files without an earlier version are removed again."""
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "B.ts").write_text("oldB\n", encoding="utf-8")
        files = [
            GeneratedFile(path=f"{name}.ts", content=f"new{name}\n", module_name=name)
            for name in ("A", "B", "C")
        ]
        real_replace = os.replace

        def replace_failing_on_c(src, dst):
            if str(dst).endswith("C.ts"):
                raise PermissionError("read-only")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", replace_failing_on_c)

        with pytest.raises(OutputWriteError):
            write_files(files, output_dir)

        assert {p.name: p.read_text(encoding="utf-8") for p in output_dir.iterdir()} == {
            "B.ts": "oldB\n",
        }
        leftovers = [p for p in tmp_path.iterdir() if p.name.startswith(STAGING_PREFIX)]
        assert leftovers == []


class TestStaleFiles:
    """Tests for stale_files function."""

    def test_missing_files_are_stale(self, tmp_path, files):
        """Test that files absent on disk are reported."""
        assert stale_files(files, tmp_path) == ["Administration.ts", "Combined.ts"]

    def test_up_to_date(self, tmp_path, files):
        """Test that freshly written files are not stale."""
        write_files(files, tmp_path)
        assert stale_files(files, tmp_path) == []

    def test_changed_content(self, tmp_path, files):
        """Test that edited files are reported."""
        write_files(files, tmp_path)
        (tmp_path / "Combined.ts").write_text("edited\n", encoding="utf-8")
        assert stale_files(files, tmp_path) == ["Combined.ts"]
