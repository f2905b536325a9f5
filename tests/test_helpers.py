from __future__ import annotations

import os
import socket
import stat
from pathlib import Path

import pytest

from indent_alignment.exceptions import LintFileError
from indent_alignment.filesystem import (
    collect_file_stat,
    collect_markdown_files,
    contains_symlink,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    safe_read,
)
from indent_alignment.linter import lint_file


def test_get_max_file_size_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("INDENT_ALIGNMENT_MAX_FILE_SIZE", "invalid")
    with pytest.raises(ValueError):
        get_max_file_size()


def test_get_max_file_size_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("INDENT_ALIGNMENT_MAX_FILE_SIZE", "0")
    with pytest.raises(ValueError):
        get_max_file_size()


def test_get_max_file_size_prefers_environment(monkeypatch):
    monkeypatch.setenv("INDENT_ALIGNMENT_MAX_FILE_SIZE", "2048")
    assert get_max_file_size(default=1) == 2048

    monkeypatch.delenv("INDENT_ALIGNMENT_MAX_FILE_SIZE")
    assert get_max_file_size(default=1) == 1


def test_get_max_line_length_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("INDENT_ALIGNMENT_MAX_LINE_LENGTH", "invalid")
    with pytest.raises(ValueError):
        get_max_line_length()


def test_get_max_line_length_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("INDENT_ALIGNMENT_MAX_LINE_LENGTH", "-5")
    with pytest.raises(ValueError):
        get_max_line_length()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.md"), tmp_path)


def test_normalize_filepath_handles_oserror(monkeypatch, tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("* item\n", encoding="utf-8")
    base_dir = tmp_path
    original_resolve = Path.resolve

    def _raise_oserror(self, strict=True):
        if self == target:
            raise OSError("resolve boom")
        return original_resolve(self, strict=strict)

    monkeypatch.setattr(Path, "resolve", _raise_oserror)
    with pytest.raises(ValueError, match="resolve boom"):
        normalize_filepath(str(target), base_dir)


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder"
    folder.mkdir()
    with pytest.raises(ValueError, match="is not a regular file"):
        normalize_filepath(str(folder), tmp_path)


def test_normalize_filepath_rejects_other_extensions(tmp_path: Path):
    target = tmp_path / "notes.txt"
    target.write_text("* item\n", encoding="utf-8")
    with pytest.raises(ValueError, match="is not a Markdown file"):
        normalize_filepath(str(target), tmp_path)


def test_normalize_filepath_accepts_uppercase_extension(tmp_path: Path):
    target = tmp_path / "README.MARKDOWN"
    target.write_text("* item\n", encoding="utf-8")

    assert normalize_filepath(str(target), tmp_path) == target.resolve()


def test_collect_markdown_files_expands_directories(tmp_path: Path):
    docs = tmp_path / "docs"
    (docs / "nested").mkdir(parents=True)
    (docs / ".hidden").mkdir()
    (docs / "b.md").write_text("b\n", encoding="utf-8")
    (docs / "nested" / "a.markdown").write_text("a\n", encoding="utf-8")
    (docs / "skip.txt").write_text("skip\n", encoding="utf-8")
    (docs / ".hidden" / "secret.md").write_text("secret\n", encoding="utf-8")
    readme = tmp_path / "README.md"
    readme.write_text("readme\n", encoding="utf-8")

    files = collect_markdown_files([str(readme), str(docs), str(docs / "b.md")], tmp_path.resolve())

    assert files == [
        readme.resolve(),
        (docs / "b.md").resolve(),
        (docs / "nested" / "a.markdown").resolve(),
    ]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_collect_markdown_files_skips_symlinks_in_directories(tmp_path: Path):
    docs = tmp_path / "docs"
    docs.mkdir()
    target = docs / "real.md"
    target.write_text("real\n", encoding="utf-8")
    os.symlink(target, docs / "alias.md")

    assert collect_markdown_files([str(docs)], tmp_path.resolve()) == [target.resolve()]


def test_collect_markdown_files_rejects_paths_outside_base(tmp_path: Path):
    inside = tmp_path / "inside"
    inside.mkdir()
    outside = tmp_path / "outside.md"
    outside.write_text("x\n", encoding="utf-8")

    with pytest.raises(ValueError, match="outside of the working directory"):
        collect_markdown_files([str(outside)], inside.resolve())


def test_contains_symlink_handles_oserror(monkeypatch, tmp_path: Path):
    probe = tmp_path / "probe.md"
    probe.write_text("* item\n", encoding="utf-8")
    original_is_symlink = Path.is_symlink
    call_count = {"count": 0}

    def _flaky_is_symlink(self):
        if self == probe and call_count["count"] == 0:
            call_count["count"] += 1
            raise OSError("stat boom")
        return original_is_symlink(self)

    monkeypatch.setattr(Path, "is_symlink", _flaky_is_symlink)
    assert contains_symlink(probe) is False


def test_collect_file_stat_handles_missing_file(tmp_path: Path):
    with pytest.raises(IOError):
        collect_file_stat(tmp_path / "missing.md")


def test_collect_file_stat_rejects_symlink(tmp_path: Path):
    target = tmp_path / "actual.md"
    target.write_text("* item\n", encoding="utf-8")
    link = tmp_path / "alias.md"
    os.symlink(target, link)

    with pytest.raises(IOError):
        collect_file_stat(link)


def test_collect_file_stat_rejects_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()
    with pytest.raises(IOError):
        collect_file_stat(directory)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo not available")
def test_collect_file_stat_rejects_fifo(tmp_path: Path):
    """Test that FIFOs are rejected at the collect_file_stat level."""
    fifo = tmp_path / "pipe.md"
    try:
        os.mkfifo(fifo)
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create FIFO")

    with pytest.raises(IOError) as exc_info:
        collect_file_stat(fifo)
    assert "is not a regular file" in str(exc_info.value)


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="Unix sockets not available")
def test_collect_file_stat_rejects_socket(tmp_path: Path):
    """Test that Unix sockets are rejected at the collect_file_stat level."""
    socket_path = tmp_path / "socket.md"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(socket_path))
    except OSError:  # pragma: no cover
        pytest.skip("Unable to create socket")
    finally:
        sock.close()

    with pytest.raises(IOError) as exc_info:
        collect_file_stat(socket_path)
    assert "is not a regular file" in str(exc_info.value)


def test_collect_file_stat_rejects_mocked_character_device(tmp_path: Path, monkeypatch):
    """Test that character devices are rejected using mocked stat."""
    device = tmp_path / "device.md"
    device.write_text("* item\n", encoding="utf-8")

    original_stat = os.stat

    def mock_stat(path, *args, **kwargs):
        result = original_stat(path, *args, **kwargs)
        if str(path) == str(device):
            class MockStatResult:
                st_mode = stat.S_IFCHR | 0o666
                st_size = result.st_size
                st_mtime_ns = result.st_mtime_ns
                st_atime_ns = result.st_atime_ns

            return MockStatResult()
        return result

    monkeypatch.setattr(os, "stat", mock_stat)

    with pytest.raises(IOError) as exc_info:
        collect_file_stat(device)
    assert "is not a regular file" in str(exc_info.value)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("x" * 20, encoding="utf-8")
    stat_result = collect_file_stat(target)

    enforce_file_size(stat_result, 20, target)
    with pytest.raises(IOError, match="maximum allowed size of 10 bytes"):
        enforce_file_size(stat_result, 10, target)


def test_ensure_file_unchanged_detects_modification(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("* item\n", encoding="utf-8")
    before = collect_file_stat(target)
    ensure_file_unchanged(before, collect_file_stat(target), target)

    target.write_text("* item\n* another\n", encoding="utf-8")

    with pytest.raises(IOError, match="changed during processing"):
        ensure_file_unchanged(before, collect_file_stat(target), target)


def test_safe_read_raises_for_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()

    with pytest.raises(IOError):
        safe_read(directory)


def test_safe_read_keeps_line_endings(tmp_path: Path):
    target = tmp_path / "crlf.md"
    target.write_bytes(b"* item\r\n   wrapped\r\n")

    with safe_read(target) as handle:
        assert handle.read() == "* item\r\n   wrapped\r\n"


def test_lint_file_returns_content_and_diagnostics(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("* item\n   wrapped\n", encoding="utf-8")

    content, diagnostics = lint_file(target)

    assert content == "* item\n   wrapped\n"
    assert [(diagnostic.line, diagnostic.expected, diagnostic.actual) for diagnostic in diagnostics] == [
        (2, 2, 3)
    ]


def test_lint_file_rejects_non_positive_line_length(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("* item\n", encoding="utf-8")

    with pytest.raises(LintFileError, match="must be a positive integer"):
        lint_file(target, max_line_length=0)


def test_lint_file_reports_long_lines(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("short\n" + "x" * 20 + "\n", encoding="utf-8")

    with pytest.raises(LintFileError, match="line at line 2 exceeding the maximum allowed length of 10"):
        lint_file(target, max_line_length=10)
