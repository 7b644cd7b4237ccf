"""Tests for the filtered archive writer."""

import gzip
import io
import subprocess

import pytest

import tarpipe.writer
from tarpipe.archive import write_tar_archive
from tarpipe.exceptions import (
    FilterError,
    FilterExitError,
    InternalError,
    SpawnError,
)
from tarpipe.models import ArchiveParams, FilterDefinition
from tarpipe.writer import (
    build_filter_command,
    write_archive,
    write_filtered_archive,
)


@pytest.fixture
def params(sample_tree):
    return ArchiveParams(paths=[sample_tree], base_dir=sample_tree.parent)


@pytest.fixture
def spawned(monkeypatch):
    """Record every command and process started by the writer."""
    calls = []
    real_popen_shell = tarpipe.writer.popen_shell

    def _recording(cmd, **kwargs):
        proc = real_popen_shell(cmd, **kwargs)
        calls.append((cmd, proc))
        return proc

    monkeypatch.setattr(tarpipe.writer, "popen_shell", _recording)
    return calls


def _filter(command, use_compression=False):
    return FilterDefinition(
        name="test", command=command, use_compression=use_compression
    )


class TestBuildFilterCommand:
    def test_appends_level(self):
        tgz = _filter("gzip -n", use_compression=True)

        assert build_filter_command(tgz, 9).endswith(" -9")
        assert build_filter_command(tgz, 0) == "gzip -n -0"

    def test_unset_level_leaves_command(self):
        tgz = _filter("gzip -n", use_compression=True)

        assert build_filter_command(tgz, -1) == "gzip -n"
        assert build_filter_command(tgz) == "gzip -n"

    def test_filter_without_compression_ignores_level(self):
        assert build_filter_command(_filter("xz -c"), 6) == "xz -c"


def test_passthrough_filter_writes_plain_tar(params, tmp_path, read_tar):
    out_path = tmp_path / "out.tar"

    with open(out_path, "wb") as out:
        result = write_filtered_archive(params, _filter("cat"), out)

    assert result == 0
    members = read_tar(out_path.read_bytes())
    assert members["project/README.md"] == b"# sample\n"
    assert members["project/src/main.txt"] == b"hello tar\n"


def test_gzip_filter_with_level(sample_tree, tmp_path, read_tar, spawned):
    params = ArchiveParams(
        paths=[sample_tree], base_dir=sample_tree.parent, compression_level=9
    )
    out_path = tmp_path / "out.tar.gz"

    with open(out_path, "wb") as out:
        write_filtered_archive(params, _filter("gzip -n", True), out)

    assert spawned[0][0] == "gzip -n -9"
    data = out_path.read_bytes()
    assert data[:2] == b"\x1f\x8b"
    assert "project/src/main.txt" in read_tar(gzip.decompress(data))


def test_command_may_use_shell_syntax(params, tmp_path, read_tar):
    out_path = tmp_path / "out.tar"

    with open(out_path, "wb") as out:
        write_filtered_archive(params, _filter("gzip -c | gzip -dc"), out)

    assert "project/README.md" in read_tar(out_path.read_bytes())


def test_returns_serializer_result(params, tmp_path):
    def serializer(_params, sink):
        sink.write(b"payload")
        return 7

    out_path = tmp_path / "out.bin"
    with open(out_path, "wb") as out:
        result = write_filtered_archive(params, _filter("cat"), out, serializer)

    assert result == 7
    assert out_path.read_bytes() == b"payload"


def test_nonzero_exit_raises_filter_exit_error(params, tmp_path, spawned):
    command = "cat >/dev/null; exit 3"

    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(FilterExitError) as exc:
            write_filtered_archive(params, _filter(command), out)

    assert exc.value.returncode == 3
    assert exc.value.command == command
    assert command in str(exc.value)
    # Process was reaped and its stdin closed
    proc = spawned[0][1]
    assert proc.returncode == 3
    assert proc.stdin.closed


def test_filter_exiting_without_reading_reports_exit_error(params, tmp_path):
    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(FilterExitError) as exc:
            write_filtered_archive(params, _filter("exit 5"), out)

    assert exc.value.returncode == 5


def test_unknown_command_is_spawn_error(params, tmp_path):
    command = "tarpipe-no-such-compressor --fast"

    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(SpawnError) as exc:
            write_filtered_archive(params, _filter(command), out)

    assert exc.value.command == command
    assert f"unable to start '{command}' filter: command not found" in str(exc.value)


def test_non_executable_command_is_spawn_error(params, tmp_path):
    script = tmp_path / "compress.sh"
    script.write_text("#!/bin/sh\ncat\n", encoding="utf-8")
    script.chmod(0o644)

    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(SpawnError) as exc:
            write_filtered_archive(params, _filter(str(script)), out)

    assert exc.value.command == str(script)
    assert "permission denied" in str(exc.value)


def test_filter_closing_input_early_is_an_error(params, tmp_path):
    def big_serializer(_params, sink):
        for _ in range(64):
            sink.write(b"\0" * 65536)
        return 0

    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(FilterError, match="closed its input early"):
            write_filtered_archive(params, _filter("true"), out, big_serializer)


def test_spawn_failure_raises_spawn_error(params, monkeypatch):
    def _fail(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "/bin/sh")

    monkeypatch.setattr(subprocess, "Popen", _fail)

    with pytest.raises(SpawnError) as exc:
        write_filtered_archive(params, _filter("gzip -n"))

    assert exc.value.command == "gzip -n"
    assert "unable to start 'gzip -n' filter" in str(exc.value)


def test_missing_filter_is_internal_error(params):
    with pytest.raises(InternalError):
        write_filtered_archive(params, None)


def test_serializer_error_still_reaps_filter(tmp_path, spawned):
    params = ArchiveParams(paths=[tmp_path / "missing"])

    with open(tmp_path / "out", "wb") as out:
        with pytest.raises(FileNotFoundError):
            write_filtered_archive(params, _filter("cat"), out)

    proc = spawned[0][1]
    assert proc.returncode == 0
    assert proc.stdin.closed


def test_write_archive_without_filter_writes_plain_tar(params, read_tar):
    sink = io.BytesIO()

    assert write_archive(params, None, sink) == 0
    assert "project/README.md" in read_tar(sink.getvalue())


def test_write_tar_archive_prefix(sample_tree, read_tar):
    params = ArchiveParams(
        paths=[sample_tree / "README.md"],
        base_dir=sample_tree,
        prefix="release-1.0/",
    )
    sink = io.BytesIO()

    write_tar_archive(params, sink)

    assert read_tar(sink.getvalue()) == {"release-1.0/README.md": b"# sample\n"}


def test_path_outside_base_dir_is_rejected_before_writing(sample_tree, tmp_path):
    other = tmp_path / "other"
    other.mkdir()
    params = ArchiveParams(paths=[sample_tree], base_dir=other)
    sink = io.BytesIO()

    with pytest.raises(ValueError, match="is outside base directory"):
        write_tar_archive(params, sink)

    assert sink.getvalue() == b""
