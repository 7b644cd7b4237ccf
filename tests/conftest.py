"""Pytest configuration and shared fixtures."""

import io
import json
import tarfile

import pytest
from click.testing import CliRunner

from tarpipe.cli import cli


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point TARPIPE_CONFIG at a missing file so user config never leaks in.

    The registry is cached per process, so the cache is cleared around every
    test as well.
    """
    import tarpipe.config

    monkeypatch.setenv("TARPIPE_CONFIG", str(tmp_path / "no-such-config.json"))
    tarpipe.config.reset()
    yield
    tarpipe.config.reset()


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional input.

    Usage:
        result = invoke(["list"])
        result = invoke(["archive", "src", "-o", "out.tar.gz"])

    Binary output is available as result.stdout_bytes.
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


@pytest.fixture
def write_config(tmp_path):
    """Write a JSON config file and return its path."""

    def _write(data, name="tarpipe.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_tree(tmp_path):
    """Provide a small directory tree to archive.

    Creates:
        tmp_path/project/README.md
        tmp_path/project/src/main.txt
    """
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "README.md").write_text("# sample\n", encoding="utf-8")
    (root / "src" / "main.txt").write_text("hello tar\n", encoding="utf-8")
    return root


def tar_members(data: bytes) -> dict:
    """Return {member name: file content or None} for a tar byte string."""

    members = {}
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as tar:
        for member in tar.getmembers():
            f = tar.extractfile(member) if member.isfile() else None
            members[member.name] = f.read() if f else None
    return members


@pytest.fixture
def read_tar():
    """Provide the tar_members helper to tests."""
    return tar_members
