"""Shared fixtures."""

import pytest

from charcheck.config import RunConfig


@pytest.fixture
def write_lines(tmp_path):
    def _write(name, lines, ending="\n"):
        path = tmp_path / name
        path.write_bytes(ending.join(lines).encode("utf-8") + (ending.encode() if lines else b""))
        return path
    return _write


@pytest.fixture
def run_config(tmp_path):
    def _make(input_path, workers=2, record_path=None, **kw):
        kw.setdefault("preflight", False)
        return RunConfig(
            input_path=str(input_path),
            workers=workers,
            record_path=str(record_path or tmp_path / "available_usernames.txt"),
            **kw,
        )
    return _make
