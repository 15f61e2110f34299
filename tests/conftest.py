"""Shared test fixtures and utilities."""

import pytest

from dirwatch.core import FingerprintMode
from dirwatch.snapshot import DirSnapshot


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content: str = "test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def watch_dir(tmp_path, write_file):
    """Directory holding a.txt and b.txt."""
    write_file("a.txt", "alpha")
    write_file("b.txt", "bravo")
    return tmp_path


@pytest.fixture
def make_snapshot():
    """Build a snapshot directly from a path -> fingerprint mapping."""
    def _make(mode: FingerprintMode = FingerprintMode.HASH, **files):
        return DirSnapshot(files=files, mode=mode)
    return _make


class ScriptedScans:
    """Feeds a fixed sequence of snapshots to a Watcher.

    Replaces ``Watcher.snapshot`` so loop behavior can be tested without
    touching the filesystem or waiting on real changes.
    """

    def __init__(self, *snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0

    def __call__(self, strict: bool = False):
        if self.calls >= len(self.snapshots):
            raise AssertionError("Watcher scanned more often than expected")
        snap = self.snapshots[self.calls]
        self.calls += 1
        if isinstance(snap, BaseException):
            raise snap
        return snap


@pytest.fixture
def scripted():
    """Install a ScriptedScans on a watcher."""
    def _install(watcher, *snapshots):
        scans = ScriptedScans(*snapshots)
        watcher.snapshot = scans
        return scans
    return _install
