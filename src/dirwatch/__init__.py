"""Polling directory watcher: snapshot, compare, notify."""

from .constants import DIRWATCH_VERSION as __version__
from .core import ChangeSet, FingerprintMode, WatchConfig, WatchState
from .diffing import compare_snapshots
from .errors import (
    ConfigError,
    InvalidPatternError,
    RootNotFoundError,
    WatchError,
    WatchRootError,
)
from .hashing import fingerprint
from .snapshot import DirSnapshot
from .watcher import Watcher, watch

__all__ = [
    "ChangeSet",
    "ConfigError",
    "DirSnapshot",
    "FingerprintMode",
    "InvalidPatternError",
    "RootNotFoundError",
    "WatchConfig",
    "WatchError",
    "WatchRootError",
    "WatchState",
    "Watcher",
    "compare_snapshots",
    "fingerprint",
    "watch",
]
