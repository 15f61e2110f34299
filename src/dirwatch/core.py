"""Core data models for dirwatch.

Polling Model:
--------------
The watcher never subscribes to filesystem events. Each polling step takes
a full point-in-time snapshot of the watched roots and compares it to the
previous one:

1. Snapshot: map every visible file path to a fingerprint
2. Compare: classify paths as added, deleted or modified
3. Notify: hand non-empty change sets to the caller's callback

A path that disappears and reappears with the same fingerprint between two
polls is reported as unchanged.
"""

import re
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_POLL_INTERVAL


# Content digest ("sha256:...") or modification time
Fingerprint = Union[str, float]


class FingerprintMode(str, Enum):
    """How file state is captured in a snapshot."""

    HASH = "hash"    # SHA256 of contents: slow, detects every content change
    MTIME = "mtime"  # Modification time: fast, may miss sub-resolution edits


class WatchState(str, Enum):
    """Lifecycle of a watch loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


# ============= Configuration =============

class WatchConfig(BaseModel):
    """Watch configuration (optionally stored in .dirwatch.yaml)."""

    roots: List[str] = Field(..., min_length=1)
    pattern: Optional[str] = None  # regex searched against entry names
    mode: FingerprintMode = FingerprintMode.HASH
    interval: float = Field(DEFAULT_POLL_INTERVAL, ge=0)
    recursive: bool = False
    all_files: bool = False  # include names starting with "."
    ignore: List[str] = Field(default_factory=list)  # gitignore-style patterns

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"not a valid regular expression: {e}")
        return value


# ============= Change Detection =============

class ChangeSet(BaseModel):
    """Classified difference between two snapshots.

    A path belongs to at most one of the three sets.
    """

    model_config = ConfigDict(frozen=True)

    added: FrozenSet[str] = Field(default_factory=frozenset)
    deleted: FrozenSet[str] = Field(default_factory=frozenset)
    modified: FrozenSet[str] = Field(default_factory=frozenset)

    @property
    def count(self) -> int:
        """Total number of changed paths."""
        return len(self.added) + len(self.deleted) + len(self.modified)

    @property
    def has_changes(self) -> bool:
        return self.count > 0

    def as_lists(self) -> Tuple[List[str], List[str], List[str]]:
        """Sorted (added, deleted, modified) lists, as passed to callbacks."""
        return sorted(self.added), sorted(self.deleted), sorted(self.modified)

    def summary(self) -> str:
        """Get human-readable summary."""
        if not self.has_changes:
            return "No changes"
        parts = []
        if self.added:
            parts.append(f"+ {len(self.added)} added")
        if self.deleted:
            parts.append(f"- {len(self.deleted)} deleted")
        if self.modified:
            parts.append(f"~ {len(self.modified)} modified")
        return ", ".join(parts)
