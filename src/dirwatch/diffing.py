"""Diff computation logic - stable module for comparing snapshots."""

from .core import ChangeSet
from .snapshot import DirSnapshot


def compare_snapshots(old: DirSnapshot, new: DirSnapshot) -> ChangeSet:
    """
    Compute differences between two snapshots.

    Args:
        old: Earlier snapshot.
        new: Later snapshot.

    Returns:
        ChangeSet with added, deleted and modified paths.

    Raises:
        ValueError: If the snapshots use different fingerprint modes.

    Note:
        Fingerprints are compared for exact equality. A file deleted and
        recreated with identical fingerprint between the two scans shows up
        as unchanged.
    """
    if old.mode != new.mode:
        raise ValueError(
            f"Cannot compare a {old.mode.value} snapshot with a {new.mode.value} snapshot"
        )

    old_paths = old.files.keys()
    new_paths = new.files.keys()

    modified = frozenset(
        path for path in old_paths & new_paths
        if old.files[path] != new.files[path]
    )

    return ChangeSet(
        added=frozenset(new_paths - old_paths),
        deleted=frozenset(old_paths - new_paths),
        modified=modified,
    )
