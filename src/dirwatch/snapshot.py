"""Directory snapshot with per-file fingerprints."""

import logging
import os
import re
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Union

from pydantic import BaseModel, ConfigDict, Field

from .core import Fingerprint, FingerprintMode
from .errors import InvalidPatternError, RootNotFoundError, WatchRootError
from .hashing import safe_digest, safe_mtime
from .ignore import IgnoreSpec

logger = logging.getLogger(__name__)

NamePattern = Union[str, Pattern[str]]


def compile_pattern(pattern: Optional[NamePattern]) -> Optional[Pattern[str]]:
    """Compile a name filter, None meaning "match everything"."""
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e))


def check_root(root: str) -> None:
    """Raise if a root can't be watched at all.

    Raises:
        RootNotFoundError: If the root does not exist
        WatchRootError: If the root is not a directory
    """
    if not os.path.exists(root):
        raise RootNotFoundError(root)
    if not os.path.isdir(root):
        raise WatchRootError(root, "not a directory")


def list_entries(
    root: str,
    pattern: Optional[Pattern[str]] = None,
    recursive: bool = False,
    ignore: Optional[IgnoreSpec] = None,
    all_files: bool = False,
) -> Iterator[str]:
    """List entries under a root whose name matches the pattern.

    Flat listing by default, like ``ls``: subdirectories are listed as
    entries but not descended into, and names starting with ``.`` are
    hidden unless ``all_files`` is set. Paths are joined onto the root as
    given, so a relative root yields relative paths.

    Raises:
        OSError: If the root itself cannot be listed
    """
    if not recursive:
        with os.scandir(root) as it:
            for entry in it:
                if not all_files and entry.name.startswith("."):
                    continue
                if ignore is not None and ignore.is_ignored(entry.name):
                    continue
                if pattern is None or pattern.search(entry.name):
                    yield os.path.join(root, entry.name)
        return

    # os.walk only reports errors through onerror; the root is listed
    # eagerly so an unreadable root still raises
    os.listdir(root)
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        rel_dir = "" if rel_dir == os.curdir else rel_dir.replace(os.sep, "/") + "/"

        # Prune in place so os.walk skips hidden and ignored subtrees
        if not all_files:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            filenames = [f for f in filenames if not f.startswith(".")]
        if ignore is not None:
            dirnames[:] = [d for d in dirnames if ignore.should_traverse(rel_dir + d)]

        for name in dirnames + filenames:
            if ignore is not None and ignore.is_ignored(rel_dir + name):
                continue
            if pattern is None or pattern.search(name):
                yield os.path.join(dirpath, name)


class DirSnapshot(BaseModel):
    """
    Point-in-time state of one or more watched directories.

    Maps each visible file path to its fingerprint. Paths that were missing,
    directories or unreadable at scan time are simply not present.
    """

    model_config = ConfigDict(frozen=True)

    files: Dict[str, Fingerprint] = Field(default_factory=dict)
    mode: FingerprintMode = FingerprintMode.HASH

    @classmethod
    def scan(
        cls,
        roots: Union[str, Iterable[str]],
        pattern: Optional[NamePattern] = None,
        mode: FingerprintMode = FingerprintMode.HASH,
        recursive: bool = False,
        ignore: Optional[Iterable[str]] = None,
        strict: bool = True,
        all_files: bool = False,
    ) -> "DirSnapshot":
        """Scan roots and return their current state.

        Args:
            roots: Directory or directories to scan
            pattern: Regex searched against entry names (None matches all)
            mode: Content hash or modification time fingerprints
            recursive: Descend into subdirectories
            ignore: Extra gitignore-style patterns. When given (even empty),
                the built-in defaults and each root's .dirwatchignore apply
                too; None disables ignore handling entirely.
            strict: Raise on roots that can't be listed instead of treating
                them as empty
            all_files: Include names starting with "." (hidden by default)

        Raises:
            RootNotFoundError: If strict and a root does not exist
            WatchRootError: If strict and a root can't be listed
            InvalidPatternError: If the pattern is not a valid regex
        """
        if isinstance(roots, (str, os.PathLike)):
            roots = [roots]
        roots = [os.fspath(r) for r in roots]
        compiled = compile_pattern(pattern)
        extra = list(ignore) if ignore is not None else None

        listed: List[str] = []
        for root in roots:
            listed.extend(cls._list_root(root, compiled, recursive, extra, strict, all_files))

        if mode == FingerprintMode.MTIME:
            # Listing is complete before any metadata is read
            fingerprints = {path: safe_mtime(path) for path in dict.fromkeys(listed)}
        else:
            fingerprints = {}
            for path in listed:
                if path not in fingerprints:
                    fingerprints[path] = safe_digest(path)

        files = {path: fp for path, fp in fingerprints.items() if fp is not None}
        logger.debug(
            "Scanned %d root(s): %d entries listed, %d fingerprinted",
            len(roots), len(listed), len(files),
        )
        return cls(files=files, mode=mode)

    @staticmethod
    def _list_root(
        root: str,
        pattern: Optional[Pattern[str]],
        recursive: bool,
        extra_ignore: Optional[List[str]],
        strict: bool,
        all_files: bool = False,
    ) -> List[str]:
        try:
            check_root(root)
        except WatchRootError:
            if strict:
                raise
            logger.warning("Watched root %s is unavailable; treating it as empty", root)
            return []

        spec = IgnoreSpec(root, extra_ignore) if extra_ignore is not None else None
        try:
            return list(list_entries(root, pattern, recursive, spec, all_files))
        except OSError as e:
            if strict:
                raise WatchRootError(root, str(e)) from e
            logger.warning("Could not list %s: %s; treating it as empty", root, e)
            return []

    @property
    def paths(self) -> List[str]:
        """Sorted paths present in the snapshot."""
        return sorted(self.files)

    def get(self, path: str) -> Optional[Fingerprint]:
        return self.files.get(path)

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files
