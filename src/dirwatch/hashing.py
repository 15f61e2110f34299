"""File fingerprinting for snapshot comparison.

A fingerprint is either a SHA256 digest of the file contents (accurate but
slow for large files) or the file's modification time (fast but blind to
changes within the timestamp resolution). Paths that are missing,
directories, or unreadable have no fingerprint: the functions here return
None for them instead of raising.
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .constants import HASH_CHUNK_SIZE
from .core import Fingerprint, FingerprintMode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def compute_file_digest(path: PathLike) -> str:
    """Compute SHA256 hash of file contents.

    Simple byte-for-byte hashing - any change invalidates the digest.

    Args:
        path: Path to file to hash

    Returns:
        SHA256 digest in format "sha256:xxxx"

    Raises:
        OSError: If the file cannot be opened or read
    """
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha256.update(chunk)
    return f"sha256:{sha256.hexdigest()}"


def is_fingerprintable(path: PathLike) -> bool:
    """Check that a path exists, is not a directory and is readable."""
    if not os.path.exists(path):
        return False
    if os.path.isdir(path):
        return False
    if not os.access(path, os.R_OK):
        return False
    return True


def safe_digest(path: PathLike) -> Optional[str]:
    """Content digest of a file, or None if it can't be read right now."""
    if not is_fingerprintable(path):
        return None

    # The file may disappear between the checks above and the read
    try:
        return compute_file_digest(path)
    except OSError as e:
        logger.debug("File vanished while hashing %s: %s", path, e)
        return None


def safe_mtime(path: PathLike) -> Optional[float]:
    """Modification time of a file, or None if it can't be read right now."""
    if not is_fingerprintable(path):
        return None

    try:
        return os.stat(path).st_mtime
    except OSError as e:
        logger.debug("File vanished while reading mtime of %s: %s", path, e)
        return None


def fingerprint(
    path: PathLike,
    mode: FingerprintMode = FingerprintMode.HASH,
) -> Optional[Fingerprint]:
    """Fingerprint a single path.

    Args:
        path: Any path; it does not need to exist
        mode: Content hash or modification time

    Returns:
        The fingerprint, or None when the path is absent, a directory or
        unreadable. Never raises for per-path filesystem errors.
    """
    if mode == FingerprintMode.MTIME:
        return safe_mtime(path)
    return safe_digest(path)


__all__ = [
    "compute_file_digest",
    "fingerprint",
    "is_fingerprintable",
    "safe_digest",
    "safe_mtime",
]
