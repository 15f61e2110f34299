"""Utility functions for dirwatch."""

from datetime import datetime

from .core import Fingerprint


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def format_fingerprint(value: Fingerprint, width: int = 12) -> str:
    """Short display form of a fingerprint.

    Examples:
        "sha256:9f86d081884c7d65..." -> "9f86d081884c"
        1724640677.31 -> "2024-08-26 02:51:17"
    """
    if isinstance(value, str):
        return value.split(":", 1)[-1][:width]
    return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")
