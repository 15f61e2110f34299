"""Gitignore-style pattern matching for watched roots."""

import logging
from pathlib import Path
from typing import Iterable, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from .constants import IGNORE_FILE

logger = logging.getLogger(__name__)


# Noise that is never worth reacting to
DEFAULTS = [
    # Version control
    ".git/",
    ".hg/",
    ".svn/",

    # Python
    "__pycache__/",
    "*.pyc",
    "*.pyo",
    "*.egg-info/",

    # Virtual environments
    "venv/",
    ".venv/",

    # Editors write swap and backup files on every keystroke
    ".idea/",
    ".vscode/",
    "*.swp",
    "*.swo",
    "*~",
    ".#*",

    # OS files
    ".DS_Store",
    "Thumbs.db",

    # Tool caches
    ".ipynb_checkpoints/",
    ".pytest_cache/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".tox/",
]


class IgnoreSpec:
    """Manages gitignore-style patterns for excluding entries from snapshots."""

    def __init__(
        self,
        root: Union[str, Path],
        extra: Iterable[str] = (),
        use_defaults: bool = True,
    ):
        """Initialize ignore spec with default and custom patterns.

        Args:
            root: Watched root directory
            extra: Additional patterns to include
            use_defaults: Include the built-in DEFAULTS
        """
        self.root = Path(root)
        patterns = list(DEFAULTS) if use_defaults else []

        ignore_file = self.root / IGNORE_FILE
        if ignore_file.is_file():
            # The file may vanish or be rewritten between the check and
            # the read; a broken ignore file must not take the root down
            try:
                content = ignore_file.read_text()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read %s: %s; ignoring its patterns", ignore_file, e)
                content = ""
            for line in content.splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    patterns.append(line)

        patterns.extend(extra)
        self.patterns = patterns
        self.spec = PathSpec.from_lines(GitWildMatchPattern, patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if a root-relative POSIX path should be ignored.

        Args:
            relpath: Root-relative path in POSIX format (forward slashes)

        Returns:
            True if the path matches any ignore pattern
        """
        return self.spec.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Check if a directory should be descended into by a recursive scan.

        Args:
            dirpath: Root-relative directory path in POSIX format

        Returns:
            True if the directory should be traversed
        """
        # Directory patterns only match with a trailing slash
        if not dirpath.endswith("/"):
            dirpath = dirpath + "/"

        return not self.spec.match_file(dirpath)
