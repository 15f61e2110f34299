"""Custom exceptions for dirwatch.

Per-path problems (a file vanishing mid-scan, permission denied) never
surface as exceptions; they only make the path absent from a snapshot.
The exceptions below are for failures that have no sensible degraded
behavior.
"""


class WatchError(RuntimeError):
    """Base class for all dirwatch errors."""
    pass


# Root Errors
class WatchRootError(WatchError):
    """A watched root cannot be listed."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot watch '{root}': {reason}")


class RootNotFoundError(WatchRootError):
    """A watched root does not exist."""

    def __init__(self, root: str):
        super().__init__(root, "directory does not exist")


# Configuration Errors
class ConfigError(WatchError):
    """Invalid or unreadable configuration."""
    pass


class InvalidPatternError(ConfigError):
    """Name filter is not a valid regular expression."""

    def __init__(self, pattern: str, detail: str):
        self.pattern = pattern
        super().__init__(f"Invalid name pattern '{pattern}': {detail}")
