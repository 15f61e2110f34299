"""Polling watch loop.

Every ``interval`` seconds the watched roots are re-scanned and compared
with the previous scan. Non-empty change sets are handed to a callback
``callback(added, deleted, modified)``, which must return ``True`` to keep
watching. Any other return value stops the loop.

A callback that raises is logged and treated as a request to continue, so
a broken callback degrades to polling rather than ending the watch.
"""

import logging
import os
import threading
from typing import Any, Callable, Iterable, List, Optional, Union

from .constants import DEFAULT_POLL_INTERVAL
from .core import ChangeSet, FingerprintMode, WatchConfig, WatchState
from .diffing import compare_snapshots
from .errors import WatchError
from .snapshot import DirSnapshot, NamePattern

logger = logging.getLogger(__name__)

WatchCallback = Callable[[List[str], List[str], List[str]], Any]


class Watcher:
    """Watches directories for added, deleted and modified files.

    A watcher runs once: after ``run()`` returns (or raises) it is STOPPED
    and cannot be restarted. Independent watchers share no state.
    """

    def __init__(
        self,
        roots: Union[str, Iterable[str]],
        callback: WatchCallback,
        pattern: Optional[NamePattern] = None,
        mode: FingerprintMode = FingerprintMode.HASH,
        interval: float = DEFAULT_POLL_INTERVAL,
        recursive: bool = False,
        ignore: Optional[Iterable[str]] = None,
        all_files: bool = False,
    ):
        """Initialize the watcher.

        Args:
            roots: Directory or directories to watch.
            callback: Called with sorted (added, deleted, modified) path lists.
            pattern: Regex searched against entry names; None watches all.
            mode: Content hash (accurate) or modification time (fast).
            interval: Seconds to wait between scans.
            recursive: Watch subdirectories too.
            ignore: Extra gitignore-style patterns; None disables ignore rules.
            all_files: Include names starting with ".".
        """
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")

        if isinstance(roots, (str, os.PathLike)):
            roots = [roots]
        self.roots = [os.fspath(r) for r in roots]
        self.callback = callback
        self.pattern = pattern
        self.mode = FingerprintMode(mode)
        self.interval = interval
        self.recursive = recursive
        self.ignore = list(ignore) if ignore is not None else None
        self.all_files = all_files

        self.iterations = 0
        self.callbacks = 0
        self._state = WatchState.IDLE
        self._stop_event = threading.Event()

    @classmethod
    def from_config(
        cls,
        config: WatchConfig,
        callback: WatchCallback,
        use_ignore: bool = True,
    ) -> "Watcher":
        """Create a watcher from a loaded configuration."""
        return cls(
            roots=config.roots,
            callback=callback,
            pattern=config.pattern,
            mode=config.mode,
            interval=config.interval,
            recursive=config.recursive,
            ignore=config.ignore if use_ignore else None,
            all_files=config.all_files,
        )

    @property
    def state(self) -> WatchState:
        return self._state

    def snapshot(self, strict: bool = False) -> DirSnapshot:
        """Scan the watched roots with this watcher's settings."""
        return DirSnapshot.scan(
            self.roots,
            pattern=self.pattern,
            mode=self.mode,
            recursive=self.recursive,
            ignore=self.ignore,
            strict=strict,
            all_files=self.all_files,
        )

    def stop(self) -> None:
        """Request the loop to stop at its next wait.

        Safe to call from another thread, a signal handler or the callback.
        """
        self._stop_event.set()

    def run(self) -> int:
        """Run the watch loop until the callback declines or stop() is called.

        Returns:
            Number of completed polling iterations.

        Raises:
            WatchError: If the watcher was already started.
            WatchRootError: If a root can't be scanned at startup.
            KeyboardInterrupt: Propagated after the watcher is stopped.
        """
        if self._state != WatchState.IDLE:
            raise WatchError(f"Watcher is {self._state.value}; it can only run once")

        try:
            previous = self.snapshot(strict=True)
        except BaseException:
            self._state = WatchState.STOPPED
            raise

        self._state = WatchState.RUNNING
        logger.info(
            "Watching %s (%d files, %s mode, every %ss)",
            ", ".join(self.roots), len(previous), self.mode.value, self.interval,
        )

        try:
            while not self._stop_event.wait(self.interval):
                current = self.snapshot()
                changes = compare_snapshots(previous, current)
                self.iterations += 1

                if changes.has_changes:
                    logger.debug("Iteration %d: %s", self.iterations, changes.summary())
                    if not self._notify(changes):
                        logger.info("Callback declined to continue; stopping")
                        break

                previous = current
        except KeyboardInterrupt:
            logger.info("Watch interrupted after %d iterations", self.iterations)
            raise
        finally:
            self._state = WatchState.STOPPED

        return self.iterations

    def _notify(self, changes: ChangeSet) -> bool:
        """Invoke the callback; True means keep watching."""
        added, deleted, modified = changes.as_lists()
        self.callbacks += 1
        try:
            keep_going = self.callback(added, deleted, modified)
        except Exception:
            logger.exception("Watch callback raised; continuing to watch")
            return True
        return keep_going is True


def watch(
    roots: Union[str, Iterable[str]],
    callback: WatchCallback,
    pattern: Optional[NamePattern] = None,
    mode: FingerprintMode = FingerprintMode.HASH,
    interval: float = DEFAULT_POLL_INTERVAL,
    recursive: bool = False,
    ignore: Optional[Iterable[str]] = None,
    all_files: bool = False,
) -> int:
    """Watch directories for changes, blocking until the callback returns non-True.

    Use Ctrl+C to stop watching from a terminal.

    Returns:
        Number of completed polling iterations.
    """
    watcher = Watcher(
        roots,
        callback,
        pattern=pattern,
        mode=mode,
        interval=interval,
        recursive=recursive,
        ignore=ignore,
        all_files=all_files,
    )
    return watcher.run()
