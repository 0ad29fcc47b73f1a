"""Per-run registry of transient files."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class TransientFileTracker:
    """Collects every on-disk byproduct of one run so it can be deleted on exit.

    Register a path before (or as soon as) anything is written to it. Paths that
    never materialize are skipped silently at drain time.
    """

    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id
        self._paths: list[Path] = []

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(str(p) for p in self._paths)

    def register(self, path: str | Path) -> None:
        p = Path(path)
        if p not in self._paths:
            self._paths.append(p)

    def drain_and_delete(self) -> int:
        """Delete all registered paths; return how many files were removed.

        Each failure is logged and skipped. Never raises.
        """
        paths, self._paths = self._paths, []
        removed = 0
        for path in paths:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning(
                    "failed to delete transient file (run_id=%s, path=%s): %s",
                    self.run_id,
                    path,
                    exc,
                )
                continue
            removed += 1
        if paths:
            logger.debug(
                "cleanup done (run_id=%s, registered=%d, removed=%d)",
                self.run_id,
                len(paths),
                removed,
            )
        return removed


@contextmanager
def tracked_files(run_id: str | None = None) -> Iterator[TransientFileTracker]:
    """Yield an empty tracker and drain it exactly once, whatever the outcome."""
    tracker = TransientFileTracker(run_id)
    try:
        yield tracker
    finally:
        tracker.drain_and_delete()
