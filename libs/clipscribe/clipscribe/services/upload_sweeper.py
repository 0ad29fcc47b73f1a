"""Periodic removal of stale files from the uploads directory.

Each run deletes its own files; this only catches leftovers from a process
that died mid-run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from clipscribe.config import Settings

logger = logging.getLogger(__name__)


def find_stale_files(directory: str | Path, *, max_age_s: float, now_ts: float | None = None) -> list[Path]:
    base = Path(directory)
    if not base.is_dir():
        return []
    now = time.time() if now_ts is None else float(now_ts)
    out: list[Path] = []
    for p in sorted(base.iterdir()):
        try:
            if not p.is_file():
                continue
            if now - p.stat().st_mtime > float(max_age_s):
                out.append(p)
        except FileNotFoundError:
            continue
    return out


def sweep_stale_files(
    directory: str | Path,
    *,
    max_age_s: float,
    now_ts: float | None = None,
    dry_run: bool = False,
) -> list[Path]:
    """Delete files older than `max_age_s`; return the paths removed (or that would be)."""
    removed: list[Path] = []
    for p in find_stale_files(directory, max_age_s=max_age_s, now_ts=now_ts):
        if dry_run:
            removed.append(p)
            continue
        try:
            p.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.warning("failed to delete stale upload %s: %s", p, exc)
            continue
        removed.append(p)
    return removed


async def run_upload_sweeper(settings: Settings, stop: asyncio.Event) -> None:
    """Sweep `settings.uploads_dir` every interval until `stop` is set."""
    interval = float(settings.sweeper.interval_s)
    max_age = float(settings.sweeper.max_age_s)
    logger.info("upload sweeper started (interval_s=%s, max_age_s=%s)", interval, max_age)
    while not stop.is_set():
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
            break
        except asyncio.TimeoutError:
            pass
        try:
            removed = await asyncio.to_thread(
                sweep_stale_files, settings.uploads_dir, max_age_s=max_age
            )
        except Exception:
            logger.exception("upload sweep failed")
            continue
        if removed:
            logger.info("removed %d stale upload file(s)", len(removed))
    logger.info("upload sweeper stopped")
