from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path

import pytest

from clipscribe.services.upload_sweeper import (
    find_stale_files,
    run_upload_sweeper,
    sweep_stale_files,
)


def _touch(path: Path, *, age_s: float, now: float) -> Path:
    path.write_bytes(b"x")
    ts = now - age_s
    os.utime(path, (ts, ts))
    return path


def test_find_stale_files_selects_only_old_files(tmp_path: Path) -> None:
    now = time.time()
    old = _touch(tmp_path / "old.mp4", age_s=7200, now=now)
    _touch(tmp_path / "fresh.mp4", age_s=60, now=now)
    (tmp_path / "subdir").mkdir()

    assert find_stale_files(tmp_path, max_age_s=3600, now_ts=now) == [old]


def test_find_stale_files_missing_directory(tmp_path: Path) -> None:
    assert find_stale_files(tmp_path / "nope", max_age_s=10) == []


def test_sweep_deletes_stale_files(tmp_path: Path) -> None:
    now = time.time()
    old = _touch(tmp_path / "old-thumb.jpg", age_s=4000, now=now)
    fresh = _touch(tmp_path / "fresh.mp3", age_s=10, now=now)

    removed = sweep_stale_files(tmp_path, max_age_s=3600, now_ts=now)

    assert removed == [old]
    assert not old.exists()
    assert fresh.exists()


def test_sweep_dry_run_keeps_files(tmp_path: Path) -> None:
    now = time.time()
    old = _touch(tmp_path / "old.webm", age_s=4000, now=now)

    assert sweep_stale_files(tmp_path, max_age_s=3600, now_ts=now, dry_run=True) == [old]
    assert old.exists()


@pytest.mark.asyncio
async def test_run_upload_sweeper_sweeps_until_stopped(settings, monkeypatch) -> None:
    settings.sweeper.interval_s = 0.01
    uploads = Path(settings.uploads_dir)
    uploads.mkdir(parents=True, exist_ok=True)
    old = _touch(uploads / "crashed-run.mp4", age_s=7200, now=time.time())

    stop = asyncio.Event()
    task = asyncio.create_task(run_upload_sweeper(settings, stop))
    for _ in range(200):
        if not old.exists():
            break
        await asyncio.sleep(0.01)
    stop.set()
    await asyncio.wait_for(task, timeout=1.0)

    assert not old.exists()
    assert task.done()
