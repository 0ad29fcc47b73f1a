"""Awaitable wrappers around blocking external tool invocations.

Tools are run with `subprocess.run()` on a worker thread via
`asyncio.to_thread()`; callers simply await the result, so the thread pool is
an implementation detail. `asyncio.create_subprocess_exec()` is avoided since
some runtime environments have flaky child watchers that can cause
`.wait()`/`.communicate()` to hang.
"""

from __future__ import annotations

import asyncio
import subprocess
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="ignore").strip()

    def stderr_tail(self, limit: int = 800) -> str:
        text = self.stderr.decode("utf-8", errors="ignore").strip()
        if len(text) <= limit:
            return text
        return "..." + text[-limit:]


async def run_subprocess(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    timeout_s: float | None = None,
) -> RunResult:
    """Run `args` and return its exit code and output.

    Raises FileNotFoundError when the executable is missing and
    subprocess.TimeoutExpired when `timeout_s` elapses.
    """

    def _run() -> subprocess.CompletedProcess[bytes]:
        return subprocess.run(
            list(args),
            stdout=subprocess.PIPE if capture_output else subprocess.DEVNULL,
            stderr=subprocess.PIPE if capture_output else subprocess.DEVNULL,
            check=False,
            timeout=timeout_s,
        )

    cp = await asyncio.to_thread(_run)
    return RunResult(
        returncode=int(cp.returncode),
        stdout=cp.stdout or b"",
        stderr=cp.stderr or b"",
    )
