"""Reusable services (query surface, rate limiting, upload sweeping)."""

from clipscribe.services.rate_limit import RateLimitDecision, RateLimiter
from clipscribe.services.recordings import RecordingQueryService
from clipscribe.services.upload_sweeper import run_upload_sweeper, sweep_stale_files

__all__ = [
    "RateLimitDecision",
    "RateLimiter",
    "RecordingQueryService",
    "run_upload_sweeper",
    "sweep_stale_files",
]
