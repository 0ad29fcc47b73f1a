"""Pipeline orchestration.

This package is imported by stages for type hints. Keep imports lazy to avoid
circular-import issues between `clipscribe.pipeline` and `clipscribe.stages`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from clipscribe.pipeline.orchestrator import UploadPipelineOrchestrator
    from clipscribe.pipeline.tracker import TransientFileTracker, tracked_files

__all__ = ["TransientFileTracker", "UploadPipelineOrchestrator", "tracked_files"]


def __getattr__(name: str) -> Any:
    if name == "UploadPipelineOrchestrator":
        from clipscribe.pipeline.orchestrator import UploadPipelineOrchestrator

        return UploadPipelineOrchestrator
    if name in {"TransientFileTracker", "tracked_files"}:
        from clipscribe.pipeline import tracker

        return getattr(tracker, name)
    raise AttributeError(name)
