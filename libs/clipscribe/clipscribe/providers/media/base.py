"""Media provider abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MediaProvider(ABC):
    @abstractmethod
    async def extract_thumbnail(
        self,
        video_path: str,
        output_path: str,
        *,
        offset_s: float,
        max_width: int,
        max_height: int,
    ) -> str:
        """Write a single JPEG frame taken `offset_s` into the clip."""
        raise NotImplementedError

    @abstractmethod
    async def extract_audio(self, video_path: str, output_path: str) -> str:
        """Re-encode the audio track of `video_path` to MP3."""
        raise NotImplementedError

    @abstractmethod
    async def probe_duration(self, video_path: str) -> float | None:
        """Return the container duration in seconds, or None when unknown."""
        raise NotImplementedError

    async def close(self) -> None:  # pragma: no cover
        return None
