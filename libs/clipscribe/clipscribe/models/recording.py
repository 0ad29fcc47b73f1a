"""Recording model (durable result of one successful run)."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _dt_to_iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _dt_from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


def encode_thumbnail(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_thumbnail(text: str) -> bytes:
    return base64.b64decode(str(text or "").encode("ascii"))


@dataclass(frozen=True)
class RecordingMetadata:
    original_filename: str
    media_type: str
    size_bytes: int
    duration_s: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_filename": self.original_filename,
            "media_type": self.media_type,
            "size_bytes": int(self.size_bytes),
            "duration_s": self.duration_s,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecordingMetadata":
        duration = data.get("duration_s")
        return cls(
            original_filename=str(data.get("original_filename") or ""),
            media_type=str(data.get("media_type") or "application/octet-stream"),
            size_bytes=int(data.get("size_bytes") or 0),
            duration_s=float(duration) if isinstance(duration, (int, float)) else None,
        )


@dataclass(frozen=True)
class Recording:
    id: str
    transcript: str
    thumbnail: str  # base64 JPEG
    metadata: RecordingMetadata
    created_at: datetime = field(default_factory=_utcnow)

    def thumbnail_bytes(self) -> bytes:
        return decode_thumbnail(self.thumbnail)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "transcript": self.transcript,
            "thumbnail": self.thumbnail,
            "metadata": self.metadata.to_dict(),
            "created_at": _dt_to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recording":
        metadata_raw = data.get("metadata")
        return cls(
            id=str(data.get("id", "")),
            transcript=str(data.get("transcript") or ""),
            thumbnail=str(data.get("thumbnail") or ""),
            metadata=RecordingMetadata.from_dict(
                dict(metadata_raw) if isinstance(metadata_raw, dict) else {}
            ),
            created_at=_dt_from_iso(data.get("created_at")) or _utcnow(),
        )
