"""PostgreSQL repository layer."""

from clipscribe.repositories.base import BaseRepository, DatabasePool
from clipscribe.repositories.recording_repo import RecordingRepository

__all__ = ["BaseRepository", "DatabasePool", "RecordingRepository"]
