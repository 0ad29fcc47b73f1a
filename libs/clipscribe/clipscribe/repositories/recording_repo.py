from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from clipscribe.models.recording import Recording, RecordingMetadata
from clipscribe.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

_COLUMNS = "id, transcript, thumbnail, metadata, created_at"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_dict(value: object) -> dict:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return {}
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return dict(parsed) if isinstance(parsed, dict) else {}
    return {}


class RecordingRepository(BaseRepository):
    def __init__(self, pool: AsyncConnectionPool) -> None:
        super().__init__(pool)

    @staticmethod
    def _from_row(row: dict[str, object]) -> Recording:
        raw_created_at = row.get("created_at")
        created_at = raw_created_at if isinstance(raw_created_at, datetime) else _utcnow()
        return Recording(
            id=str(row["id"]),
            transcript=str(row.get("transcript") or ""),
            thumbnail=str(row.get("thumbnail") or ""),
            metadata=RecordingMetadata.from_dict(_as_dict(row.get("metadata"))),
            created_at=created_at,
        )

    async def create(
        self,
        *,
        transcript: str,
        thumbnail: str,
        metadata: RecordingMetadata,
        created_at: datetime | None = None,
    ) -> Recording:
        """Insert one recording; the database assigns the id."""
        async with self.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    INSERT INTO recordings (transcript, thumbnail, metadata, created_at)
                    VALUES (%s,%s,%s,%s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        transcript,
                        thumbnail,
                        Jsonb(metadata.to_dict()),
                        created_at or _utcnow(),
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError("recordings insert returned no row")
        return self._from_row(row)

    async def get(self, recording_id: str) -> Recording | None:
        async with self.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_COLUMNS} FROM recordings WHERE id = %s",
                    (recording_id,),
                )
                row = await cur.fetchone()
        if row is None:
            return None
        return self._from_row(row)

    async def list_all(self) -> list[Recording]:
        """All recordings, newest first. Unbounded."""
        async with self.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_COLUMNS} FROM recordings ORDER BY created_at DESC, id DESC"
                )
                rows = await cur.fetchall()
        return [self._from_row(r) for r in rows]

    async def delete(self, recording_id: str) -> int:
        async with self.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("DELETE FROM recordings WHERE id = %s", (recording_id,))
                deleted = max(0, int(cur.rowcount))
            await conn.commit()
        if deleted:
            logger.info("deleted recording %s", recording_id)
        return deleted
