"""
Persistence for summary records.
"""

from __future__ import annotations

from datetime import timedelta

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from core.database import Database
from core.errors import NotFound, StoreFailure
from models.summary import SummaryRecord, utcnow


class SummaryStore:
    def __init__(self, database: Database) -> None:
        self._db = database

    async def create(self, transcript: str, prompt: str, generated: str) -> SummaryRecord:
        now = utcnow()
        record = SummaryRecord(
            transcript=transcript,
            prompt=prompt,
            generated=generated,
            edited=generated,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._db.session() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except SQLAlchemyError as exc:
            logger.exception("Failed to insert summary record")
            raise StoreFailure(f"could not save summary: {exc}") from exc

        logger.info("Created summary {} ({} chars)", record.id, len(generated))
        return record

    async def get(self, summary_id: str) -> SummaryRecord:
        try:
            async with self._db.session() as session:
                record = await session.get(SummaryRecord, summary_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load summary {}", summary_id)
            raise StoreFailure(f"could not load summary: {exc}") from exc

        if record is None:
            raise NotFound("not found")
        return record

    async def update_edited(self, summary_id: str, edited: str) -> SummaryRecord:
        """
        Overwrite the user-edited text. Last write wins; `updated_at`
        always moves forward, even for two saves within the same tick.
        """
        try:
            async with self._db.session() as session:
                record = await session.get(SummaryRecord, summary_id)
                if record is None:
                    raise NotFound("not found")

                now = utcnow()
                if now <= record.updated_at:
                    now = record.updated_at + timedelta(microseconds=1)

                record.edited = edited
                record.updated_at = now
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except SQLAlchemyError as exc:
            logger.exception("Failed to update summary {}", summary_id)
            raise StoreFailure(f"could not update summary: {exc}") from exc

        logger.info("Saved edits for summary {}", summary_id)
        return record
