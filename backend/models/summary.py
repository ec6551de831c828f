from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    # SQLite drops tzinfo, so timestamps are kept naive UTC everywhere
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SummaryRecord(SQLModel, table=True):
    __tablename__ = "summary"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=32)

    transcript: str = Field(sa_column=Column(Text, nullable=False))
    prompt: str = Field(default="", sa_column=Column(Text, nullable=False))
    # raw AI response
    generated: str = Field(sa_column=Column(Text, nullable=False))
    # user-edited final text
    edited: str = Field(sa_column=Column(Text, nullable=False))

    created_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        default_factory=utcnow,
    )
    updated_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        default_factory=utcnow,
    )

    def to_doc(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "transcript": self.transcript,
            "prompt": self.prompt,
            "generated": self.generated,
            "edited": self.edited,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
