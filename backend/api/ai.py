"""
Summary generation, editing and retrieval endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel

from api.deps import get_summarizer
from core.errors import AppError
from services.summarizer import SummarizationService

router = APIRouter(prefix="/ai", tags=["AI"])


class GenerateRequest(BaseModel):
    transcript: Optional[str] = ""
    prompt: Optional[str] = ""


class SaveRequest(BaseModel):
    summaryId: Optional[str] = None
    edited: Optional[str] = None


@router.post("/generate")
async def generate_summary(
    payload: GenerateRequest,
    summarizer: SummarizationService = Depends(get_summarizer),
) -> dict:
    try:
        result = await summarizer.generate(payload.transcript or "", payload.prompt or "")
    except AppError:
        raise
    except Exception as e:
        logger.exception("Summary generation failed: {}", e)
        raise AppError(str(e) or "server error") from e

    return {"ok": True, "summaryId": result.id, "generated": result.generated}


@router.post("/save")
async def save_summary(
    payload: SaveRequest,
    summarizer: SummarizationService = Depends(get_summarizer),
) -> dict:
    try:
        doc = await summarizer.save(payload.summaryId, payload.edited)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Saving summary {} failed: {}", payload.summaryId, e)
        raise AppError(str(e) or "server error") from e

    return {"ok": True, "doc": doc.to_doc()}


@router.get("/{summary_id}")
async def get_summary(
    summary_id: str,
    summarizer: SummarizationService = Depends(get_summarizer),
) -> dict:
    try:
        doc = await summarizer.fetch_by_id(summary_id)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Loading summary {} failed: {}", summary_id, e)
        raise AppError(str(e) or "server error") from e

    return {"ok": True, "doc": doc.to_doc()}
