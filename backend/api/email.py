"""
Email sharing endpoint.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel

from api.deps import get_mailer
from core.errors import AppError
from services.mailer import SmtpMailer

router = APIRouter(prefix="/email", tags=["Email"])


class SendEmailRequest(BaseModel):
    # comma-separated string or a list of addresses
    to: Union[str, List[str], None] = None
    subject: Optional[str] = None
    body: Optional[str] = None


@router.post("/send")
async def send_email(
    payload: SendEmailRequest,
    mailer: SmtpMailer = Depends(get_mailer),
) -> dict:
    try:
        info = await mailer.send(payload.to, payload.subject, payload.body)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Email dispatch failed: {}", e)
        raise AppError(str(e) or "server error") from e

    return {"ok": True, "info": info}
