from fastapi import APIRouter

from .ai import router as ai_router
from .email import router as email_router

router = APIRouter()
router.include_router(ai_router)
router.include_router(email_router)
