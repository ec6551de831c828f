"""
Service handles shared by the request handlers.

Built once per process from settings, started by the application lifespan
and torn down on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import _Settings
from core.database import Database
from services.llm_client import GeminiClient
from services.mailer import SmtpMailer
from services.summarizer import SummarizationService
from services.summary_store import SummaryStore


@dataclass
class AppServices:
    database: Database
    summarizer: SummarizationService
    mailer: SmtpMailer

    async def startup(self) -> None:
        await self.database.init()

    async def shutdown(self) -> None:
        await self.database.dispose()


def build_services(settings: _Settings) -> AppServices:
    database = Database(settings.DATABASE_URL)
    summarizer = SummarizationService(
        provider=GeminiClient(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL),
        store=SummaryStore(database),
        max_tokens=settings.LLM_MAX_TOKENS,
        temperature=settings.LLM_TEMPERATURE,
        top_p=settings.LLM_TOP_P,
    )
    mailer = SmtpMailer(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        user=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        from_address=settings.sender_address,
        default_subject=settings.DEFAULT_EMAIL_SUBJECT,
    )
    return AppServices(database=database, summarizer=summarizer, mailer=mailer)
