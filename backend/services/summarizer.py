"""
Meeting summariser: prompt construction, the completion call and
persistence of the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from core.errors import InvalidRequest, StoreFailure
from models.summary import SummaryRecord
from services.llm_client import CompletionProvider, Message
from services.summary_store import SummaryStore

CUSTOM_SYSTEM_PROMPT = (
    "Follow the user's instructions exactly.\n"
    "Do not add extra formatting unless asked."
)

DEFAULT_SYSTEM_PROMPT = (
    "You are an assistant that converts meeting transcripts into a structured summary.\n"
    "Output must be plain text. Provide:\n"
    "1) Title line\n"
    "2) Short summary (2-4 lines)\n"
    "3) Action Items as a numbered list with owner (if any) and due date (if present in text)\n"
    "4) Decisions made as bullet points\n"
    "5) Key points / bullet summary\n"
    "Do not include disclaimers. Keep concise."
)

DEFAULT_USER_SUFFIX = (
    "Please produce a clear structured summary with headings:\n"
    "Title:, Summary:, Action Items:, Decisions:, Key Points:."
)


def build_messages(transcript: str, prompt: Optional[str] = None) -> List[Message]:
    """
    A non-empty instruction is followed literally; otherwise the model is
    asked for the default structured summary.
    """
    if prompt and prompt.strip():
        system = CUSTOM_SYSTEM_PROMPT
        user_msg = f"{prompt}\n\nTranscript:\n{transcript}"
    else:
        system = DEFAULT_SYSTEM_PROMPT
        user_msg = f"Transcript:\n{transcript}\n\n{DEFAULT_USER_SUFFIX}"

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user_msg},
    ]


@dataclass(frozen=True)
class GeneratedSummary:
    id: str
    generated: str


class SummarizationService:
    def __init__(
        self,
        provider: CompletionProvider,
        store: SummaryStore,
        *,
        max_tokens: int = 800,
        temperature: float = 0.8,
        top_p: float = 1.0,
    ) -> None:
        self.provider = provider
        self.store = store
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.top_p = top_p

    async def generate(self, transcript: str, prompt: Optional[str] = None) -> GeneratedSummary:
        transcript = transcript or ""
        prompt = prompt or ""
        messages = build_messages(transcript, prompt)
        logger.info(
            "Generating summary (transcript={} chars, custom_prompt={})",
            len(transcript),
            bool(prompt.strip()),
        )

        # provider failures propagate as UpstreamFailure; nothing is stored
        text = await self.provider.complete(
            messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
        )

        try:
            record = await self.store.create(transcript=transcript, prompt=prompt, generated=text)
        except StoreFailure as exc:
            raise StoreFailure(exc.message, generated=text) from exc

        return GeneratedSummary(id=record.id, generated=text)

    async def save(self, summary_id: Optional[str], edited: Optional[str]) -> SummaryRecord:
        if not summary_id or not summary_id.strip():
            raise InvalidRequest("missing summaryId")
        return await self.store.update_edited(summary_id.strip(), edited or "")

    async def fetch_by_id(self, summary_id: str) -> SummaryRecord:
        return await self.store.get(summary_id)
