"""
Chat-completion client backed by Gemini.

Callers speak in OpenAI-style message lists (`{"role", "content"}` pairs);
the system message becomes Gemini's `system_instruction` and the rest are
sent as conversation turns.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Tuple

import google.generativeai as genai
from loguru import logger

from core.errors import UpstreamFailure

Message = Dict[str, str]

_ROLE_MAP = {"user": "user", "assistant": "model", "model": "model"}


class CompletionProvider(Protocol):
    async def complete(
        self,
        messages: List[Message],
        *,
        max_tokens: int,
        temperature: float,
        top_p: float,
    ) -> str: ...


def split_messages(messages: List[Message]) -> Tuple[Optional[str], List[dict]]:
    """Turn a role/content list into (system_instruction, gemini contents)."""
    system_parts: List[str] = []
    contents: List[dict] = []
    for message in messages:
        role = message.get("role", "user")
        content = message.get("content", "")
        if role == "system":
            system_parts.append(content)
            continue
        if role not in _ROLE_MAP:
            raise ValueError(f"unsupported message role: {role}")
        contents.append({"role": _ROLE_MAP[role], "parts": [content]})

    system = "\n\n".join(system_parts) if system_parts else None
    return system, contents


class GeminiClient:
    def __init__(self, api_key: Optional[str], model: str) -> None:
        self.model = model
        self._api_key = api_key
        if api_key:
            genai.configure(api_key=api_key)

    async def complete(
        self,
        messages: List[Message],
        *,
        max_tokens: int,
        temperature: float,
        top_p: float,
    ) -> str:
        if not self._api_key:
            raise UpstreamFailure("GEMINI_API_KEY is not configured")

        system, contents = split_messages(messages)
        model = genai.GenerativeModel(self.model, system_instruction=system)
        try:
            result = await model.generate_content_async(
                contents,
                generation_config={
                    "temperature": temperature,
                    "top_p": top_p,
                    "max_output_tokens": max_tokens,
                },
            )
            # .text raises ValueError when the candidate was blocked or empty
            text = result.text
        except Exception as exc:
            logger.exception("Gemini completion failed: {}", exc)
            raise UpstreamFailure(f"completion provider error: {exc}") from exc

        return (text or "").strip()
