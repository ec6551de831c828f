"""
HTTP client for the summarizer API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import httpx

from core.config import settings


class ApiError(Exception):
    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SummarizerApi:
    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        # no request timeout: a hung call keeps the form in its loading state
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=None)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(None, f"request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or not data.get("ok", False):
            message = data.get("error") or response.reason_phrase or "request failed"
            raise ApiError(response.status_code, message)
        return data

    async def generate_summary(self, transcript: str, prompt: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/ai/generate", json={"transcript": transcript, "prompt": prompt}
        )

    async def save_summary(self, summary_id: str, edited: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/ai/save", json={"summaryId": summary_id, "edited": edited}
        )

    async def send_mail(self, to: Union[str, List[str]], subject: str, body: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/email/send", json={"to": to, "subject": subject, "body": body}
        )

    async def fetch_summary(self, summary_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/ai/{summary_id}")
