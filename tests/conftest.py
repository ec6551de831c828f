"""Shared fixtures.

Provides:
- a temporary aiosqlite document store per test
- a fake completion provider that records every call
- a fake SMTP relay patched over smtplib
- the FastAPI app wired to those services and an async HTTP client for it
"""

from __future__ import annotations

import smtplib
from collections.abc import AsyncGenerator
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.database import Database
from core.errors import UpstreamFailure
from main import create_app
from services.container import AppServices
from services.mailer import SmtpMailer
from services.summarizer import SummarizationService
from services.summary_store import SummaryStore


class FakeProvider:
    """Completion provider double returning canned text."""

    def __init__(self, reply: str = "Title: Ship date\nSummary: Ship on Friday.") -> None:
        self.reply = reply
        self.calls: List[dict] = []
        self.error: Optional[str] = None

    async def complete(self, messages, *, max_tokens, temperature, top_p) -> str:
        self.calls.append(
            {
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "top_p": top_p,
            }
        )
        if self.error:
            raise UpstreamFailure(self.error)
        return self.reply


class SmtpRecorder:
    """Collects connections opened through the patched smtplib classes."""

    def __init__(self) -> None:
        self.connections: List["FakeSMTP"] = []
        self.refuse: dict = {}
        self.fail_with: Optional[Exception] = None

    @property
    def sent(self) -> list:
        return [item for conn in self.connections for item in conn.sent]


class FakeSMTP:
    recorder: SmtpRecorder
    ssl = False

    def __init__(self, host=None, port=0, timeout=None) -> None:
        self.host = host
        self.port = port
        self.tls = False
        self.login_args = None
        self.closed = False
        self.sent: list = []
        self.recorder.connections.append(self)

    def ehlo(self):
        return 250, b"ok"

    def has_extn(self, name: str) -> bool:
        return name.lower() == "starttls"

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        self.login_args = (user, password)

    def send_message(self, msg, from_addr=None, to_addrs=None):
        if self.recorder.fail_with is not None:
            raise self.recorder.fail_with
        self.sent.append({"message": msg, "from": from_addr, "to": list(to_addrs or [])})
        return dict(self.recorder.refuse)

    def quit(self):
        self.closed = True

    def close(self):
        self.closed = True


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def smtp(monkeypatch) -> SmtpRecorder:
    recorder = SmtpRecorder()
    plain = type("PlainSMTP", (FakeSMTP,), {"recorder": recorder, "ssl": False})
    secure = type("SecureSMTP", (FakeSMTP,), {"recorder": recorder, "ssl": True})
    monkeypatch.setattr(smtplib, "SMTP", plain)
    monkeypatch.setattr(smtplib, "SMTP_SSL", secure)
    return recorder


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'summaries.db'}")
    await db.init()
    yield db
    await db.dispose()


@pytest.fixture
def store(database) -> SummaryStore:
    return SummaryStore(database)


@pytest.fixture
def summarizer(provider, store) -> SummarizationService:
    return SummarizationService(provider=provider, store=store, max_tokens=800, temperature=0.8, top_p=1.0)


@pytest.fixture
def mailer(smtp) -> SmtpMailer:
    return SmtpMailer(
        host="smtp.test",
        port=587,
        user="mailer@example.com",
        password="secret",
        from_address="notes@example.com",
    )


@pytest.fixture
def services(database, summarizer, mailer) -> AppServices:
    return AppServices(database=database, summarizer=summarizer, mailer=mailer)


@pytest.fixture
def app(services):
    return create_app(services)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing the API."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
