"""
Application entry-point.

Run locally:
    uvicorn main:app --reload --port 5000
or
    python main.py
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from api import router as api_router
from core.config import settings
from core.errors import error_response, register_error_handlers
from core.logging import configure_logging
from services.container import AppServices, build_services


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than MAX_BODY_BYTES before parsing.

    A declared Content-Length is checked up front. Chunked bodies are read
    and counted as they arrive, then replayed to the app unchanged.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        length = request.headers.get("content-length")
        if length is not None and length.isdigit():
            if int(length) > self.max_bytes:
                await self._reject(request, length, scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        messages: List[Message] = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_bytes:
                await self._reject(request, str(received), scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, request: Request, size: str, scope: Scope, receive: Receive, send: Send) -> None:
        logger.warning("Rejected {} {}: body of {} bytes", request.method, request.url.path, size)
        response = error_response(413, "request body too large")
        await response(scope, receive, send)


def create_app(services: Optional[AppServices] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()  # sets loguru as global logger
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(settings)
        await app.state.services.startup()
        logger.info("Meeting summarizer API started (env={})", settings.ENV)
        try:
            yield
        finally:
            await app.state.services.shutdown()

    app = FastAPI(
        title="AI Meeting Summarizer API",
        version="0.1.0",
        openapi_url="/openapi.json",
        docs_url="/docs" if settings.ENV != "production" else None,
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS – open in dev, tighten in prod
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)

    register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def liveness() -> str:
        return "AI Meeting Summarizer API (Gemini-powered)"

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
