"""
Form controller for the summarizer client.

Binds the pure transitions in `client.state` to the HTTP API. A view layer
reads `app.state` and calls the action methods in response to user input.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional, Set, Union

from loguru import logger

from client import state as st
from client.api import ApiError, SummarizerApi
from client.state import ClientState
from core.config import settings

Listener = Callable[[ClientState], None]


class SummarizerApp:
    def __init__(
        self,
        api: SummarizerApi,
        message_seconds: Optional[float] = None,
        on_change: Optional[Listener] = None,
    ) -> None:
        self.api = api
        self.message_seconds = (
            settings.STATUS_MESSAGE_SECONDS if message_seconds is None else message_seconds
        )
        self._on_change = on_change
        self._state = ClientState()
        self._timers: Set[asyncio.Task] = set()

    @property
    def state(self) -> ClientState:
        return self._state

    def _set(self, new_state: ClientState) -> None:
        previous = self._state.message
        self._state = new_state
        if new_state.message is not None and new_state.message is not previous:
            self._schedule_dismiss(new_state.message)
        if self._on_change is not None:
            self._on_change(new_state)

    def _schedule_dismiss(self, message: st.StatusMessage) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop (plain sync use); banner stays until replaced
            return
        task = loop.create_task(self._dismiss_later(message))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    async def _dismiss_later(self, message: st.StatusMessage) -> None:
        await asyncio.sleep(self.message_seconds)
        self._set(st.dismiss_message(self._state, message))

    async def aclose(self) -> None:
        for task in list(self._timers):
            task.cancel()
        await self.api.aclose()

    # -- form fields ---------------------------------------------------------

    def set_transcript(self, text: str) -> None:
        self._set(st.set_transcript(self._state, text))

    def set_prompt(self, text: str) -> None:
        self._set(st.set_prompt(self._state, text))

    def set_summary_text(self, text: str) -> None:
        self._set(st.set_generated(self._state, text))

    def set_subject(self, text: str) -> None:
        self._set(st.set_subject(self._state, text))

    def load_file(self, path: Union[str, Path]) -> None:
        """Read a local .txt transcript into the transcript field."""
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        self._set(st.set_transcript(self._state, text))

    # -- summary actions -------------------------------------------------------

    async def generate(self) -> None:
        if not self._state.can_generate:
            return
        if not self._state.transcript.strip():
            self._set(st.show_message(self._state, st.ERROR, "Please provide a transcript to summarize."))
            return

        self._set(st.start_generate(self._state))
        try:
            data = await self.api.generate_summary(self._state.transcript, self._state.prompt)
        except ApiError as exc:
            logger.error("Error generating summary: {}", exc.message)
            self._set(st.generate_failed(self._state))
            return

        self._set(st.generate_succeeded(self._state, data.get("summaryId"), data.get("generated") or ""))

    async def save(self) -> None:
        if self._state.saving:
            return
        if not self._state.summary_id:
            self._set(st.show_message(self._state, st.ERROR, "No summary to save yet."))
            return

        self._set(st.start_save(self._state))
        try:
            await self.api.save_summary(self._state.summary_id, self._state.generated)
        except ApiError as exc:
            logger.error("Save error: {}", exc.message)
            self._set(st.save_failed(self._state))
            return

        self._set(st.save_succeeded(self._state))

    def edit(self) -> None:
        self._set(st.start_edit(self._state))

    def clear(self) -> None:
        self._set(st.clear(self._state))

    async def fetch(self, summary_id: str) -> None:
        try:
            data = await self.api.fetch_summary(summary_id)
        except ApiError as exc:
            logger.error("Fetch error: {}", exc.message)
            self._set(st.show_message(self._state, st.ERROR, f"Could not load summary: {exc.message}"))
            return

        doc = data.get("doc") or {}
        self._set(st.load_record(self._state, doc.get("id", summary_id), doc.get("edited") or ""))

    # -- email ---------------------------------------------------------------

    def open_email_modal(self) -> None:
        self._set(st.open_email_modal(self._state))

    def close_email_modal(self) -> None:
        self._set(st.close_email_modal(self._state))

    def set_recipient_input(self, text: str) -> None:
        self._set(st.set_recipient_input(self._state, text))

    def press_key(self, key: str) -> None:
        self._set(st.press_key(self._state, key))

    def type_text(self, text: str) -> None:
        self._set(st.type_text(self._state, text))

    def remove_recipient(self, address: str) -> None:
        self._set(st.remove_recipient(self._state, address))

    async def share(self) -> None:
        if self._state.sending:
            return
        # leftover text in the input counts as one more recipient
        leftover = self._state.recipient_input.strip()
        if leftover:
            self._set(st.commit_recipient(self._state))
            if leftover not in self._state.recipients and not st.is_valid_email(leftover):
                # keep the modal open so the address can be corrected
                return

        if not self._state.recipients:
            self._set(st.show_message(
                self._state, st.ERROR, "Please enter at least one recipient email address."
            ))
            return

        self._set(st.start_send(self._state))
        try:
            await self.api.send_mail(
                ", ".join(self._state.recipients), self._state.subject, self._state.generated
            )
        except ApiError as exc:
            logger.error("Email error: {}", exc.message)
            self._set(st.send_failed(self._state))
            return

        self._set(st.send_succeeded(self._state))
