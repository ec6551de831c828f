"""
Form state for the summarizer client.

`ClientState` is an immutable snapshot of everything the form shows; every
user interaction is a pure function taking a state and returning the next
one. Network calls live in `client.app`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# keystrokes that turn the recipient buffer into a tag
COMMIT_KEYS = ("Enter", " ", ",")

DEFAULT_PROMPT = "Summarize in bullet points for executives"
DEFAULT_SUBJECT = "Meeting Summary"

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    kind: str
    text: str


@dataclass(frozen=True)
class ClientState:
    transcript: str = ""
    prompt: str = DEFAULT_PROMPT
    generated: str = ""
    summary_id: Optional[str] = None

    loading: bool = False
    saving: bool = False
    sending: bool = False
    editing: bool = True
    message: Optional[StatusMessage] = None

    email_modal_open: bool = False
    recipients: Tuple[str, ...] = ()
    recipient_input: str = ""
    subject: str = DEFAULT_SUBJECT

    @property
    def has_summary(self) -> bool:
        return bool(self.generated)

    @property
    def can_generate(self) -> bool:
        return not self.loading

    @property
    def phase(self) -> str:
        """One of: empty, generating, editing, saved."""
        if self.loading:
            return "generating"
        if not self.has_summary:
            return "empty"
        return "editing" if self.editing else "saved"


def is_valid_email(address: str) -> bool:
    return bool(EMAIL_RE.match(address))


# -- plain field edits -------------------------------------------------------

def set_transcript(state: ClientState, text: str) -> ClientState:
    return replace(state, transcript=text)


def set_prompt(state: ClientState, text: str) -> ClientState:
    return replace(state, prompt=text)


def set_generated(state: ClientState, text: str) -> ClientState:
    # read-only while the summary is in the saved view
    if not state.editing:
        return state
    return replace(state, generated=text)


def set_subject(state: ClientState, text: str) -> ClientState:
    return replace(state, subject=text)


def set_recipient_input(state: ClientState, text: str) -> ClientState:
    return replace(state, recipient_input=text)


# -- status banner -----------------------------------------------------------

def show_message(state: ClientState, kind: str, text: str) -> ClientState:
    return replace(state, message=StatusMessage(kind=kind, text=text))


def dismiss_message(state: ClientState, message: StatusMessage) -> ClientState:
    """Clear the banner, unless a newer one has already replaced `message`."""
    if state.message is not message:
        return state
    return replace(state, message=None)


# -- summary lifecycle -------------------------------------------------------

def start_generate(state: ClientState) -> ClientState:
    return replace(state, loading=True, generated="", summary_id=None)


def generate_succeeded(state: ClientState, summary_id: Optional[str], text: str) -> ClientState:
    state = replace(state, loading=False, generated=text, summary_id=summary_id, editing=True)
    return show_message(state, SUCCESS, "Summary generated successfully!")


def generate_failed(state: ClientState) -> ClientState:
    state = replace(state, loading=False, generated="", summary_id=None)
    return show_message(state, ERROR, "Error generating summary. Please try again.")


def start_save(state: ClientState) -> ClientState:
    return replace(state, saving=True)


def save_succeeded(state: ClientState) -> ClientState:
    state = replace(state, saving=False, editing=False)
    return show_message(state, SUCCESS, "Summary saved.")


def save_failed(state: ClientState) -> ClientState:
    state = replace(state, saving=False)
    return show_message(state, ERROR, "Error saving summary. Please try again.")


def start_edit(state: ClientState) -> ClientState:
    return replace(state, editing=True)


def clear(state: ClientState) -> ClientState:
    return replace(state, transcript="", generated="", summary_id=None)


def load_record(state: ClientState, summary_id: str, text: str) -> ClientState:
    return replace(state, summary_id=summary_id, generated=text, editing=False)


# -- email modal & recipient tags ------------------------------------------

def open_email_modal(state: ClientState) -> ClientState:
    return replace(state, email_modal_open=True)


def close_email_modal(state: ClientState) -> ClientState:
    return replace(state, email_modal_open=False)


def commit_recipient(state: ClientState, raw: Optional[str] = None) -> ClientState:
    """
    Turn `raw` (the input buffer by default) into a recipient tag.

    Blank input and addresses already in the list are no-ops. A malformed
    address raises an error banner and stays in the buffer for correction.
    """
    address = (state.recipient_input if raw is None else raw).strip()
    if not address or address in state.recipients:
        return state

    if not is_valid_email(address):
        state = replace(state, recipient_input=address)
        return show_message(state, ERROR, f"Invalid email format: {address}")

    return replace(state, recipients=state.recipients + (address,), recipient_input="")


def press_key(state: ClientState, key: str) -> ClientState:
    if key in COMMIT_KEYS:
        return commit_recipient(state)
    if len(key) == 1:
        return replace(state, recipient_input=state.recipient_input + key)
    if key == "Backspace":
        return replace(state, recipient_input=state.recipient_input[:-1])
    return state


def type_text(state: ClientState, text: str) -> ClientState:
    for char in text:
        state = press_key(state, char)
    return state


def remove_recipient(state: ClientState, address: str) -> ClientState:
    return replace(state, recipients=tuple(r for r in state.recipients if r != address))


def start_send(state: ClientState) -> ClientState:
    return replace(state, sending=True)


def send_succeeded(state: ClientState) -> ClientState:
    state = replace(
        state,
        sending=False,
        email_modal_open=False,
        recipients=(),
        recipient_input="",
    )
    return show_message(state, SUCCESS, "Email sent successfully!")


def send_failed(state: ClientState) -> ClientState:
    state = replace(state, sending=False)
    return show_message(state, ERROR, "Email failed to send. Please check the recipient(s).")
