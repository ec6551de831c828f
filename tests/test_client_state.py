"""Pure form-state transitions: recipient tags, banner and summary lifecycle."""

from __future__ import annotations

import pytest

from client import state as st
from client.state import ClientState


def test_initial_state():
    state = ClientState()
    assert state.phase == "empty"
    assert state.prompt == st.DEFAULT_PROMPT
    assert state.subject == st.DEFAULT_SUBJECT
    assert state.recipients == ()
    assert state.editing is True


@pytest.mark.parametrize(
    "address, valid",
    [
        ("a@b.com", True),
        ("first.last@sub.example.org", True),
        ("not-an-email", False),
        ("a@b", False),
        ("a b@c.com", False),
        ("@b.com", False),
        ("a@@b.com", False),
    ],
)
def test_is_valid_email(address, valid):
    assert st.is_valid_email(address) is valid


# ── recipient tags ───────────────────────────────────────────────────────────


def test_valid_address_becomes_tag():
    state = st.set_recipient_input(ClientState(), "a@b.com")
    state = st.commit_recipient(state)

    assert state.recipients == ("a@b.com",)
    assert state.recipient_input == ""
    assert state.message is None


def test_invalid_address_stays_in_buffer_with_error():
    state = st.set_recipient_input(ClientState(), "not-an-email")
    state = st.commit_recipient(state)

    assert state.recipients == ()
    assert state.recipient_input == "not-an-email"
    assert state.message == st.StatusMessage(st.ERROR, "Invalid email format: not-an-email")


def test_duplicate_address_is_a_no_op():
    state = st.commit_recipient(ClientState(), "a@b.com")
    state = st.set_recipient_input(state, "a@b.com")

    again = st.commit_recipient(state)

    assert again is state
    assert again.recipients == ("a@b.com",)


def test_blank_input_is_a_no_op():
    state = st.set_recipient_input(ClientState(), "   ")
    assert st.commit_recipient(state) is state


@pytest.mark.parametrize("key", ["Enter", " ", ","])
def test_commit_keys(key):
    state = st.type_text(ClientState(), "x@y.com")
    state = st.press_key(state, key)

    assert state.recipients == ("x@y.com",)
    assert state.recipient_input == ""


def test_typing_with_trailing_space_creates_tag():
    state = st.type_text(ClientState(), "x@y.com ")
    assert state.recipients == ("x@y.com",)
    assert state.recipient_input == ""


def test_typing_several_addresses():
    state = st.type_text(ClientState(), "a@b.com,c@d.org ,bad")
    assert state.recipients == ("a@b.com", "c@d.org")
    assert state.recipient_input == "bad"


def test_backspace_and_other_keys():
    state = st.type_text(ClientState(), "ab")
    state = st.press_key(state, "Backspace")
    assert state.recipient_input == "a"
    assert st.press_key(state, "Shift") is state


def test_remove_recipient():
    state = st.type_text(ClientState(), "a@b.com c@d.org ")
    state = st.remove_recipient(state, "a@b.com")
    assert state.recipients == ("c@d.org",)


# ── banner ───────────────────────────────────────────────────────────────────


def test_new_banner_replaces_old_and_old_dismiss_is_ignored():
    first = st.show_message(ClientState(), st.ERROR, "first")
    old = first.message
    second = st.show_message(first, st.SUCCESS, "second")

    assert st.dismiss_message(second, old) is second
    assert st.dismiss_message(second, second.message).message is None


# ── summary lifecycle ────────────────────────────────────────────────────────


def test_generate_cycle():
    state = st.set_transcript(ClientState(), "Alice: ship Friday")
    state = st.start_generate(state)
    assert state.phase == "generating"
    assert state.summary_id is None

    state = st.generate_succeeded(state, "abc", "Summary")
    assert state.phase == "editing"
    assert state.message.kind == st.SUCCESS

    state = st.save_succeeded(st.start_save(state))
    assert state.phase == "saved"
    assert state.saving is False

    # read-only while saved
    assert st.set_generated(state, "changed").generated == "Summary"

    state = st.start_edit(state)
    assert st.set_generated(state, "changed").generated == "changed"


def test_generate_failure_returns_to_empty():
    state = st.start_generate(st.set_transcript(ClientState(), "t"))
    state = st.generate_failed(state)

    assert state.phase == "empty"
    assert state.message.kind == st.ERROR
    assert state.transcript == "t"


def test_save_failure_keeps_edits():
    state = st.generate_succeeded(ClientState(), "abc", "Summary")
    state = st.set_generated(state, "my edits")
    state = st.save_failed(st.start_save(state))

    assert state.generated == "my edits"
    assert state.editing is True
    assert state.message.kind == st.ERROR


def test_clear_resets_summary_but_not_prompt():
    state = st.generate_succeeded(st.set_transcript(ClientState(), "t"), "abc", "S")
    state = st.clear(st.set_prompt(state, "custom"))

    assert (state.transcript, state.generated, state.summary_id) == ("", "", None)
    assert state.prompt == "custom"


def test_send_success_resets_modal():
    state = st.open_email_modal(ClientState())
    state = st.type_text(state, "a@b.com draft")
    state = st.send_succeeded(st.start_send(state))

    assert state.email_modal_open is False
    assert state.recipients == ()
    assert state.recipient_input == ""
    assert state.message.text == "Email sent successfully!"
