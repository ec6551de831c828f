"""Command line front end for the summarizer form."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

import typer

from client import state as st
from client.api import SummarizerApi
from client.app import SummarizerApp
from client.state import ClientState, StatusMessage
from core.config import settings

app = typer.Typer(add_completion=False, help="Summarize meeting transcripts and share them by email.")

Action = Callable[[SummarizerApp], Awaitable[None]]


def _make_api(base_url: str) -> SummarizerApi:
    return SummarizerApi(base_url)


class _Banner:
    """Prints each new status message once; remembers whether any was an error."""

    def __init__(self) -> None:
        self.last: Optional[StatusMessage] = None
        self.failed = False

    def __call__(self, state: ClientState) -> None:
        message = state.message
        if message is None or message is self.last:
            return
        self.last = message
        if message.kind == st.ERROR:
            self.failed = True
            typer.secho(message.text, fg=typer.colors.RED, err=True)
        else:
            typer.secho(message.text, fg=typer.colors.GREEN)


def _run(base_url: str, action: Action) -> None:
    banner = _Banner()

    async def main() -> None:
        form = SummarizerApp(_make_api(base_url), on_change=banner)
        try:
            await action(form)
        finally:
            await form.aclose()

    asyncio.run(main())
    if banner.failed:
        raise typer.Exit(code=1)


async def _share(form: SummarizerApp, recipients: List[str], subject: str) -> None:
    form.open_email_modal()
    form.set_subject(subject)
    for address in recipients:
        form.set_recipient_input(address)
        form.press_key("Enter")
        if form.state.recipient_input:
            # rejected address; the banner already says which one
            return
    await form.share()


@app.command()
def summarize(
    transcript: Path = typer.Argument(..., exists=True, readable=True, help="Path to a .txt transcript."),
    prompt: str = typer.Option(st.DEFAULT_PROMPT, "--prompt", "-p", help="Instruction for the summary."),
    edit: bool = typer.Option(False, "--edit/--no-edit", help="Open the summary in $EDITOR before saving."),
    to: Optional[List[str]] = typer.Option(None, "--to", help="Email the saved summary to this address."),
    subject: str = typer.Option(st.DEFAULT_SUBJECT, "--subject", help="Email subject."),
    api_url: str = typer.Option(settings.API_BASE_URL, "--api-url", help="Summarizer API base URL."),
) -> None:
    """Generate a summary for a transcript, save it and optionally email it."""

    async def action(form: SummarizerApp) -> None:
        form.load_file(transcript)
        form.set_prompt(prompt)
        await form.generate()
        if not form.state.has_summary:
            return

        if edit:
            edited = typer.edit(form.state.generated)
            if edited is not None:
                form.set_summary_text(edited.rstrip("\n"))

        await form.save()
        if form.state.phase != "saved":
            return

        typer.echo(form.state.generated)
        typer.secho(f"Summary id: {form.state.summary_id}", fg=typer.colors.BLUE)
        if to:
            await _share(form, to, subject)

    _run(api_url, action)


@app.command()
def show(
    summary_id: str = typer.Argument(..., help="Id printed by `summarize`."),
    api_url: str = typer.Option(settings.API_BASE_URL, "--api-url", help="Summarizer API base URL."),
) -> None:
    """Print the saved text of a summary."""

    async def action(form: SummarizerApp) -> None:
        await form.fetch(summary_id)
        if form.state.has_summary:
            typer.echo(form.state.generated)

    _run(api_url, action)


@app.command()
def share(
    summary_id: str = typer.Argument(..., help="Id printed by `summarize`."),
    to: List[str] = typer.Option(..., "--to", help="Recipient address; repeat for more."),
    subject: str = typer.Option(st.DEFAULT_SUBJECT, "--subject", help="Email subject."),
    api_url: str = typer.Option(settings.API_BASE_URL, "--api-url", help="Summarizer API base URL."),
) -> None:
    """Email a saved summary."""

    async def action(form: SummarizerApp) -> None:
        await form.fetch(summary_id)
        if form.state.has_summary:
            await _share(form, to, subject)

    _run(api_url, action)


if __name__ == "__main__":
    app()
