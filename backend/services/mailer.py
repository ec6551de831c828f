"""
Outbound email over an SMTP relay.
"""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi.concurrency import run_in_threadpool
from loguru import logger

from core.errors import InvalidRequest, UpstreamFailure

Recipients = Union[str, Iterable[str], None]


def normalize_recipients(to: Recipients) -> List[str]:
    """Accept "a@x.com, b@y.com" or a list; keep order, drop blanks and repeats."""
    if to is None:
        return []
    if isinstance(to, str):
        candidates = to.split(",")
    else:
        candidates = [part for item in to for part in str(item).split(",")]

    result: List[str] = []
    for candidate in candidates:
        address = candidate.strip()
        if address and address not in result:
            result.append(address)
    return result


class SmtpMailer:
    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_address: Optional[str] = None,
        default_subject: str = "Shared summary",
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_address = from_address or user
        self.default_subject = default_subject
        self.timeout = timeout

    @property
    def use_ssl(self) -> bool:
        return self.port == 465

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)

        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls()
                server.ehlo()
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def _build_message(self, recipients: List[str], subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_address or ""
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage, recipients: List[str]) -> Dict[str, Any]:
        server = self._connect()
        try:
            if self.user and self.password:
                server.login(self.user, self.password)
            refused = server.send_message(message, from_addr=self.from_address, to_addrs=recipients)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                server.close()

        rejected = sorted(refused)
        return {
            "messageId": message["Message-ID"],
            "accepted": [address for address in recipients if address not in refused],
            "rejected": rejected,
            "envelope": {"from": self.from_address, "to": recipients},
        }

    async def send(self, to: Recipients, subject: Optional[str], body: Optional[str]) -> Dict[str, Any]:
        recipients = normalize_recipients(to)
        if not recipients or not body:
            raise InvalidRequest("to and body required")
        if subject and ("\r" in subject or "\n" in subject):
            raise InvalidRequest("subject must be a single line")
        if not self.host:
            raise UpstreamFailure("SMTP_HOST is not configured")

        message = self._build_message(recipients, subject or self.default_subject, body)
        logger.info("Sending email to {} recipient(s) via {}:{}", len(recipients), self.host, self.port)
        try:
            info = await run_in_threadpool(self._deliver, message, recipients)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("SMTP delivery failed: {}", exc)
            raise UpstreamFailure(f"email delivery failed: {exc}") from exc

        logger.info("Email {} accepted for {}", info["messageId"], info["accepted"])
        return info
