"""
FastAPI dependencies handing out the process-wide service handles.
"""

from fastapi import Request

from services.container import AppServices
from services.mailer import SmtpMailer
from services.summarizer import SummarizationService


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_summarizer(request: Request) -> SummarizationService:
    return get_services(request).summarizer


def get_mailer(request: Request) -> SmtpMailer:
    return get_services(request).mailer
