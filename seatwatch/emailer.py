"""Delivers the seat/fare dashboard by e-mail using yagmail.

Kept out of the pipeline so tests can swap the SMTP client.
"""
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable

import yagmail

from .config import settings
from .models import SearchRequest


def report_subject(request: SearchRequest, day: date) -> str:
    return (f"Seat Watch {request.origin} → {request.destination} "
            f"({request.departure_date.isoformat()} / {request.return_date.isoformat()}), report of {day.isoformat()}")


def send_email(subject: str, html_body: str, attachments: Iterable[Path] = ()) -> bool:
    if not settings.email_configured():
        logging.warning("Email not sent: email credentials not fully configured.")
        return False
    files = [str(p) for p in attachments]
    yag = yagmail.SMTP(settings.src_mail, settings.src_pwd, port=587, smtp_starttls=True, smtp_ssl=False)
    yag.send(to=settings.dst_mail, subject=subject, contents=html_body, attachments=files or None)
    logging.info("Email sent to %s", settings.dst_mail)
    return True


def send_report(request: SearchRequest, html: str, report_path: Path | None = None,
                day: date | None = None) -> bool:
    """Mail the rendered dashboard for `request`, attaching the written HTML file when there is one."""
    day = day or datetime.now(timezone.utc).date()
    attachments = [report_path] if report_path is not None and report_path.exists() else []
    return send_email(report_subject(request, day), html, attachments)
