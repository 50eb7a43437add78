"""Parsing of user-typed date ranges."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

log = logging.getLogger(__name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

FORMAT_MESSAGE = "Некорректный формат дат, ожидается ГГГГ-ММ-ДД - ГГГГ-ММ-ДД"


class ReportDateError(ValueError):
    """The text does not hold a valid date range."""


def _parse_date(text: str) -> datetime:
    if not _DATE_RE.fullmatch(text):
        raise ValueError(text)
    return datetime.strptime(text, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def parse_custom_report_dates(text: str) -> tuple[datetime, datetime]:
    """Parse ``YYYY-MM-DD - YYYY-MM-DD`` into two UTC midnights."""
    parts = text.split("-")
    if len(parts) != 6:
        log.error(FORMAT_MESSAGE)
        log.debug("INPUT: %r, parts: %d", text, len(parts))
        raise ReportDateError(FORMAT_MESSAGE)

    start_text = "-".join(parts[:3]).strip()
    end_text = "-".join(parts[3:]).strip()

    try:
        start = _parse_date(start_text)
    except ValueError:
        raise ReportDateError("не удалось распарсить дату начала") from None
    try:
        end = _parse_date(end_text)
    except ValueError:
        raise ReportDateError("не удалось распарсить дату конца") from None
    return start, end