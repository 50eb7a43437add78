"""Per-category spending reports."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from paybot.models import CategoryReport, InlineButton, ReplyMarkup, State
from paybot.payment_storage import PaymentStorage
from paybot.state_storage import StateStorage

log = logging.getLogger(__name__)


class NoPaymentsError(LookupError):
    """No payments were found for the requested period."""


def _day_start(moment: datetime, hour: int = 0) -> datetime:
    return datetime(moment.year, moment.month, moment.day, hour, tzinfo=timezone.utc)


def _day_end(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, moment.day, 23, 59, 59, tzinfo=timezone.utc)


def _render(records: Iterable[CategoryReport], start_text: str, end_text: str) -> str:
    lines = [f"Отчёт по категориям с {start_text} по {end_text}:\n\n"]
    lines.extend(f"{r.category:<15} {r.amount:.2f} ₽\n" for r in records)
    return "".join(lines)


class ReportService:
    """Builds category reports for today, this month or a chosen period."""

    def __init__(self, state: StateStorage, storage: PaymentStorage) -> None:
        self._state = state
        self._storage = storage

    def get_markups_report(self) -> ReplyMarkup:
        """Return the keyboard for choosing a report period."""
        return ReplyMarkup(
            inline_keyboard=[
                [InlineButton(text="За сегодня", data="report_today")],
                [InlineButton(text="За месяц", data="report_month")],
                [InlineButton(text="Выбрать даты", data="report_custom")],
            ]
        )

    def start_custom_report_creation(self, user_id: int) -> None:
        try:
            self._state.upload_user_state(user_id, State.AWAITING_CUSTOM_REPORT)
        except ValueError:
            log.exception("Error uploading user state")
            raise

    def _report(self, user_id: int, start: datetime, end: datetime) -> str:
        records = self._storage.get_count_by_category(user_id, start, end)
        start_text = start.strftime("%Y-%m-%d")
        end_text = end.strftime("%Y-%m-%d")
        if not records:
            raise NoPaymentsError(f"no payments found by period: {start_text} - {end_text}")
        return _render(records, start_text, end_text)

    def generate_category_report_today(
        self, user_id: int, now: datetime | None = None
    ) -> str:
        """Report today's spending, counted from 01:00 UTC."""
        now = now or datetime.now()
        return self._report(user_id, _day_start(now, hour=1), _day_end(now))

    def generate_category_report_month(
        self, user_id: int, now: datetime | None = None
    ) -> str:
        """Report spending from the first of the month through today."""
        now = now or datetime.now()
        start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
        end = _day_end(now)
        log.debug("from: %s, to: %s", start, end)
        return self._report(user_id, start, end)

    def generate_category_report(self, user_id: int, start: datetime, end: datetime) -> str:
        """Report whole days from ``start`` through ``end`` and end the dialogue."""
        report = self._report(user_id, _day_start(start), _day_end(end))
        self._state.delete_user_state(user_id)
        return report