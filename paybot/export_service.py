"""Listing a user's individual payments for a period."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from paybot.models import State
from paybot.payment_storage import PaymentStorage
from paybot.report_service import NoPaymentsError
from paybot.state_storage import StateStorage

log = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _format_day(moment: datetime) -> str:
    return f"{moment.day:02d} {_MONTHS[moment.month - 1]} {moment.year:04d}"


class ExportService:
    """Exports payments of a chosen period as text."""

    def __init__(self, state: StateStorage, storage: PaymentStorage) -> None:
        self._state = state
        self._storage = storage

    def start_export_payments(self, user_id: int) -> None:
        try:
            self._state.upload_user_state(user_id, State.AWAITING_EXPORT)
        except ValueError:
            log.exception("Error uploading user state")
            raise

    def export_payments(self, user_id: int, start: datetime, end: datetime) -> str:
        """List whole days from ``start`` through ``end`` and end the dialogue."""
        start = datetime(start.year, start.month, start.day, tzinfo=timezone.utc)
        end = datetime(end.year, end.month, end.day, 23, 59, 59, tzinfo=timezone.utc)

        try:
            records = self._storage.get_payments_by_period(user_id, start, end)
        except Exception:
            log.exception("Error getting payments by period")
            raise

        start_text = start.strftime("%Y-%m-%d")
        end_text = end.strftime("%Y-%m-%d")
        if not records:
            log.error("No payments found by period: %s - %s", start_text, end_text)
            raise NoPaymentsError(f"Нет платежей за период: {start_text} - {end_text}")

        lines = [f"Выгрузка платежей с {start_text} по {end_text}:\n\n"]
        lines.extend(
            f"{_format_day(r.date):<15} {r.category:<15} {r.amount:.2f} ₽\n" for r in records
        )
        self._state.delete_user_state(user_id)
        return "".join(lines)