"""Answers free-text messages according to the user's dialogue state."""

from __future__ import annotations

import logging
import re
import sqlite3
from datetime import datetime, timezone
from typing import Callable

from paybot.export_service import ExportService
from paybot.models import State
from paybot.parser import ReportDateError, parse_custom_report_dates
from paybot.payment_service import PaymentService
from paybot.report_service import ReportService

log = logging.getLogger(__name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_MONTHS = "Jan Feb Mar Apr May Jun Jul Aug Sep Oct Nov Dec".split()
_FAILURES = (LookupError, ValueError, sqlite3.Error)


class StateMachine:
    """Answers a user's text message based on their dialogue state."""

    def __init__(self, payment_service: PaymentService, report_service: ReportService,
                 export_service: ExportService, clock: Callable[[], datetime] | None = None) -> None:
        self._payments = payment_service
        self._reports = report_service
        self._exports = export_service
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, user_id: int, text: str) -> str:
        """Process ``text`` for the user and return the reply."""
        try:
            state = self._payments.get_user_state(user_id)
        except _FAILURES:
            return "Ошибка при обработке запроса"

        if state is State.AWAITING_CATEGORY:
            try:
                self._payments.process_category_input(user_id, text)
            except _FAILURES:
                return "Ошибка при сохранении категории"
            return "Введи сумму:"
        if state is State.AWAITING_AMOUNT:
            try:
                if "_" in text:
                    raise ValueError(text)
                amount = float(text)
            except ValueError:
                return "Неверная сумма."
            try:
                self._payments.process_amount_input(user_id, amount)
            except _FAILURES:
                return "Ошибка при сохранении суммы"
            return "Укажи дату (ГГГГ-ММ-ДД) или 'сегодня':"
        if state is State.AWAITING_DATE:
            return self._on_date(user_id, text)
        if state is State.AWAITING_CUSTOM_REPORT:
            return self._on_period(text, lambda a, b: self._reports.generate_category_report(user_id, a, b),
                                   "Ошибка при генерации отчёта")
        if state is State.AWAITING_EXPORT:
            return self._on_period(text, lambda a, b: self._exports.export_payments(user_id, a, b),
                                   "Ошибка при выгрузке платежей")
        return ""

    def _on_date(self, user_id: int, text: str) -> str:
        if text.lower() == "сегодня":
            moment = self._clock()
        elif _DATE_RE.fullmatch(text):
            try:
                moment = datetime.strptime(text, "%Y-%m-%d").replace(tzinfo=timezone.utc)
            except ValueError:
                return "Неверная дата."
        else:
            return "Неверная дата."
        try:
            payment = self._payments.process_date_input(user_id, moment)
        except _FAILURES:
            log.exception("Failed to save payment")
            return "Не удалось записать дать"
        day = payment.date
        return (f"✅ Добавлен платёж: {payment.category}, {payment.amount:.2f} ₽, "
                f"{day.day:02d} {_MONTHS[day.month - 1]} {day.year:04d}")

    @staticmethod
    def _on_period(text: str, build: Callable[[datetime, datetime], str], failure: str) -> str:
        try:
            start, end = parse_custom_report_dates(text)
        except ReportDateError as err:
            return str(err)
        try:
            return build(start, end)
        except _FAILURES:
            return failure