"""Handlers for the bot's commands, button presses and free text."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable

from paybot.export_service import ExportService
from paybot.payment_service import CATEGORY_PREFIX, PaymentService
from paybot.report_service import ReportService
from paybot.state_machine import StateMachine

GREETING = "Привет! Используй /add_payment, /report или /export."
PERIOD_PROMPT = "Введи период в формате ГГГГ-ММ-ДД - ГГГГ-ММ-ДД"
REPORT_ERROR = "Ошибка при генерации отчета."

_FAILURES = (LookupError, ValueError, sqlite3.Error)


class PaymentHandler:
    """Turns incoming updates into calls on the services and replies."""

    def __init__(
        self,
        payment_service: PaymentService,
        report_service: ReportService,
        export_service: ExportService,
        state_machine: StateMachine,
    ) -> None:
        self._payments = payment_service
        self._reports = report_service
        self._exports = export_service
        self._machine = state_machine

    def handle_start(self, ctx: Any) -> None:
        ctx.send(GREETING)

    def handle_add_payment(self, ctx: Any) -> None:
        try:
            self._payments.start_payment_creation(ctx.sender_id)
        except _FAILURES:
            ctx.send("Ошибка при создании платежа")
            return
        ctx.send("Выбери категорию:", self._payments.get_markups())

    def handle_category_selection(self, ctx: Any) -> None:
        category = ctx.callback_data.removeprefix(CATEGORY_PREFIX)
        try:
            self._payments.process_category_input(ctx.sender_id, category)
        except _FAILURES:
            ctx.respond("Ошибка записи категории")
            return
        ctx.respond()
        ctx.send("Введи сумму:")

    def handle_report_selection(self, ctx: Any) -> None:
        payload = ctx.callback_data.removeprefix(CATEGORY_PREFIX)
        if payload == "report_today":
            self._send_report(ctx, self._reports.generate_category_report_today)
        elif payload == "report_month":
            self._send_report(ctx, self._reports.generate_category_report_month)
        elif payload == "report_custom":
            try:
                self._reports.start_custom_report_creation(ctx.sender_id)
            except _FAILURES:
                ctx.send("Ошибка при создании отчета")
                return
            ctx.send(PERIOD_PROMPT)

    @staticmethod
    def _send_report(ctx: Any, build: Callable[[int], str]) -> None:
        try:
            report = build(ctx.sender_id)
        except _FAILURES:
            ctx.send(REPORT_ERROR)
            return
        ctx.send(report)

    def handle_report(self, ctx: Any) -> None:
        ctx.send("Выберите период отчета:", self._reports.get_markups_report())

    def handle_export(self, ctx: Any) -> None:
        try:
            self._exports.start_export_payments(ctx.sender_id)
        except _FAILURES as err:
            ctx.send(str(err))
            return
        ctx.send(PERIOD_PROMPT)

    def handle_text_input(self, ctx: Any) -> None:
        ctx.send(self._machine.handle(ctx.sender_id, ctx.text.strip()))