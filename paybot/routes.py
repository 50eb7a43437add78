"""Wiring of bot commands and callbacks to the payment handlers."""

from __future__ import annotations

import logging
import os
from typing import Any

from paybot.payment_service import CATEGORY_PREFIX
from paybot.telegram import ON_CALLBACK, ON_TEXT, TelegramBot

log = logging.getLogger(__name__)


class Router:
    """Builds a bot with every command and callback routed to the handlers."""

    def __init__(self, handlers: Any) -> None:
        self.handlers = handlers

    def init_router(self, token: str | None = None, webhook_url: str | None = None) -> TelegramBot:
        """Create the bot; missing settings are read from the environment."""
        token = os.environ.get("TELEGRAM_TOKEN", "") if token is None else token
        webhook_url = os.environ.get("WEBHOOK_URL", "") if webhook_url is None else webhook_url
        if not token:
            log.error("token not identified")
        if not webhook_url:
            log.error("webhook url not identified")

        bot = TelegramBot(token, webhook_url, listen=":8080", max_connections=100)
        h = self.handlers
        bot.handle("/start", h.handle_start)
        bot.handle("/add_payment", h.handle_add_payment)
        bot.handle("/report", h.handle_report)
        bot.handle("/export", h.handle_export)
        bot.handle(ON_TEXT, h.handle_text_input)
        bot.handle(ON_CALLBACK, self.dispatch_callback)
        return bot

    def dispatch_callback(self, ctx: Any) -> Any:
        """Send a button press to the category or report handler."""
        data = ctx.callback_data
        if data.startswith(CATEGORY_PREFIX):
            return self.handlers.handle_category_selection(ctx)
        if data.startswith("report"):
            return self.handlers.handle_report_selection(ctx)
        return None