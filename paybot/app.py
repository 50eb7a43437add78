"""Assembling the bot from its parts and running it."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
from contextlib import closing

import requests

from paybot.export_service import ExportService
from paybot.handlers import PaymentHandler
from paybot.logger import init_logger
from paybot.payment_service import PaymentService
from paybot.payment_storage import PaymentStorage, open_database
from paybot.report_service import ReportService
from paybot.routes import Router
from paybot.state_machine import StateMachine
from paybot.state_storage import StateStorage
from paybot.telegram import TelegramBot

log = logging.getLogger(__name__)

DEFAULT_DB_PATH = "./payment_bot.db"


def build_application(db_path: str = DEFAULT_DB_PATH, token: str | None = None,
                      webhook_url: str | None = None) -> tuple[TelegramBot, sqlite3.Connection]:
    """Open and migrate the database; return the wired bot and its connection."""
    connection = open_database(db_path)
    storage = PaymentStorage(connection)
    try:
        storage.migrate()
    except sqlite3.Error:
        connection.close()
        raise
    state = StateStorage()
    payments = PaymentService(state, storage)
    reports = ReportService(state, storage)
    exports = ExportService(state, storage)
    handler = PaymentHandler(payments, reports, exports, StateMachine(payments, reports, exports))
    return Router(handler).init_router(token, webhook_url), connection


def main(argv: list[str] | None = None) -> int:
    """Run the bot and return the exit status."""
    parser = argparse.ArgumentParser(prog="paybot", description="Telegram bot that records payments.")
    parser.add_argument("--db", default=DEFAULT_DB_PATH, help="path of the SQLite database")
    args = parser.parse_args(argv)
    init_logger(os.environ.get("LOGLEVEL"))

    try:
        bot, connection = build_application(args.db)
    except sqlite3.Error:
        log.critical("Error connecting to or migrating the database", exc_info=True)
        return 1

    with closing(connection):
        log.info("The telegram bot is running")
        try:
            bot.start()
        except KeyboardInterrupt:
            log.info("The telegram bot is stopping")
        except (requests.RequestException, RuntimeError, OSError):
            log.critical("The telegram bot failed", exc_info=True)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())