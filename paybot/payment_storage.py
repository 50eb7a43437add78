"""SQLite persistence of payments and per-category totals."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone

from paybot.models import CategoryReport, Payment

log = logging.getLogger(__name__)

TOTAL_CATEGORY = "Всего"

_SCHEMA = """CREATE TABLE IF NOT EXISTS payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    date DATETIME NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP)"""

_PERIOD = "FROM payments WHERE user_id = ? AND date >= ? AND date <= ?"
_CATEGORY_QUERY = (
    f"SELECT CAST(category AS TEXT), IFNULL(SUM(amount), 0) {_PERIOD} GROUP BY category "
    f"UNION ALL SELECT ?, IFNULL(SUM(amount), 0) {_PERIOD}"
)


def _to_db(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S+00:00")


def open_database(path: str) -> sqlite3.Connection:
    """Open (creating if needed) the SQLite database at ``path``."""
    return sqlite3.connect(path, check_same_thread=False)


class PaymentStorage:
    """Stores payments in SQLite; naive datetimes are taken as UTC."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection
        self._lock = threading.Lock()

    def migrate(self) -> None:
        """Create the payments table if it does not exist."""
        with self._lock, self._conn:
            self._conn.execute(_SCHEMA)

    def save_payment(self, payment: Payment) -> int:
        """Insert the payment and return its row id."""
        if payment.date is None:
            raise ValueError("payment has no date")
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "INSERT INTO payments(user_id, amount, category, date) VALUES (?, ?, ?, ?)",
                (payment.user_id, payment.amount, payment.category, _to_db(payment.date)),
            )
        return int(cursor.lastrowid)

    def get_payments_by_period(self, user_id: int, start: datetime, end: datetime) -> list[Payment]:
        """Return the user's payments dated within [start, end], oldest first."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT id, user_id, amount, category, date {_PERIOD} ORDER BY date ASC",
                (user_id, _to_db(start), _to_db(end)),
            ).fetchall()
        return [
            Payment(id=pid, user_id=uid, amount=float(amount), category=category,
                    date=datetime.strptime(text, "%Y-%m-%d %H:%M:%S%z"))
            for pid, uid, amount, category, text in rows
        ]

    def get_count_by_category(self, user_id: int, start: datetime, end: datetime) -> list[CategoryReport]:
        """Return per-category totals followed by an overall total row."""
        low, high = _to_db(start), _to_db(end)
        try:
            with self._lock:
                rows = self._conn.execute(
                    _CATEGORY_QUERY, (user_id, low, high, TOTAL_CATEGORY, user_id, low, high)
                ).fetchall()
        except sqlite3.Error:
            log.exception("Error executing query")
            raise
        return [CategoryReport(str(name), float(total)) for name, total in rows]