"""Payments, category totals, dialogue states and inline keyboards."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass
class Payment:
    id: int = 0
    user_id: int = 0
    category: str = ""
    amount: float = 0.0
    date: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class CategoryReport:
    category: str
    amount: float


class State(str, Enum):
    IDLE = "idle"
    AWAITING_CATEGORY = "awaiting_category"
    AWAITING_AMOUNT = "awaiting_amount"
    AWAITING_DATE = "awaiting_date"
    AWAITING_CUSTOM_REPORT = "awaiting_custom_report"
    AWAITING_EXPORT = "awaiting_export"


@dataclass(frozen=True)
class InlineButton:
    text: str
    data: str

    def to_dict(self) -> dict:
        return {"text": self.text, "callback_data": self.data}


@dataclass
class ReplyMarkup:
    inline_keyboard: list[list[InlineButton]] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return the keyboard as the Bot API expects it."""
        return {"inline_keyboard": [[b.to_dict() for b in row] for row in self.inline_keyboard]}