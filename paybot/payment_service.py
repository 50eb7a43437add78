"""Step-by-step creation of a payment through the dialogue with a user."""

from __future__ import annotations

import logging
from datetime import datetime

from paybot.models import InlineButton, Payment, ReplyMarkup, State
from paybot.payment_storage import PaymentStorage
from paybot.state_storage import StateStorage

log = logging.getLogger(__name__)

CATEGORIES = ("Еда", "Транспорт", "Развлечения", "Прочее")
CATEGORY_PREFIX = "category:"


class PaymentService:
    """Collects a payment's category, amount and date, then stores it."""

    def __init__(self, state: StateStorage, storage: PaymentStorage) -> None:
        self._state = state
        self._storage = storage

    def start_payment_creation(self, user_id: int) -> None:
        """Begin a new draft payment and wait for its category."""
        try:
            self._state.upload_user_state(user_id, State.AWAITING_CATEGORY)
        except ValueError:
            log.exception("Error uploading user state")
            raise

        def assign_user(payment: Payment) -> None:
            payment.user_id = user_id

        self._state.init_user_context(user_id, assign_user)

    def get_markups(self) -> ReplyMarkup:
        """Return a keyboard with one button per category, one per row."""
        return ReplyMarkup(
            inline_keyboard=[
                [InlineButton(text=name, data=CATEGORY_PREFIX + name)]
                for name in CATEGORIES
            ]
        )

    def get_user_state(self, user_id: int) -> State:
        return self._state.get_user_state(user_id)

    def get_payment(self, user_id: int) -> Payment:
        return self._state.get_user_context(user_id)

    def process_category_input(self, user_id: int, category: str) -> None:
        self._state.upload_user_state(user_id, State.AWAITING_AMOUNT)

        def set_category(payment: Payment) -> None:
            payment.category = category

        self._state.upload_user_context(user_id, set_category)

    def process_amount_input(self, user_id: int, amount: float) -> None:
        self._state.upload_user_state(user_id, State.AWAITING_DATE)

        def set_amount(payment: Payment) -> None:
            payment.amount = amount

        self._state.upload_user_context(user_id, set_amount)

    def process_date_input(self, user_id: int, date: datetime) -> Payment:
        """Set the date, store the finished payment and clear the dialogue."""

        def set_date(payment: Payment) -> None:
            payment.date = date

        self._state.upload_user_context(user_id, set_date)
        payment = self._state.get_user_context(user_id)
        payment.id = self._storage.save_payment(payment)
        self._state.delete_user_context(user_id)
        self._state.delete_user_state(user_id)
        return payment