"""In-memory, thread-safe store of each user's dialogue state and draft payment."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable

from paybot.models import Payment, State

log = logging.getLogger(__name__)

PaymentUpdate = Callable[[Payment], None]


class StateNotFoundError(LookupError):
    """No state or draft payment is stored for the user."""


class StateStorage:
    """Keeps per-user states and draft payments in memory."""

    def __init__(self) -> None:
        self.user_states: dict[int, State] = {}
        self.user_context: dict[int, Payment] = {}
        self._lock = threading.RLock()

    def get_user_state(self, user_id: int) -> State:
        with self._lock:
            try:
                return self.user_states[user_id]
            except KeyError:
                log.error("user %d state not found", user_id)
                raise StateNotFoundError(f"user {user_id} state not found") from None

    def upload_user_state(self, user_id: int, state: State | str) -> None:
        """Set the user's state; raises ValueError for an unknown state."""
        try:
            value = State(state)
        except ValueError:
            log.error("user %d, state %r not set", user_id, state)
            raise ValueError(f"user {user_id}, state {state} not set") from None
        with self._lock:
            self.user_states[user_id] = value

    def delete_user_state(self, user_id: int) -> None:
        with self._lock:
            self.user_states.pop(user_id, None)

    def get_user_context(self, user_id: int) -> Payment:
        """Return a copy of the user's draft payment."""
        with self._lock:
            try:
                payment = self.user_context[user_id]
            except KeyError:
                log.error("user %d state not found", user_id)
                raise StateNotFoundError(f"user {user_id} state not found") from None
            return dataclasses.replace(payment)

    def init_user_context(self, user_id: int, update: PaymentUpdate) -> None:
        """Start a fresh draft payment for the user and apply ``update`` to it."""
        with self._lock:
            payment = Payment()
            self.user_context[user_id] = payment
            update(payment)

    def upload_user_context(self, user_id: int, update: PaymentUpdate) -> None:
        """Apply ``update`` to the user's existing draft payment."""
        with self._lock:
            try:
                payment = self.user_context[user_id]
            except KeyError:
                log.error("payment for user %d not found", user_id)
                raise StateNotFoundError(f"payment for user {user_id} not found") from None
            update(payment)

    def delete_user_context(self, user_id: int) -> None:
        with self._lock:
            self.user_context.pop(user_id, None)