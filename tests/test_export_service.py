from datetime import datetime, timezone

import pytest

from paybot.export_service import ExportService
from paybot.models import Payment, State
from paybot.payment_storage import PaymentStorage, open_database
from paybot.report_service import NoPaymentsError
from paybot.state_storage import StateNotFoundError, StateStorage


def utc(*parts):
    return datetime(*parts, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    store = PaymentStorage(open_database(":memory:"))
    store.migrate()
    return store


@pytest.fixture
def state():
    return StateStorage()


@pytest.fixture
def service(state, storage):
    return ExportService(state, storage)


def add(storage, user_id, category, amount, date):
    storage.save_payment(Payment(user_id=user_id, category=category, amount=amount, date=date))


def test_start_export_sets_state(service, state):
    service.start_export_payments(3)
    assert state.get_user_state(3) == State.AWAITING_EXPORT


def test_export_lists_payments_in_date_order(service, storage, state):
    add(storage, 1, "Транспорт", 30.0, utc(2025, 5, 10))
    add(storage, 1, "Еда", 12.5, utc(2025, 5, 3))
    add(storage, 1, "Прочее", 7.0, utc(2025, 5, 15, 23, 0))
    add(storage, 1, "Еда", 1.0, utc(2025, 5, 16))
    add(storage, 2, "Еда", 1.0, utc(2025, 5, 4))
    state.upload_user_state(1, State.AWAITING_EXPORT)

    text = service.export_payments(1, utc(2025, 5, 1), utc(2025, 5, 15))
    lines = text.splitlines()

    assert lines[0] == "Выгрузка платежей с 2025-05-01 по 2025-05-15:"
    assert lines[1] == ""
    assert [line[16:31].rstrip() for line in lines[2:]] == ["Еда", "Транспорт", "Прочее"]
    assert lines[2].startswith("03 May 2025")
    assert lines[2].endswith("12.50 ₽")
    with pytest.raises(StateNotFoundError):
        state.get_user_state(1)


def test_export_without_payments_raises_and_keeps_state(service, state):
    state.upload_user_state(1, State.AWAITING_EXPORT)
    with pytest.raises(NoPaymentsError, match="2025-05-01 - 2025-05-15"):
        service.export_payments(1, utc(2025, 5, 1), utc(2025, 5, 15))
    assert state.get_user_state(1) == State.AWAITING_EXPORT


def test_export_ignores_time_of_day_in_bounds(service, storage):
    add(storage, 1, "Еда", 5.0, utc(2025, 5, 1, 0, 0))
    text = service.export_payments(1, utc(2025, 5, 1, 18, 0), utc(2025, 5, 1, 1, 0))
    assert len(text.splitlines()) == 3