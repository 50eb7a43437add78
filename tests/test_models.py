from paybot.models import CategoryReport, InlineButton, Payment, ReplyMarkup, State


def test_state_values_match_wire_names():
    assert State.IDLE.value == "idle"
    assert State.AWAITING_EXPORT.value == "awaiting_export"
    assert State("awaiting_amount") is State.AWAITING_AMOUNT


def test_state_compares_equal_to_its_string():
    state = State("awaiting_category")
    assert state == "awaiting_category"
    assert state is State.AWAITING_CATEGORY


def test_payment_defaults_are_empty():
    payment = Payment()
    assert payment.id == 0
    assert payment.user_id == 0
    assert payment.category == ""
    assert payment.amount == 0.0
    assert payment.date is None


def test_category_report_equality():
    assert CategoryReport("Еда", 1.5) == CategoryReport("Еда", 1.5)
    assert CategoryReport("Еда", 1.5) != CategoryReport("Прочее", 1.5)


def test_reply_markup_to_dict_uses_callback_data():
    markup = ReplyMarkup(
        inline_keyboard=[
            [InlineButton(text="Еда", data="category:Еда")],
            [InlineButton(text="За месяц", data="report_month")],
        ]
    )
    assert markup.to_dict() == {
        "inline_keyboard": [
            [{"text": "Еда", "callback_data": "category:Еда"}],
            [{"text": "За месяц", "callback_data": "report_month"}],
        ]
    }


def test_empty_reply_markup():
    assert ReplyMarkup().to_dict() == {"inline_keyboard": []}