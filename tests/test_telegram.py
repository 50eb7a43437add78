import io
import json

import pytest

from paybot.models import InlineButton, ReplyMarkup
from paybot.telegram import ON_CALLBACK, ON_TEXT, TelegramBot


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, payload=None):
        self.payload = payload if payload is not None else {"ok": True, "result": True}
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json))
        return FakeResponse(self.payload)


def make_bot(payload=None):
    session = FakeSession(payload)
    return TelegramBot("token", "https://example.com/hook", session=session), session


def message_update(text, user_id=42, chat_id=42):
    return {
        "update_id": 1,
        "message": {
            "message_id": 1,
            "from": {"id": user_id},
            "chat": {"id": chat_id},
            "text": text,
        },
    }


def callback_update(data, user_id=42):
    return {
        "update_id": 2,
        "callback_query": {
            "id": "cb-1",
            "from": {"id": user_id},
            "message": {"message_id": 5, "chat": {"id": user_id}},
            "data": data,
        },
    }


def test_send_message_posts_markup():
    bot, session = make_bot()
    markup = ReplyMarkup([[InlineButton("A", "a")]])
    bot.send_message(42, "hi", markup)
    url, payload = session.calls[0]
    assert url.endswith("/bottoken/sendMessage")
    assert payload == {
        "chat_id": 42,
        "text": "hi",
        "reply_markup": {"inline_keyboard": [[{"text": "A", "callback_data": "a"}]]},
    }


def test_send_message_without_markup():
    bot, session = make_bot()
    bot.send_message(7, "plain")
    assert session.calls[0][1] == {"chat_id": 7, "text": "plain"}


def test_answer_callback_with_and_without_text():
    bot, session = make_bot()
    bot.answer_callback("cb-9")
    bot.answer_callback("cb-9", "notice")
    assert session.calls[0][0].endswith("/answerCallbackQuery")
    assert session.calls[0][1] == {"callback_query_id": "cb-9"}
    assert session.calls[1][1] == {"callback_query_id": "cb-9", "text": "notice"}


def test_api_error_raises():
    bot, _ = make_bot({"ok": False, "description": "Bad Request: empty", "error_code": 400})
    with pytest.raises(RuntimeError, match="Bad Request: empty"):
        bot.send_message(1, "")


def test_command_routed_to_handler():
    bot, _ = make_bot()
    received = []
    bot.handle("/start", received.append)
    assert bot.process_update(message_update("/start", user_id=5)) is True
    assert received[0].text == "/start"
    assert received[0].sender_id == 5


def test_command_with_bot_name_and_arguments():
    bot, _ = make_bot()
    received = []
    bot.handle("/start", received.append)
    bot.process_update(message_update("/start@some_bot now"))
    assert [ctx.text for ctx in received] == ["/start@some_bot now"]


def test_unregistered_command_falls_back_to_text():
    bot, _ = make_bot()
    texts = []
    bot.handle(ON_TEXT, lambda ctx: texts.append(ctx.text))
    bot.process_update(message_update("/unknown"))
    bot.process_update(message_update("hello"))
    assert texts == ["/unknown", "hello"]


def test_callback_routed():
    bot, _ = make_bot()
    received = []
    bot.handle(ON_CALLBACK, received.append)
    assert bot.process_update(callback_update("report_today", user_id=9)) is True
    assert received[0].callback_data == "report_today"
    assert received[0].chat_id == 9
    assert received[0].sender_id == 9


def test_update_without_handler():
    bot, _ = make_bot()
    assert bot.process_update(message_update("hello")) is False
    assert bot.process_update({"update_id": 3}) is False


def test_handler_error_is_swallowed():
    bot, _ = make_bot()

    def boom(ctx):
        raise RuntimeError("boom")

    bot.handle(ON_TEXT, boom)
    assert bot.process_update(message_update("hello")) is True


def test_context_send_uses_chat_id():
    bot, session = make_bot()
    bot.handle(ON_TEXT, lambda ctx: ctx.send("pong"))
    bot.process_update(message_update("ping", user_id=1, chat_id=99))
    assert session.calls[0][1] == {"chat_id": 99, "text": "pong"}


def test_respond_without_callback_raises():
    bot, session = make_bot()
    errors = []

    def handler(ctx):
        try:
            ctx.respond()
        except ValueError as exc:
            errors.append(exc)

    bot.handle(ON_TEXT, handler)
    assert bot.process_update(message_update("x")) is True
    assert len(errors) == 1
    assert isinstance(errors[0], ValueError)
    assert session.calls == []


def test_respond_answers_callback():
    bot, session = make_bot()
    bot.handle(ON_CALLBACK, lambda ctx: ctx.respond())
    bot.process_update(callback_update("category:Еда"))
    assert session.calls[0][1] == {"callback_query_id": "cb-1"}


def _environ(body, method="POST"):
    return {
        "REQUEST_METHOD": method,
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": io.BytesIO(body),
    }


def test_wsgi_post_processes_update():
    bot, _ = make_bot()
    received = []
    bot.handle(ON_TEXT, received.append)
    statuses = []
    body = json.dumps(message_update("hello")).encode()
    result = b"".join(bot.wsgi_app(_environ(body), lambda s, h: statuses.append(s)))
    assert statuses == ["200 OK"]
    assert result == b""
    assert [ctx.text for ctx in received] == ["hello"]


def test_wsgi_rejects_get():
    bot, _ = make_bot()
    received = []
    bot.handle(ON_TEXT, received.append)
    statuses = []
    bot.wsgi_app(_environ(b"", method="GET"), lambda s, h: statuses.append(s))
    assert statuses == ["405 Method Not Allowed"]
    assert received == []


def test_wsgi_rejects_bad_json():
    bot, _ = make_bot()
    statuses = []
    bot.wsgi_app(_environ(b"{not json"), lambda s, h: statuses.append(s))
    assert statuses == ["400 Bad Request"]