"""A small Telegram Bot API client receiving updates through a webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from socketserver import ThreadingMixIn
from typing import Any, Callable
from wsgiref.simple_server import WSGIServer, make_server

import requests

from paybot.models import ReplyMarkup

log = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"
ON_TEXT = "\atext"
ON_CALLBACK = "\acallback"

Handler = Callable[["UpdateContext"], Any]


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


@dataclass
class UpdateContext:
    """One incoming update together with the bot that received it."""

    bot: TelegramBot
    update: dict

    @property
    def message(self) -> dict:
        return self.update.get("message") or {}

    @property
    def callback(self) -> dict | None:
        return self.update.get("callback_query")

    @property
    def sender_id(self) -> int:
        return int(((self.callback or self.message).get("from") or {}).get("id", 0))

    @property
    def chat_id(self) -> int:
        message = self.callback.get("message") if self.callback else self.message
        chat = (message or {}).get("chat") or {}
        return int(chat["id"]) if "id" in chat else self.sender_id

    @property
    def text(self) -> str:
        return self.message.get("text") or ""

    @property
    def callback_data(self) -> str:
        return (self.callback or {}).get("data") or ""

    def send(self, text: str, markup: ReplyMarkup | None = None) -> Any:
        """Send a message to the chat the update came from."""
        return self.bot.send_message(self.chat_id, text, markup)

    def respond(self, text: str | None = None) -> Any:
        """Answer the update's callback query."""
        if self.callback is None:
            raise ValueError("update has no callback to respond to")
        return self.bot.answer_callback(self.callback["id"], text)


class TelegramBot:
    """Dispatches webhook updates to handlers and talks to the Bot API."""

    def __init__(self, token: str | None, webhook_url: str | None = "", listen: str = ":8080",
                 max_connections: int = 100, api_url: str = API_URL, session: Any = None,
                 timeout: float = 10.0) -> None:
        self.token = token or ""
        self.webhook_url = webhook_url or ""
        self.listen = listen
        self.max_connections = max_connections
        self.api_url = api_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._handlers: dict[str, Handler] = {}

    def handle(self, endpoint: str, handler: Handler) -> None:
        """Register ``handler`` for a command, ``ON_TEXT`` or ``ON_CALLBACK``."""
        self._handlers[endpoint] = handler

    def _call(self, method: str, params: dict) -> Any:
        response = self.session.post(f"{self.api_url}/bot{self.token}/{method}",
                                     json=params, timeout=self.timeout)
        try:
            payload = response.json()
        except ValueError:
            raise RuntimeError(f"telegram: invalid response to {method}") from None
        if not payload.get("ok"):
            raise RuntimeError(f"telegram: {payload.get('description', 'request failed')} "
                               f"({payload.get('error_code', '?')})")
        return payload.get("result")

    def _route(self, update: dict) -> Handler | None:
        if "callback_query" in update:
            return self._handlers.get(ON_CALLBACK)
        text = (update.get("message") or {}).get("text")
        if not text:
            return None
        if text.startswith("/"):
            command = text.split(maxsplit=1)[0].split("@", 1)[0]
            if command in self._handlers:
                return self._handlers[command]
        return self._handlers.get(ON_TEXT)

    def process_update(self, update: dict) -> bool:
        """Run the handler for ``update``; return whether one was found."""
        handler = self._route(update)
        if handler is None:
            return False
        try:
            handler(UpdateContext(self, update))
        except Exception:
            log.exception("handler failed for update %s", update.get("update_id"))
        return True

    def send_message(self, chat_id: int, text: str, markup: ReplyMarkup | None = None) -> Any:
        params: dict = {"chat_id": chat_id, "text": text}
        if markup is not None:
            params["reply_markup"] = markup.to_dict()
        return self._call("sendMessage", params)

    def answer_callback(self, callback_id: str, text: str | None = None) -> Any:
        params: dict = {"callback_query_id": callback_id}
        if text is not None:
            params["text"] = text
        return self._call("answerCallbackQuery", params)

    def wsgi_app(self, environ: dict, start_response: Callable) -> list[bytes]:
        """WSGI entry point receiving webhook updates."""
        headers = [("Content-Type", "text/plain"), ("Content-Length", "0")]
        if environ.get("REQUEST_METHOD", "GET").upper() != "POST":
            start_response("405 Method Not Allowed", headers + [("Allow", "POST")])
            return [b""]
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        body = environ["wsgi.input"].read(length) if length > 0 else b""
        try:
            update = json.loads(body)
        except ValueError:
            update = None
        if not isinstance(update, dict):
            start_response("400 Bad Request", headers)
            return [b""]
        self.process_update(update)
        start_response("200 OK", headers)
        return [b""]

    def start(self) -> None:
        """Register the webhook and serve updates until interrupted."""
        self._call("setWebhook", {"url": self.webhook_url, "max_connections": self.max_connections})
        host, _, port = self.listen.rpartition(":")
        with make_server(host, int(port), self.wsgi_app, server_class=_ThreadingWSGIServer) as server:
            server.serve_forever()