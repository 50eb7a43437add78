"""WSGI middleware logging each request with its body, status and duration."""

from __future__ import annotations

import io
import logging
import time
from typing import Any, Callable

log = logging.getLogger(__name__)


def _capture_body(environ: dict) -> str:
    stream = environ.get("wsgi.input")
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if stream is None or length <= 0:
        return ""
    try:
        data = stream.read(length)
    except OSError as err:
        return f"error reading body: {err}"
    environ["wsgi.input"] = io.BytesIO(data)
    return data.decode("utf-8", errors="replace")


class LoggingMiddleware:
    """Wraps a WSGI application and logs each request it handles."""

    def __init__(self, app: Callable, logger: logging.Logger | None = None) -> None:
        self.app = app
        self.logger = logger or log

    def __call__(self, environ: dict, start_response: Callable) -> list[bytes]:
        started = time.monotonic()
        body = _capture_body(environ)
        status_code = 0

        def recording_start_response(status: str, headers: list, exc_info: Any = None):
            nonlocal status_code
            if status_code == 0 and status.split(" ", 1)[0].isdigit():
                status_code = int(status.split(" ", 1)[0])
            return start_response(status, headers, exc_info)

        result = self.app(environ, recording_start_response)
        try:
            chunks = list(result)
        finally:
            if hasattr(result, "close"):
                result.close()

        url = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
        if environ.get("QUERY_STRING"):
            url += "?" + environ["QUERY_STRING"]
        remote = environ.get("REMOTE_ADDR", "")
        if environ.get("REMOTE_PORT"):
            remote += f":{environ['REMOTE_PORT']}"
        self.logger.info(
            "Handled request method=%s body=%s url=%s remote_addr=%s status=%d duration=%.3fms",
            environ.get("REQUEST_METHOD", ""), body, url, remote,
            status_code or 101,  # no status written: websocket upgrade
            (time.monotonic() - started) * 1000,
        )
        return chunks