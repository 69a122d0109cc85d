from __future__ import annotations

# treeurls/responses.py
# Plain-text error bodies, one line each with a trailing newline.
from fastapi.responses import PlainTextResponse


def _text(msg: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(f"{msg}\n", status_code=status_code)


def bad_request(msg: str) -> PlainTextResponse:
    return _text(msg, 400)


def not_found(msg: str) -> PlainTextResponse:
    return _text(msg, 404)


def errored(msg: str) -> PlainTextResponse:
    return _text(msg, 500)
