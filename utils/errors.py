"""JSON error payloads shared by the error handlers and token callbacks."""

from __future__ import annotations

import uuid

from flask import g, jsonify
from flask.typing import ResponseReturnValue


def current_request_id() -> str:
    return g.get("request_id") or str(uuid.uuid4())


def error_payload(error: str, detail: str) -> dict[str, str]:
    return {"error": error, "detail": detail, "request_id": current_request_id()}


def json_error(status: int, error: str, detail: str) -> ResponseReturnValue:
    response = jsonify(error_payload(error, detail))
    response.status_code = status
    response.headers.setdefault("X-Request-ID", current_request_id())
    return response
