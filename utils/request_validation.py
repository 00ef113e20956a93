"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

FORM_MIMETYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


def parse_request_body(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the JSON or form-encoded body as a dict of stripped strings.

    Raises ``BadRequest`` for unsupported content types, non-object JSON
    payloads, empty bodies (unless ``allow_empty``) and missing required keys.
    """

    if req.is_json:
        data = req.get_json(silent=True)
        if data is None:
            raise BadRequest("Request JSON body is malformed.")
        if not isinstance(data, dict):
            raise BadRequest("Request JSON payload must be an object.")
    elif req.mimetype in FORM_MIMETYPES:
        data = req.form.to_dict()
    elif not req.get_data() and allow_empty:
        data = {}
    else:
        raise BadRequest(
            "Request content type must be application/json or form-encoded."
        )

    if not data and not allow_empty:
        raise BadRequest("Request body must not be empty.")

    cleaned = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in data.items()
    }

    if required_keys:
        missing = [key for key in required_keys if not cleaned.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )
        not_text = [key for key in required_keys if not isinstance(cleaned[key], str)]
        if not_text:
            raise BadRequest(
                "Fields must be strings: {}.".format(", ".join(sorted(not_text)))
            )

    return cleaned
