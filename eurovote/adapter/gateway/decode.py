"""Error body decoding.

The party API answers failures either with a JSON object carrying an
``error`` field or with plain text. Decoding never raises, it picks the
best message it can find and tags where it came from.
"""

import json
from typing import Literal

import httpx

from eurovote.domain.value.common import ValueObject


class StructuredError(ValueObject):
    """Message taken from a JSON error payload."""

    kind: Literal["structured"] = "structured"
    message: str


class PlainTextError(ValueObject):
    """Message taken from the raw body text or the status phrase."""

    kind: Literal["plain"] = "plain"
    message: str


DecodedError = StructuredError | PlainTextError


def decode_error_body(response: httpx.Response) -> DecodedError:
    """Extract the user-facing message from a failed response.

    Order of preference:
    1. ``error`` string of a JSON object body
    2. status phrase, when the body is JSON without such a field
    3. raw body text
    4. status phrase, when the body is empty

    Args:
        response: Non-success response with its body read

    Returns:
        Tagged message
    """
    status_text = response.reason_phrase or ""
    text = response.text

    try:
        payload = json.loads(text)
    except ValueError:
        stripped = text.strip()
        return PlainTextError(message=stripped or status_text)

    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return StructuredError(message=payload["error"])

    return PlainTextError(message=status_text)
