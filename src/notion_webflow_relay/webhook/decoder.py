"""Turn a verified request body into a NormalizedRecord without raising."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from notion_webflow_relay.errors import MalformedPayload
from notion_webflow_relay.webhook.models import NormalizedRecord, WebhookPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    record: NormalizedRecord
    payload: WebhookPayload


@dataclass(frozen=True)
class Err:
    error: MalformedPayload


DecodeResult = Ok | Err


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if first["type"] == "json_invalid":
        return "Body is not valid JSON"
    if first["type"] == "model_type":
        return "Body must be a JSON object"
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]


def decode_event(body: bytes) -> DecodeResult:
    """Validate the envelope and derive the record.

    Returns ``Err`` for invalid JSON, a non-object body, or ``properties``
    present without a ``Name`` title. Every other field may be absent.
    """
    try:
        payload = WebhookPayload.model_validate_json(body)
    except ValidationError as exc:
        reason = _describe(exc)
        logger.warning("Rejecting malformed webhook payload: %s", reason)
        return Err(MalformedPayload(reason))

    return Ok(record=payload.to_record(), payload=payload)
