"""Verify a Notion webhook request and relay it to Webflow."""

import hashlib
import hmac
import logging
from typing import Any

from pydantic import ValidationError

from notion_webflow_relay.config import RelayConfig
from notion_webflow_relay.errors import AuthenticationFailure, DownstreamFailure
from notion_webflow_relay.sync.upsert import ItemUpserter
from notion_webflow_relay.webhook.decoder import Err, decode_event
from notion_webflow_relay.webhook.models import HandshakePayload
from notion_webflow_relay.webhook.signature import verify_signature

logger = logging.getLogger(__name__)

TOKEN_MISMATCH = "Verification token mismatch"
INVALID_SIGNATURE = "Invalid signature"


def _handshake_token(body: bytes) -> Any:
    try:
        return HandshakePayload.model_validate_json(body).verification_token
    except ValidationError:
        return None


class WebhookRelay:
    def __init__(self, config: RelayConfig, upserter: ItemUpserter) -> None:
        self._config = config
        self._upserter = upserter

    async def handle(self, body: bytes, signature: str | None) -> dict:
        """Process one webhook request and return the JSON response body.

        Raises ``AuthenticationFailure``, ``MalformedPayload`` or
        ``DownstreamFailure``; transport errors from Webflow propagate.
        """
        logger.debug("Webhook raw body: %r", body)

        if not signature:
            token = _handshake_token(body)
            if token:
                return self._verify_handshake(str(token))

        # Signature covers the raw bytes, so check it before parsing
        if not verify_signature(body, signature, self._config.verification_secret):
            logger.warning("Rejecting webhook with invalid or missing signature")
            raise AuthenticationFailure(INVALID_SIGNATURE)

        result = decode_event(body)
        if isinstance(result, Err):
            raise result.error

        payload, record = result.payload, result.record
        logger.info(
            "Webhook event id=%s type=%s has_properties=%s",
            payload.id, payload.type, payload.properties is not None,
        )
        logger.info("Derived record: %s", record)

        missing = record.missing_required()
        if missing:
            logger.warning(
                "Page %s is missing %s; Webflow will likely reject it",
                record.id, " and ".join(missing),
            )

        upsert = await self._upserter.upsert_remote_item(record)
        if not upsert.ok and self._config.report_downstream_failures:
            raise DownstreamFailure(upsert.status_code, upsert.body)

        return {"success": True, "webflowResponse": upsert.body}

    def _verify_handshake(self, token: str) -> dict:
        logger.info("Received webhook verification handshake")
        if not hmac.compare_digest(token.encode(), self._config.verification_secret.encode()):
            fingerprint = hashlib.sha256(token.encode()).hexdigest()[:8]
            logger.warning("Verification token mismatch, received token sha256 prefix %s", fingerprint)
            # Notion only shows a new token by sending it here
            logger.debug("Received verification token: %s", token)
            raise AuthenticationFailure(TOKEN_MISMATCH)
        return {"success": True}
