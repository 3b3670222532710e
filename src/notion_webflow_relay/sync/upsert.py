"""Find-or-create a Webflow collection item keyed by slug."""

import logging
from dataclasses import dataclass
from enum import Enum

from notion_webflow_relay.webflow.client import WebflowClient, WebflowResponse
from notion_webflow_relay.webhook.models import NormalizedRecord

logger = logging.getLogger(__name__)

HTTP_CONFLICT = 409


class UpsertAction(Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass
class UpsertResult:
    action: UpsertAction
    status_code: int
    body: dict

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_item_payload(record: NormalizedRecord) -> dict:
    return {
        "isArchived": False,
        "isDraft": False,
        "fieldData": record.field_data(),
    }


def _first_item_id(lookup: WebflowResponse) -> str | None:
    items = lookup.body.get("items") if isinstance(lookup.body, dict) else None
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("_id")
    return None


class ItemUpserter:
    def __init__(self, webflow_client: WebflowClient) -> None:
        self._webflow = webflow_client

    async def _find_item_id(self, slug: str | None) -> str | None:
        # An unfiltered list would match arbitrary items
        if not slug:
            return None
        logger.info("Looking up Webflow item by slug %r", slug)
        return _first_item_id(await self._webflow.find_items_by_slug(slug))

    async def _update(self, item_id: str, payload: dict) -> UpsertResult:
        logger.info("Updating Webflow item %s", item_id)
        resp = await self._webflow.update_item(item_id, payload)
        return UpsertResult(UpsertAction.UPDATED, resp.status_code, resp.body)

    async def upsert_remote_item(self, record: NormalizedRecord) -> UpsertResult:
        """Update the item whose slug matches ``record.slug``, else create one.

        If the create loses a race against a concurrent request for the same
        slug (409), the lookup is repeated once and the winner is updated.
        """
        payload = build_item_payload(record)

        item_id = await self._find_item_id(record.slug)
        if item_id:
            return await self._update(item_id, payload)

        logger.info(
            "Creating Webflow item for page %s (slug=%r, has content=%s)",
            record.id, record.slug, record.content is not None,
        )
        resp = await self._webflow.create_item(payload)

        if resp.status_code == HTTP_CONFLICT and record.slug:
            logger.warning("Slug %r was created concurrently, retrying as update", record.slug)
            item_id = await self._find_item_id(record.slug)
            if item_id:
                return await self._update(item_id, payload)

        return UpsertResult(UpsertAction.CREATED, resp.status_code, resp.body)
