"""Backfill CLI: push every page of a Notion database to Webflow.

Useful after first deploying the relay, or after webhook deliveries were
missed. Each page goes through the same slug-keyed upsert as a live event.
"""

import asyncio
import logging
import sys
from dataclasses import dataclass

import httpx
from pydantic import BaseModel, ValidationError

from notion_webflow_relay.config import RelayConfig, Settings
from notion_webflow_relay.errors import ConfigurationError
from notion_webflow_relay.notion.client import NotionClient
from notion_webflow_relay.sync.upsert import ItemUpserter, UpsertAction
from notion_webflow_relay.webflow.client import WebflowClient
from notion_webflow_relay.webhook.models import NormalizedRecord, PageProperties

logger = logging.getLogger(__name__)


class NotionPage(BaseModel):
    id: str
    properties: PageProperties

    def to_record(self) -> NormalizedRecord:
        return NormalizedRecord(
            id=self.id,
            title=self.properties.title_text,
            slug=self.properties.slug_text,
            content=self.properties.content_text,
        )


@dataclass
class BackfillSummary:
    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0


async def backfill(
    settings: Settings,
    *,
    notion_transport: httpx.AsyncBaseTransport | None = None,
    webflow_transport: httpx.AsyncBaseTransport | None = None,
) -> BackfillSummary:
    if not settings.notion_api_key or not settings.notion_database_id:
        raise ConfigurationError("NOTION_API_KEY and NOTION_DATABASE_ID must be set to backfill")

    config = RelayConfig.from_settings(settings)
    notion_client = NotionClient(settings.notion_api_key, transport=notion_transport)
    webflow_client = WebflowClient(
        config.api_token,
        config.collection_id,
        base_url=settings.webflow_api_base,
        timeout=settings.webflow_timeout,
        transport=webflow_transport,
    )
    upserter = ItemUpserter(webflow_client)
    summary = BackfillSummary()

    try:
        logger.info("Querying all pages from Notion database %s", settings.notion_database_id)
        pages = await notion_client.query_all_pages(settings.notion_database_id)
        logger.info("Found %d pages", len(pages))

        for page in pages:
            try:
                record = NotionPage.model_validate(page).to_record()
            except ValidationError as exc:
                logger.warning("Page %s cannot be decoded, skipping: %s", page.get("id"), exc)
                summary.skipped += 1
                continue

            if not record.slug or not record.title:
                logger.debug("Page %s has no slug or title, skipping", record.id)
                summary.skipped += 1
                continue

            try:
                result = await upserter.upsert_remote_item(record)
            except httpx.HTTPError as exc:
                logger.error("Webflow request for page %s failed: %s", record.id, exc)
                summary.failed += 1
                continue

            if not result.ok:
                logger.error(
                    "Webflow rejected page %s (status %d): %s",
                    record.id, result.status_code, result.body,
                )
                summary.failed += 1
            elif result.action is UpsertAction.CREATED:
                summary.created += 1
            else:
                summary.updated += 1

        logger.info(
            "Backfill complete: %d created, %d updated, %d failed, %d skipped",
            summary.created, summary.updated, summary.failed, summary.skipped,
        )
        return summary

    finally:
        await notion_client.close()
        await webflow_client.close()


def main():
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(backfill(settings))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except httpx.HTTPError as exc:
        logger.error("Backfill aborted, Notion request failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
