"""Tests for the Notion database backfill."""

import json

import httpx
import pytest

from notion_webflow_relay import backfill as backfill_module
from notion_webflow_relay.backfill import BackfillSummary, NotionPage, backfill
from notion_webflow_relay.errors import ConfigurationError


def _page(page_id: str, title: str | None, slug: str | None) -> dict:
    props = {
        "Name": {"id": "title", "type": "title", "title": [{"plain_text": title}] if title else []},
        "Slug": {"id": "s", "type": "rich_text", "rich_text": [{"plain_text": slug}] if slug else []},
    }
    return {"object": "page", "id": page_id, "properties": props}


def _notion_transport(batches: list[list[dict]]):
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        index = len(seen) - 1
        has_more = index < len(batches) - 1
        return httpx.Response(
            200,
            json={
                "results": batches[index],
                "has_more": has_more,
                "next_cursor": f"cursor-{index + 1}" if has_more else None,
            },
        )

    return httpx.MockTransport(handler), seen


@pytest.fixture
def backfill_settings(settings):
    settings.notion_api_key = "notion-key"
    settings.notion_database_id = "db-1"
    return settings


def test_notion_page_to_record():
    record = NotionPage.model_validate(_page("p1", "Hello", "hello")).to_record()
    assert (record.id, record.title, record.slug, record.content) == ("p1", "Hello", "hello", None)


@pytest.mark.asyncio
async def test_backfill_upserts_every_page(backfill_settings, fake_webflow):
    fake_webflow.items_by_slug["existing"] = [{"_id": "item-1"}]
    notion_transport, notion_requests = _notion_transport([
        [_page("p1", "One", "existing"), _page("p2", "Two", "new")],
        [_page("p3", "Three", None), {"id": "p4", "properties": {}}],
    ])

    summary = await backfill(
        backfill_settings,
        notion_transport=notion_transport,
        webflow_transport=fake_webflow.transport,
    )

    assert summary == BackfillSummary(created=1, updated=1, failed=0, skipped=2)
    assert notion_requests == [{"page_size": 100}, {"page_size": 100, "start_cursor": "cursor-1"}]
    assert fake_webflow.methods() == ["GET", "PATCH", "GET", "POST"]


@pytest.mark.asyncio
async def test_backfill_counts_rejected_pages(backfill_settings, fake_webflow):
    fake_webflow.create_responses.append(httpx.Response(400, json={"message": "Validation Error"}))
    notion_transport, _ = _notion_transport([[_page("p1", "One", "one")]])

    summary = await backfill(
        backfill_settings,
        notion_transport=notion_transport,
        webflow_transport=fake_webflow.transport,
    )

    assert summary.failed == 1
    assert summary.created == 0


@pytest.mark.asyncio
async def test_backfill_requires_notion_settings(settings):
    with pytest.raises(ConfigurationError):
        await backfill(settings)


@pytest.mark.asyncio
async def test_backfill_counts_webflow_transport_errors(backfill_settings):
    def webflow_down(request):
        raise httpx.ConnectError("connection refused", request=request)

    notion_transport, _ = _notion_transport([[_page("p1", "One", "one"), _page("p2", "Two", "two")]])

    summary = await backfill(
        backfill_settings,
        notion_transport=notion_transport,
        webflow_transport=httpx.MockTransport(webflow_down),
    )

    assert summary == BackfillSummary(created=0, updated=0, failed=2, skipped=0)


def test_main_exits_when_notion_is_unreachable(monkeypatch):
    monkeypatch.setenv("NOTION_WEBHOOK_VERIFICATION_TOKEN", "shh")
    monkeypatch.setenv("WEBFLOW_SITE_API_TOKEN", "wf-token")
    monkeypatch.setenv("WEBFLOW_COLLECTION_ID", "col-1")

    async def notion_down(settings):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(backfill_module, "backfill", notion_down)

    with pytest.raises(SystemExit) as exc_info:
        backfill_module.main()
    assert exc_info.value.code == 1
