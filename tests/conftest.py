import json

import httpx
import pytest

from notion_webflow_relay.config import Settings

SECRET = "shh"


class FakeWebflow:
    """Records Webflow requests and answers them from a small in-memory table."""

    def __init__(self, items_by_slug: dict[str, list[dict]] | None = None) -> None:
        self.items_by_slug = items_by_slug or {}
        self.requests: list[httpx.Request] = []
        self.create_status = 202
        self.update_status = 200
        self.create_responses: list[httpx.Response] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            slug = request.url.params.get("slug")
            return httpx.Response(200, json={"items": self.items_by_slug.get(slug, [])})
        if request.method == "PATCH":
            item_id = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(self.update_status, json={"id": item_id, **json.loads(request.content)})
        if request.method == "POST":
            if self.create_responses:
                return self.create_responses.pop(0)
            return httpx.Response(self.create_status, json={"id": "new-item", **json.loads(request.content)})
        return httpx.Response(405)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]


@pytest.fixture
def fake_webflow():
    return FakeWebflow()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        notion_webhook_verification_token=SECRET,
        webflow_site_api_token="wf-token",
        webflow_collection_id="col-1",
    )
