import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

WEBFLOW_API_BASE = "https://api.webflow.com"


@dataclass
class WebflowResponse:
    status_code: int
    body: dict

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _decode(resp: httpx.Response) -> dict:
    """Decode a JSON body, falling back to ``{}`` when it isn't JSON."""
    try:
        return resp.json()
    except ValueError:
        return {}


class WebflowClient:
    """Webflow v2 CMS items API, scoped to a single collection.

    Responses are returned whatever their status; callers decide what a
    failure means. Transport errors are not caught.
    """

    def __init__(
        self,
        api_token: str,
        collection_id: str,
        *,
        base_url: str = WEBFLOW_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._collection_id = collection_id
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def _items_url(self) -> str:
        return f"/v2/collections/{self._collection_id}/items"

    async def _request(self, method: str, url: str, **kwargs) -> WebflowResponse:
        resp = await self._client.request(method, url, **kwargs)
        result = WebflowResponse(status_code=resp.status_code, body=_decode(resp))
        logger.info("Webflow %s %s -> %d", method, url, resp.status_code)
        if not result.ok:
            logger.warning("Webflow error body: %s", result.body)
        return result

    async def find_items_by_slug(self, slug: str) -> WebflowResponse:
        return await self._request("GET", self._items_url, params={"slug": slug})

    async def update_item(self, item_id: str, payload: dict) -> WebflowResponse:
        return await self._request("PATCH", f"{self._items_url}/{item_id}", json=payload)

    async def create_item(self, payload: dict) -> WebflowResponse:
        return await self._request("POST", self._items_url, json=payload)
