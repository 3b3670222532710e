import logging

import httpx

logger = logging.getLogger(__name__)

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_API_VERSION = "2022-06-28"


class NotionClient:
    def __init__(
        self,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=NOTION_API_BASE,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Notion-Version": NOTION_API_VERSION,
                "Content-Type": "application/json",
            },
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def query_database(
        self, database_id: str, *, start_cursor: str | None = None, page_size: int = 100
    ) -> dict:
        """Query a Notion database, returning one page of results."""
        body: dict = {"page_size": page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor
        resp = await self._client.post(f"/databases/{database_id}/query", json=body)
        resp.raise_for_status()
        return resp.json()

    async def query_all_pages(self, database_id: str) -> list[dict]:
        """Query all pages in a Notion database."""
        pages = []
        cursor = None
        while True:
            result = await self.query_database(
                database_id, start_cursor=cursor
            )
            pages.extend(result["results"])
            if not result.get("has_more"):
                break
            cursor = result["next_cursor"]
        logger.debug("Fetched %d pages from database %s", len(pages), database_id)
        return pages
