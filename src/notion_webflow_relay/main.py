"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from notion_webflow_relay.config import RelayConfig, Settings
from notion_webflow_relay.sync.upsert import ItemUpserter
from notion_webflow_relay.webflow.client import WebflowClient
from notion_webflow_relay.webhook.handler import router as webhook_router
from notion_webflow_relay.webhook.relay import WebhookRelay

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    webflow_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        current = settings or Settings()

        logging.basicConfig(
            level=getattr(logging, current.log_level.upper()),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        # Raises ConfigurationError before the server accepts traffic
        config = RelayConfig.from_settings(current)

        webflow_client = WebflowClient(
            config.api_token,
            config.collection_id,
            base_url=current.webflow_api_base,
            timeout=current.webflow_timeout,
            transport=webflow_transport,
        )
        app.state.relay = WebhookRelay(config, ItemUpserter(webflow_client))

        logger.info("Notion to Webflow relay started for collection %s", config.collection_id)
        yield

        await webflow_client.close()
        logger.info("Notion to Webflow relay stopped")

    app = FastAPI(title="Notion Webflow Relay", lifespan=lifespan)
    app.include_router(webhook_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "notion_webflow_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
