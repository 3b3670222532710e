from dataclasses import dataclass

from pydantic_settings import BaseSettings

from notion_webflow_relay.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Notion
    notion_webhook_verification_token: str
    notion_api_key: str | None = None  # backfill only
    notion_database_id: str | None = None  # backfill only

    # Webflow
    webflow_site_api_token: str
    webflow_collection_id: str
    webflow_api_base: str = "https://api.webflow.com"
    webflow_timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    # Feature flags
    report_downstream_failures: bool = False


@dataclass(frozen=True)
class RelayConfig:
    """Everything the relay needs to verify and forward one event."""

    verification_secret: str
    api_token: str
    collection_id: str
    report_downstream_failures: bool = False

    def __post_init__(self) -> None:
        if not self.verification_secret:
            raise ConfigurationError(
                "NOTION_WEBHOOK_VERIFICATION_TOKEN is empty; every signed event would be rejected"
            )
        if not self.api_token:
            raise ConfigurationError("WEBFLOW_SITE_API_TOKEN is empty")
        if not self.collection_id:
            raise ConfigurationError("WEBFLOW_COLLECTION_ID is empty")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayConfig":
        return cls(
            verification_secret=settings.notion_webhook_verification_token,
            api_token=settings.webflow_site_api_token,
            collection_id=settings.webflow_collection_id,
            report_downstream_failures=settings.report_downstream_failures,
        )
