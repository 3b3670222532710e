"""Pydantic models for Notion webhook payloads."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RichTextRun(BaseModel):
    """A single rich text fragment. Only ``plain_text`` is used."""

    plain_text: str | None = None


class TitleProperty(BaseModel):
    title: list[RichTextRun]


class RichTextProperty(BaseModel):
    rich_text: list[RichTextRun]


def first_plain_text(runs: list[RichTextRun]) -> str | None:
    return runs[0].plain_text if runs else None


class PageProperties(BaseModel):
    """The page properties the relay reads. Other properties are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    name: TitleProperty = Field(alias="Name")
    slug: RichTextProperty | None = Field(None, alias="Slug")
    content: RichTextProperty | None = Field(None, alias="Content")

    @property
    def title_text(self) -> str | None:
        return first_plain_text(self.name.title)

    @property
    def slug_text(self) -> str | None:
        return first_plain_text(self.slug.rich_text) if self.slug else None

    @property
    def content_text(self) -> str | None:
        return first_plain_text(self.content.rich_text) if self.content else None


class HandshakePayload(BaseModel):
    """Subscription verification request sent once before live events."""

    verification_token: Any = None


class WebhookPayload(BaseModel):
    """Top-level event body.

    Only ``properties.Name`` is required. ``pageId`` is never sent to
    Webflow, and ``id``, ``type``, ``entity`` and ``data`` are only kept for
    logging, so none of them can fail validation.
    """

    model_config = ConfigDict(populate_by_name=True)

    page_id: Any = Field(None, alias="pageId")
    properties: PageProperties | None = None
    id: Any = None
    type: Any = None
    entity: Any = None
    data: Any = None

    def to_record(self) -> "NormalizedRecord":
        props = self.properties
        return NormalizedRecord(
            id=None if self.page_id is None else str(self.page_id),
            title=props.title_text if props else None,
            slug=props.slug_text if props else None,
            content=props.content_text if props else None,
        )


@dataclass(frozen=True)
class NormalizedRecord:
    """The fields of one Notion page that get written to Webflow."""

    id: str | None = None
    title: str | None = None
    slug: str | None = None
    content: str | None = None

    def field_data(self) -> dict:
        """Webflow ``fieldData``; unset values are left out entirely."""
        fields = {"name": self.title, "slug": self.slug, "content": self.content}
        return {k: v for k, v in fields.items() if v is not None}

    def missing_required(self) -> list[str]:
        return [name for name, value in (("slug", self.slug), ("title", self.title)) if not value]
