"""Website and page models as the builder's page store sends them."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from engine.compiler.types import Page, Website


class PageIn(BaseModel):
    """One page of a website. `content` is the serialized component tree."""

    model_config = {"populate_by_name": True}

    id: str = Field(min_length=1, max_length=200)
    name: str | None = None
    slug: str | None = None
    content: str = ""
    meta_title: str | None = Field(default=None, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    meta_keywords: str | None = Field(default=None, alias="metaKeywords")

    @field_validator("content", mode="before")
    @classmethod
    def serialize_content(cls, value: Any) -> Any:
        # The editor sometimes posts the tree itself instead of its JSON string.
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        if value is None:
            return ""
        return value

    def to_engine(self) -> Page:
        return Page(
            id=self.id,
            name=self.name,
            slug=self.slug,
            content=self.content,
            meta_title=self.meta_title,
            meta_description=self.meta_description,
            meta_keywords=self.meta_keywords,
        )


class WebsiteIn(BaseModel):
    """What the client sends to compile, preview or publish a site."""

    model_config = {"populate_by_name": True}

    id: str = Field(min_length=1, max_length=200, pattern=r"^[A-Za-z0-9_-]+$")
    name: str | None = None
    description: str | None = None
    language: str | None = "en"
    theme: str = "light"
    pages: list[PageIn] = Field(default_factory=list, max_length=500)

    def to_engine(self) -> Website:
        return Website(
            id=self.id,
            name=self.name,
            description=self.description,
            language=self.language or "en",
            pages=[page.to_engine() for page in self.pages],
            theme=self.theme,
        )


class PublishResponse(BaseModel):
    """What the publish endpoint returns."""

    website_id: str
    url: str
    files: list[str]
    warnings: int = 0
