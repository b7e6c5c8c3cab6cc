# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog schemas.

Resource documents were written by several generations of tooling, so
field names vary (title, Title, video_url, VideoUrl...).
Resource.from_document normalizes them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from student_hub.infrastructure.store import Document

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "Title"),
    "description": ("description", "Description"),
    "icon": ("icon", "Icon"),
    "color": ("color", "Color"),
    "video_url": ("videoUrl", "video_url", "VideoUrl"),
    "download_url": ("downloadUrl", "download_url", "DownloadUrl"),
}


def _first(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


class Resource(BaseModel):
    """A course resource in the catalog."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str | None = None
    description: str = ""
    icon: str | None = None
    color: str | None = None
    video_url: str | None = None
    download_url: str | None = None

    @classmethod
    def from_document(cls, document: Document) -> "Resource":
        values = {name: _first(document.data, keys) for name, keys in _FIELD_ALIASES.items()}
        values["description"] = values["description"] or ""
        return cls(id=document.id, **values)
