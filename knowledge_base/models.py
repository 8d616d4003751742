from __future__ import annotations

"""
Catalog data model shared by the merger, the ranker and the accessors.

The models mirror the exchanged JSON document exactly::

    {
      "categories": [
        {"name": ..., "description": ...,
         "topics": [{"title": ..., "content": ..., "tags": [...]}, ...]},
        ...
      ],
      "metadata": {"version": ..., "lastUpdated": ..., "author": ...}
    }

Validation happens through pydantic so that a malformed source is
rejected at the loader boundary instead of failing halfway through a
merge.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class CatalogKey:
    """Case-insensitive identity of a category name or topic title."""

    value: str

    @classmethod
    def of(cls, text: str) -> "CatalogKey":
        return cls((text or "").lower())

    def matches(self, text: str) -> bool:
        return self == CatalogKey.of(text)

    def __str__(self) -> str:
        return self.value


class Topic(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    tags: List[str]

    @property
    def key(self) -> CatalogKey:
        return CatalogKey.of(self.title)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    topics: List[Topic]

    @property
    def key(self) -> CatalogKey:
        return CatalogKey.of(self.name)


class CatalogMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str
    last_updated: str = Field(alias="lastUpdated")
    author: str


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: List[Category]
    metadata: CatalogMetadata

    def to_document(self) -> Dict[str, Any]:
        """Plain dict in the exchanged document shape (camelCase keys)."""
        return self.model_dump(by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_document(), indent=indent, ensure_ascii=False)


def catalog_from_dict(data: Mapping[str, Any]) -> Catalog:
    """Validate a decoded JSON document; raises ``pydantic.ValidationError``."""
    return Catalog.model_validate(data)


def catalog_from_json(text: str | bytes) -> Catalog:
    """Parse and validate a JSON document; raises ``pydantic.ValidationError``."""
    return Catalog.model_validate_json(text)
