from __future__ import annotations

"""
Direct lookups over a catalog, without scoring.
"""

from typing import List, Optional

import pandas as pd

from .models import Catalog, CatalogKey, Category, Topic

TOPIC_COLUMNS = ["category", "title", "content", "tags"]


def all_topics(catalog: Catalog) -> List[Topic]:
    """Every topic, in catalog order then category order."""
    return [topic for category in catalog.categories for topic in category.topics]


def find_category(catalog: Catalog, name: str) -> Optional[Category]:
    """First category whose name matches ``name`` case-insensitively."""
    key = CatalogKey.of(name)
    for category in catalog.categories:
        if category.key == key:
            return category
    return None


def topics_by_category(catalog: Catalog, name: str) -> List[Topic]:
    category = find_category(catalog, name)
    return list(category.topics) if category is not None else []


def category_names(catalog: Catalog) -> List[str]:
    return [category.name for category in catalog.categories]


def topics_frame(catalog: Catalog) -> pd.DataFrame:
    """
    One row per topic with columns ``category, title, content, tags``.

    Tags are joined with ``"; "`` so the frame writes cleanly to CSV.
    """
    rows = [
        (category.name, topic.title, topic.content, "; ".join(topic.tags))
        for category in catalog.categories
        for topic in category.topics
    ]
    return pd.DataFrame(rows, columns=TOPIC_COLUMNS)
