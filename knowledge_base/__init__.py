"""
Top-level package for the knowledge catalog.

This package loads knowledge documents (categories of topics) from
disk or HTTP, merges several of them into one de-duplicated catalog,
ranks topics against free-text queries and serves that search through
a small FastAPI app, an agent tool descriptor and a CLI.  Nothing is
loaded on import.
"""

from .accessors import all_topics, category_names, find_category, topics_by_category
from .errors import CatalogError, Failure, NoValidSources, SourceUnavailable, Success
from .merge import compare_versions, merge_catalogs
from .models import Catalog, CatalogKey, CatalogMetadata, Category, Topic, catalog_from_dict, catalog_from_json
from .ranking import rank_topics, score_topic, search

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogKey",
    "CatalogMetadata",
    "Category",
    "Failure",
    "NoValidSources",
    "SourceUnavailable",
    "Success",
    "Topic",
    "all_topics",
    "catalog_from_dict",
    "catalog_from_json",
    "category_names",
    "compare_versions",
    "find_category",
    "merge_catalogs",
    "rank_topics",
    "score_topic",
    "search",
    "topics_by_category",
]
