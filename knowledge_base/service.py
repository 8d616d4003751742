from __future__ import annotations

"""
In-process knowledge base: load the configured sources once, then
search and browse the merged catalog.

This is the piece the API, the agent tool and the CLI share.  It owns
the single default result limit (``SEARCH_DEFAULT_MAX_RESULTS``) so the
callers never carry their own.
"""

from typing import List, Optional, Sequence

from loguru import logger

from .accessors import all_topics, topics_by_category
from .config import KNOWLEDGE_FILES, SEARCH_DEFAULT_MAX_RESULTS
from .errors import CatalogError
from .loader import load_catalog, load_multiple_knowledge_files
from .merge import MergeResult
from .models import Catalog, Topic
from .ranking import search


class CatalogUnavailable(CatalogError):
    """The knowledge base has no merged catalog to work on."""

    def __init__(self, cause: Optional[CatalogError] = None):
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Knowledge catalog not loaded{detail}")


class KnowledgeBase:
    def __init__(
        self,
        identifiers: Optional[Sequence[str]] = None,
        base: Optional[str] = None,
        max_results: int = SEARCH_DEFAULT_MAX_RESULTS,
    ):
        self.identifiers = list(identifiers) if identifiers is not None else None
        self.base = base
        self.max_results = max_results
        self._catalog: Optional[Catalog] = None
        self._last_error: Optional[CatalogError] = None

    @classmethod
    def from_catalog(cls, catalog: Catalog, max_results: int = SEARCH_DEFAULT_MAX_RESULTS) -> "KnowledgeBase":
        kb = cls(identifiers=[], max_results=max_results)
        kb._catalog = catalog
        return kb

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def last_error(self) -> Optional[CatalogError]:
        return self._last_error

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            raise CatalogUnavailable(self._last_error)
        return self._catalog

    def _apply(self, result: MergeResult) -> bool:
        if result.ok:
            self._catalog = result.value
            self._last_error = None
            return True
        # keep serving the previous catalog, if any
        self._last_error = result.error
        logger.warning("Knowledge base load failed: {}", result.error)
        return False

    def reload(self) -> bool:
        """Blocking (re)load; returns False when no source was valid."""
        return self._apply(load_catalog(self.identifiers, base=self.base))

    async def areload(self) -> bool:
        """Same as :meth:`reload` for callers already inside an event loop."""
        identifiers = KNOWLEDGE_FILES if self.identifiers is None else self.identifiers
        return self._apply(await load_multiple_knowledge_files(identifiers, base=self.base))

    def search(self, query: str, max_results: Optional[int] = None) -> List[Topic]:
        limit = self.max_results if max_results is None else max_results
        return search(self.catalog, query, limit)

    def all_topics(self) -> List[Topic]:
        return all_topics(self.catalog)

    def topics_by_category(self, name: str) -> List[Topic]:
        return topics_by_category(self.catalog, name)
