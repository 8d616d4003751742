from __future__ import annotations

"""
FastAPI application exposing knowledge base search.

- POST /search ranks topics for a query (maxResults defaults to
  SEARCH_DEFAULT_MAX_RESULTS)
- GET /topics and GET /categories/{name}/topics browse without scoring
- POST /reload re-reads the configured sources
- 503 whenever no catalog could be loaded; per-source failures are only logged
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import HealthResponse, SearchRequest, SearchResponse, TopicRecord
from .models import Topic
from .service import CatalogUnavailable, KnowledgeBase


def to_record(topic: Topic) -> TopicRecord:
    return TopicRecord(title=topic.title, content=topic.content, tags=list(topic.tags))


def to_records(topics: List[Topic]) -> List[TopicRecord]:
    return [to_record(t) for t in topics]


# =============================================================================
# FastAPI app + startup
# =============================================================================

app = FastAPI(title="Knowledge Catalog")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_kb: Optional[KnowledgeBase] = None


def get_knowledge_base() -> KnowledgeBase:
    global _kb
    if _kb is None:
        _kb = KnowledgeBase()
    return _kb


def _require_loaded() -> KnowledgeBase:
    kb = get_knowledge_base()
    if not kb.loaded:
        raise HTTPException(status_code=503, detail="Knowledge catalog not loaded")
    return kb


@app.on_event("startup")
async def startup_event() -> None:
    kb = get_knowledge_base()
    if kb.loaded:
        return
    logger.info("Loading knowledge catalog...")
    if await kb.areload():
        logger.info("Loaded knowledge catalog with {} categories", len(kb.catalog.categories))
    else:
        logger.warning("Starting without a knowledge catalog")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    kb = get_knowledge_base()
    if not kb.loaded:
        return HealthResponse(status="degraded")
    return HealthResponse(
        status="healthy",
        categories=len(kb.catalog.categories),
        topics=len(kb.all_topics()),
    )


@app.post("/search", response_model=SearchResponse)
def search_endpoint(req: SearchRequest) -> SearchResponse:
    query = req.query.strip()
    if not query:
        raise HTTPException(status_code=422, detail="Query must be non-empty")
    kb = _require_loaded()
    topics = kb.search(query, req.max_results)
    logger.info("Search {!r} returned {} topics", query, len(topics))
    return SearchResponse(results=to_records(topics))


@app.get("/topics", response_model=List[TopicRecord])
def list_topics() -> List[TopicRecord]:
    return to_records(_require_loaded().all_topics())


@app.get("/categories/{name}/topics", response_model=List[TopicRecord])
def category_topics(name: str) -> List[TopicRecord]:
    return to_records(_require_loaded().topics_by_category(name))


@app.post("/reload", response_model=HealthResponse)
async def reload_endpoint() -> HealthResponse:
    kb = get_knowledge_base()
    if await kb.areload():
        return health()
    if not kb.loaded:
        raise HTTPException(status_code=503, detail=str(CatalogUnavailable(kb.last_error)))
    # previous catalog is still being served
    return HealthResponse(status="stale", categories=len(kb.catalog.categories), topics=len(kb.all_topics()))
