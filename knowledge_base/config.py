from __future__ import annotations
"""
Configuration for the knowledge catalog (paths, limits, API schemas).
"""

import os
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[1]
KNOWLEDGE_DIR = os.getenv("KB_KNOWLEDGE_DIR", str(PROJECT_ROOT / "knowledge"))

# Source documents merged by load_all_knowledge_files(), in precedence order.
# Extend this list (or set KB_KNOWLEDGE_FILES=a.json,b.json) when adding files.
DEFAULT_KNOWLEDGE_FILES: List[str] = [
    "g05_history.json",
]


def _split_env_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


KNOWLEDGE_FILES: List[str] = _split_env_list(os.getenv("KB_KNOWLEDGE_FILES")) or list(DEFAULT_KNOWLEDGE_FILES)

# Result policy
# One default for every caller that does not pass a limit (service, API, tool, CLI).
# The ranking engine itself never assumes one.
_BUILTIN_MAX_RESULTS = 3
SEARCH_DEFAULT_MAX_RESULTS = int(os.getenv("KB_SEARCH_MAX_RESULTS", str(_BUILTIN_MAX_RESULTS)))

# Relevance weights
TITLE_MATCH_SCORE = 10
CONTENT_MATCH_SCORE = 5
TAG_MATCH_SCORE = 3

# Merge policy
DEFAULT_AUTHOR = "Knowledge Base System"
AUTHOR_SEPARATOR = ", "
VERSION_POLICY_NUMERIC = "numeric"
VERSION_POLICY_LEXICAL = "lexical"
VERSION_POLICIES = (VERSION_POLICY_NUMERIC, VERSION_POLICY_LEXICAL)
VERSION_POLICY = os.getenv("KB_VERSION_POLICY", VERSION_POLICY_NUMERIC).strip().lower()

# HTTP hardening
HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 7.0
HTTP_MAX_REDIRECTS = 2
HTTP_MAX_BYTES = 5_000_000
HTTP_USER_AGENT = "knowledge-catalog/1.0"

# Logging
LOG_LEVEL = os.getenv("KB_LOG_LEVEL", "INFO").upper()


# Pydantic schemas
class TopicRecord(BaseModel):
    title: str
    content: str
    tags: List[str]


class SearchRequest(BaseModel):
    """Search the knowledge base for topics relevant to a query."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(
        ...,
        min_length=1,
        description="The search query to find relevant knowledge base content",
    )
    max_results: Optional[int] = Field(
        default=None,
        ge=0,
        alias="maxResults",
        description=f"Maximum number of results to return (default: {SEARCH_DEFAULT_MAX_RESULTS})",
    )


class SearchResponse(BaseModel):
    results: List[TopicRecord]


class HealthResponse(BaseModel):
    status: str
    categories: int = 0
    topics: int = 0
