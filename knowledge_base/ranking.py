from __future__ import annotations

"""
Relevance ranking of catalog topics against a free-text query.

Scoring is plain case-insensitive substring containment, no
tokenisation or stemming:

* query in title      -> +10
* query in content    -> +5
* query in any tag    -> +3

Topics scoring 0 are dropped, the rest are sorted by descending score
with ties kept in encounter order (categories in catalog order, topics
in category order) and truncated to ``max_results``.
"""

from dataclasses import dataclass
from typing import List

from loguru import logger

from .config import CONTENT_MATCH_SCORE, TAG_MATCH_SCORE, TITLE_MATCH_SCORE
from .models import Catalog, Topic


@dataclass
class ScoredTopic:
    topic: Topic
    score: int
    category: str


def score_topic(topic: Topic, query: str) -> int:
    """Relevance of one topic for ``query`` (0 when nothing matches)."""
    if not query:
        return 0
    q = query.lower()
    score = 0
    if q in topic.title.lower():
        score += TITLE_MATCH_SCORE
    if q in topic.content.lower():
        score += CONTENT_MATCH_SCORE
    if any(q in tag.lower() for tag in topic.tags):
        score += TAG_MATCH_SCORE
    return score


def rank_topics(catalog: Catalog, query: str) -> List[ScoredTopic]:
    """Every matching topic with its score, best first (stable on ties)."""
    if not query:
        return []
    scored: List[ScoredTopic] = []
    for category in catalog.categories:
        for topic in category.topics:
            score = score_topic(topic, query)
            if score > 0:
                scored.append(ScoredTopic(topic=topic, score=score, category=category.name))
    # list.sort is stable, so equal scores keep encounter order
    scored.sort(key=lambda s: -s.score)
    return scored


def search(catalog: Catalog, query: str, max_results: int) -> List[Topic]:
    """
    Rank ``catalog`` topics for ``query`` and return the top ``max_results``.

    ``max_results`` has no default here; callers pass their configured
    limit (see ``config.SEARCH_DEFAULT_MAX_RESULTS``).  An empty query
    or catalog yields an empty list.
    """
    if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 0:
        raise ValueError(f"max_results must be a non-negative integer, got {max_results!r}")
    ranked = rank_topics(catalog, query)
    logger.debug("Query {!r} matched {} topics; returning up to {}", query, len(ranked), max_results)
    return [s.topic for s in ranked[:max_results]]
