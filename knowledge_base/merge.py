from __future__ import annotations

"""
Merge several source catalogs into one de-duplicated catalog.

Sources are processed in the order given.  The first source to mention
a category (case-insensitively) fixes its name and description; topics
from later sources are appended unless a topic with the same
case-insensitive title is already there.  Metadata is reconciled
incrementally: highest version, most recent ``lastUpdated`` and the
union of distinct authors.

Example::

    from knowledge_base.merge import merge_catalogs
    result = merge_catalogs([catalog_a, None, catalog_b])
    if result.ok:
        merged = result.value

"""

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd
from loguru import logger

from .config import (
    AUTHOR_SEPARATOR,
    DEFAULT_AUTHOR,
    VERSION_POLICIES,
    VERSION_POLICY,
    VERSION_POLICY_LEXICAL,
)
from .errors import Failure, NoValidSources, Result, Success
from .models import Catalog, CatalogKey, CatalogMetadata, Category, Topic

SourceEntry = Union[Catalog, Success, Failure, None]
MergeResult = Result[Catalog]

_VERSION_SPLIT_RE = re.compile(r"[.\-]")
_LEADING_DIGITS_RE = re.compile(r"^(\d+)(.*)$")


# ---------------------------
# Version comparison
# ---------------------------

def _version_key(version: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Sort key for dotted versions.  Numeric parts compare as integers
    ("1.10" > "1.9"); non-numeric parts sort after numeric ones.
    Pre-release ordering is not modelled.
    """
    parts: List[Tuple[int, int, str]] = []
    for raw in _VERSION_SPLIT_RE.split((version or "").strip()):
        m = _LEADING_DIGITS_RE.match(raw)
        if m:
            parts.append((0, int(m.group(1)), m.group(2)))
        else:
            parts.append((1, 0, raw))
    # trailing zero components do not make a version bigger ("1.0.0" == "1")
    while len(parts) > 1 and parts[-1] == (0, 0, ""):
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str, policy: str = VERSION_POLICY) -> int:
    """
    Compare two version strings; returns -1, 0 or 1.

    ``numeric`` compares dot-separated components as integers ("10.0" >
    "2.0").  ``lexical`` is plain string ordering, kept for documents that
    were reconciled by the older tooling ("10.0" < "2.0").
    """
    if policy not in VERSION_POLICIES:
        raise ValueError(f"Unknown version policy {policy!r}; expected one of {VERSION_POLICIES}")
    if policy == VERSION_POLICY_LEXICAL:
        left, right = a, b
    else:
        left, right = _version_key(a), _version_key(b)
    if left > right:
        return 1
    if left < right:
        return -1
    return 0


# ---------------------------
# Date / author helpers
# ---------------------------

def parse_date(value: str) -> Optional[pd.Timestamp]:
    """
    Parse a ``lastUpdated`` value into a naive UTC timestamp.

    Returns ``None`` when the value cannot be parsed.  Values without a
    timezone are taken as UTC.
    """
    if not value:
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def _is_later(candidate: str, current: str) -> bool:
    new_ts = parse_date(candidate)
    if new_ts is None:
        return False
    cur_ts = parse_date(current)
    if cur_ts is None:
        return True
    return new_ts > cur_ts


def _merge_authors(authors: Iterable[str]) -> str:
    """
    Distinct authors in first-seen order, joined for display.

    Matching is exact (case- and whitespace-sensitive, so "Ann" and
    "Ann " are two authors).  Blank authors are ignored; the sentinel
    default is only used when no source names a real author.
    """
    seen: List[str] = []
    for author in authors:
        author = author or ""
        if not author.strip() or author == DEFAULT_AUTHOR:
            continue
        if author not in seen:
            seen.append(author)
    return AUTHOR_SEPARATOR.join(seen) if seen else DEFAULT_AUTHOR


def merge_metadata(metadata: Sequence[CatalogMetadata], policy: str = VERSION_POLICY) -> CatalogMetadata:
    """Reconcile metadata of the given sources (at least one) in order."""
    if not metadata:
        raise ValueError("merge_metadata() needs at least one metadata block")
    version = metadata[0].version
    last_updated = metadata[0].last_updated
    for meta in metadata[1:]:
        if compare_versions(meta.version, version, policy) > 0:
            version = meta.version
        if _is_later(meta.last_updated, last_updated):
            last_updated = meta.last_updated
    return CatalogMetadata(
        version=version,
        last_updated=last_updated,
        author=_merge_authors(m.author for m in metadata),
    )


# ---------------------------
# Merge
# ---------------------------

def _valid_sources(sources: Iterable[SourceEntry]) -> List[Catalog]:
    valid: List[Catalog] = []
    for entry in sources:
        if entry is None:
            continue
        if isinstance(entry, Failure):
            logger.debug("Skipping absent source: {}", entry.error)
            continue
        if isinstance(entry, Success):
            entry = entry.value
        valid.append(entry)
    return valid


class _CategoryBucket:
    """Accumulates one merged category while sources are folded in."""

    def __init__(self, category: Category):
        self.name = category.name
        self.description = category.description
        self.topics: List[Topic] = []
        self._titles: set[CatalogKey] = set()

    def add(self, topic: Topic) -> bool:
        key = topic.key
        if key in self._titles:
            return False
        self._titles.add(key)
        self.topics.append(topic)
        return True

    def build(self) -> Category:
        return Category(name=self.name, description=self.description, topics=list(self.topics))


def merge_catalogs(sources: Sequence[SourceEntry], policy: str = VERSION_POLICY) -> MergeResult:
    """
    Merge source catalogs into a single catalog.

    ``sources`` may contain ``None`` or failed load results for sources
    that could not be retrieved; those are skipped.  When nothing valid
    remains a :class:`Failure` wrapping :class:`NoValidSources` is
    returned.  The inputs are never modified.
    """
    sources = list(sources)
    valid = _valid_sources(sources)
    if not valid:
        logger.warning("No valid knowledge files found ({} attempted)", len(sources))
        return Failure(NoValidSources(len(sources)))

    buckets: Dict[CatalogKey, _CategoryBucket] = {}
    dropped = 0
    for catalog in valid:
        for category in catalog.categories:
            bucket = buckets.get(category.key)
            if bucket is None:
                bucket = buckets[category.key] = _CategoryBucket(category)
            for topic in category.topics:
                if not bucket.add(topic):
                    dropped += 1
                    logger.debug("Dropping duplicate topic {!r} in category {!r}", topic.title, bucket.name)

    merged = Catalog(
        categories=[bucket.build() for bucket in buckets.values()],
        metadata=merge_metadata([c.metadata for c in valid], policy),
    )
    logger.info(
        "Merged {} of {} sources into {} categories ({} duplicate topics dropped)",
        len(valid),
        len(sources),
        len(merged.categories),
        dropped,
    )
    return Success(merged)
