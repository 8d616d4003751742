from __future__ import annotations

"""
Retrieval of raw knowledge documents from disk or over HTTP.

``fetch_one`` never raises for missing, unreachable or malformed
sources: it logs a warning and returns a :class:`~knowledge_base.errors.Failure`
carrying :class:`~knowledge_base.errors.SourceUnavailable`.  Multiple
sources are fetched concurrently over one ``httpx.AsyncClient`` and
then handed to the merger in the order they were requested, which is
what decides first-seen precedence for descriptions and authors.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
from loguru import logger
from pydantic import ValidationError

from .config import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_MAX_BYTES,
    HTTP_MAX_REDIRECTS,
    HTTP_READ_TIMEOUT,
    HTTP_USER_AGENT,
    KNOWLEDGE_DIR,
    KNOWLEDGE_FILES,
)
from .errors import Failure, Result, SourceUnavailable, Success
from .merge import MergeResult, merge_catalogs
from .models import Catalog, catalog_from_json

LoadResult = Result[Catalog]


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def resolve_location(identifier: str, base: Optional[str] = None) -> str:
    """
    Turn a source identifier into a URL or a filesystem path.

    Absolute URLs and absolute paths are used as-is; anything else is
    taken relative to ``base`` (default ``config.KNOWLEDGE_DIR``), which
    may itself be a directory or a URL prefix.
    """
    base = KNOWLEDGE_DIR if base is None else base
    if _is_url(identifier):
        return identifier
    if _is_url(base):
        return f"{base.rstrip('/')}/{identifier.lstrip('/')}"
    path = Path(identifier)
    if path.is_absolute():
        return str(path)
    return str(Path(base) / path)


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
        max_redirects=HTTP_MAX_REDIRECTS,
        headers={"User-Agent": HTTP_USER_AGENT},
    )


def _unavailable(identifier: str, reason: str) -> Failure:
    logger.warning("Knowledge file {} unavailable: {}", identifier, reason)
    return Failure(SourceUnavailable(identifier, reason))


def _parse(identifier: str, payload: bytes) -> LoadResult:
    if len(payload) > HTTP_MAX_BYTES:
        return _unavailable(identifier, f"{len(payload)} bytes > {HTTP_MAX_BYTES} limit")
    try:
        return Success(catalog_from_json(payload))
    except ValidationError as e:
        return _unavailable(identifier, f"invalid catalog document ({e.error_count()} errors)")


async def _fetch_http(identifier: str, url: str, client: httpx.AsyncClient) -> LoadResult:
    try:
        r = await client.get(url)
    # InvalidURL is not an HTTPError subclass
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return _unavailable(identifier, f"request failed: {e!r}")
    if r.status_code == 404:
        return _unavailable(identifier, "not found")
    if r.status_code >= 400:
        return _unavailable(identifier, f"HTTP {r.status_code}")
    return _parse(identifier, r.content)


def _fetch_file(identifier: str, path: Path) -> LoadResult:
    if not path.is_file():
        return _unavailable(identifier, "not found")
    try:
        payload = path.read_bytes()
    except OSError as e:
        return _unavailable(identifier, f"read failed: {e}")
    return _parse(identifier, payload)


async def fetch_one(
    identifier: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    base: Optional[str] = None,
) -> LoadResult:
    """
    Load a single knowledge document.

    Parameters
    ----------
    identifier : str
        File name relative to ``base``, an absolute path, or a URL.
    client : httpx.AsyncClient, optional
        Shared client for HTTP sources; a short-lived one is created
        when omitted.
    base : str, optional
        Directory or URL prefix for relative identifiers.

    Returns
    -------
    LoadResult
        ``Success(catalog)`` or ``Failure(SourceUnavailable)``.
    """
    location = resolve_location(identifier, base)
    if not _is_url(location):
        return _fetch_file(identifier, Path(location))
    if client is not None:
        return await _fetch_http(identifier, location, client)
    async with make_client() as own_client:
        return await _fetch_http(identifier, location, own_client)


async def fetch_many(
    identifiers: Sequence[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    base: Optional[str] = None,
) -> List[LoadResult]:
    """Fetch every identifier concurrently; results keep the input order."""
    if client is None:
        async with make_client() as own_client:
            return await fetch_many(identifiers, client=own_client, base=base)
    return list(await asyncio.gather(*(fetch_one(i, client=client, base=base) for i in identifiers)))


async def load_multiple_knowledge_files(
    identifiers: Sequence[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    base: Optional[str] = None,
) -> MergeResult:
    """Fetch all sources concurrently, then merge them in the given order."""
    logger.info("Loading {} knowledge files", len(identifiers))
    results = await fetch_many(identifiers, client=client, base=base)
    return merge_catalogs(results)


async def load_all_knowledge_files(
    *,
    client: Optional[httpx.AsyncClient] = None,
    base: Optional[str] = None,
) -> MergeResult:
    """Load and merge the configured ``KNOWLEDGE_FILES``."""
    return await load_multiple_knowledge_files(KNOWLEDGE_FILES, client=client, base=base)


def load_catalog(identifiers: Optional[Sequence[str]] = None, base: Optional[str] = None) -> MergeResult:
    """Blocking wrapper for scripts and the CLI."""
    if identifiers is None:
        identifiers = KNOWLEDGE_FILES
    return asyncio.run(load_multiple_knowledge_files(list(identifiers), base=base))
