from __future__ import annotations

"""
Tool descriptor letting a conversational agent search the knowledge base.

The parameters schema is generated from :class:`~knowledge_base.config.SearchRequest`
so the agent sees the same contract as the HTTP API.  ``execute`` is a
coroutine because agent frameworks call tools from inside their event
loop; the catalog is loaded lazily on the first call.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from .config import SEARCH_DEFAULT_MAX_RESULTS, SearchRequest
from .service import KnowledgeBase

TOOL_NAME = "search_knowledge"
TOOL_DESCRIPTION = (
    "Search through knowledge base JSON files for relevant information. "
    "Use this when users ask questions that might be answered by the "
    "knowledge base content."
)


def tool_parameters() -> Dict[str, Any]:
    schema = SearchRequest.model_json_schema(by_alias=True)
    properties = dict(schema["properties"])
    # the request model defaults to None; advertise the limit actually applied
    properties["maxResults"] = {**properties["maxResults"], "default": SEARCH_DEFAULT_MAX_RESULTS}
    return {
        "type": "object",
        "properties": properties,
        "required": schema.get("required", ["query"]),
    }


class SearchKnowledgeTool:
    def __init__(self, kb: Optional[KnowledgeBase] = None):
        self._kb = kb

    async def _knowledge_base(self) -> KnowledgeBase:
        if self._kb is None:
            self._kb = KnowledgeBase()
        if not self._kb.loaded:
            await self._kb.areload()
        return self._kb

    def describe(self) -> Dict[str, Any]:
        return {
            "name": TOOL_NAME,
            "description": TOOL_DESCRIPTION,
            "parameters": tool_parameters(),
        }

    async def execute(self, query: str, maxResults: Optional[int] = None) -> List[Dict[str, Any]]:
        if not query or not query.strip():
            return []
        req = SearchRequest(query=query.strip(), maxResults=maxResults)
        kb = await self._knowledge_base()
        if not kb.loaded:
            logger.warning("search_knowledge called without a catalog: {}", kb.last_error)
            return []
        topics = kb.search(req.query, req.max_results)
        return [{"title": t.title, "content": t.content, "tags": list(t.tags)} for t in topics]


SEARCH_KNOWLEDGE_TOOL = SearchKnowledgeTool()
