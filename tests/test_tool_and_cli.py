import asyncio
import json

import pandas as pd
import pytest

from knowledge_base import cli
from knowledge_base.config import SEARCH_DEFAULT_MAX_RESULTS
from knowledge_base.merge import merge_catalogs
from knowledge_base.service import CatalogUnavailable, KnowledgeBase
from knowledge_base.tool import TOOL_NAME, SearchKnowledgeTool


@pytest.fixture
def tool(billing_source, billing_source_lower):
    catalog = merge_catalogs([billing_source, billing_source_lower]).unwrap()
    return SearchKnowledgeTool(KnowledgeBase.from_catalog(catalog, max_results=3))


class TestTool:
    def test_describe(self, tool):
        described = tool.describe()
        assert described["name"] == TOOL_NAME
        assert described["parameters"]["required"] == ["query"]
        assert set(described["parameters"]["properties"]) == {"query", "maxResults"}

    def test_describe_advertises_configured_default(self, tool):
        max_results = tool.describe()["parameters"]["properties"]["maxResults"]
        assert max_results["default"] == SEARCH_DEFAULT_MAX_RESULTS

    def test_execute_returns_records(self, tool):
        records = asyncio.run(tool.execute("refund", maxResults=5))
        assert records == [{"title": "Refunds", "content": "How refunds work", "tags": ["money"]}]

    def test_execute_blank_query(self, tool):
        assert asyncio.run(tool.execute("  ")) == []

    def test_loads_catalog_lazily_inside_running_loop(self, knowledge_dir):
        lazy = SearchKnowledgeTool(KnowledgeBase(identifiers=["help.json"], base=str(knowledge_dir)))

        async def agent_turn():
            return await lazy.execute("refund")

        assert [r["title"] for r in asyncio.run(agent_turn())] == ["Refunds"]

    def test_execute_without_catalog_returns_nothing(self, tmp_path):
        empty = SearchKnowledgeTool(KnowledgeBase(identifiers=["missing.json"], base=str(tmp_path)))
        assert asyncio.run(empty.execute("refund")) == []


def test_knowledge_base_without_catalog_raises(tmp_path):
    kb = KnowledgeBase(identifiers=["missing.json"], base=str(tmp_path))
    assert kb.reload() is False
    with pytest.raises(CatalogUnavailable):
        kb.search("refund")


class TestCli:
    def _base(self, knowledge_dir):
        return ["--files", "help.json,faq.json", "--base", str(knowledge_dir), "--log-level", "ERROR"]

    def test_search(self, knowledge_dir, capsys):
        code = cli.main(self._base(knowledge_dir) + ["search", "refund"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Refunds" in out
        assert "[15]" in out

    def test_merge_writes_document(self, knowledge_dir, tmp_path):
        out = tmp_path / "out" / "merged.json"
        assert cli.main(self._base(knowledge_dir) + ["merge", "--out", str(out)]) == 0
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert [c["name"] for c in doc["categories"]] == ["Billing", "Accounts"]
        assert doc["metadata"]["lastUpdated"] == "2024-05-20"

    def test_export_csv(self, knowledge_dir, tmp_path):
        out = tmp_path / "topics.csv"
        assert cli.main(self._base(knowledge_dir) + ["export", "--out", str(out)]) == 0
        df = pd.read_csv(out)
        assert list(df["title"]) == ["Refunds", "Invoices", "Reset password"]

    def test_topics_by_category(self, knowledge_dir, capsys):
        assert cli.main(self._base(knowledge_dir) + ["topics", "--category", "ACCOUNTS"]) == 0
        assert capsys.readouterr().out.strip() == "Reset password"

    def test_no_valid_sources(self, knowledge_dir):
        args = ["--files", "missing.json", "--base", str(knowledge_dir), "--log-level", "ERROR", "topics"]
        assert cli.main(args) == 1
