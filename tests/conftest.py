import json
from pathlib import Path

import pytest

from knowledge_base.models import Catalog, CatalogMetadata, Category, Topic


def make_topic(title, content="", tags=None):
    return Topic(title=title, content=content, tags=list(tags or []))


def make_category(name, topics, description=""):
    return Category(name=name, description=description or f"{name} topics", topics=list(topics))


def make_catalog(categories, version="1.0", last_updated="2024-01-01", author="Docs Team"):
    return Catalog(
        categories=list(categories),
        metadata=CatalogMetadata(version=version, last_updated=last_updated, author=author),
    )


@pytest.fixture
def billing_source():
    return make_catalog(
        [make_category("Billing", [make_topic("Refunds", "How refunds work", ["money"])], "Payments and invoices")],
        version="1.2",
        last_updated="2024-03-01",
        author="Alice",
    )


@pytest.fixture
def billing_source_lower():
    return make_catalog(
        [
            make_category(
                "billing",
                [
                    make_topic("refunds", "Duplicate refunds entry", ["money"]),
                    make_topic("Invoices", "Where to find invoices", ["pdf"]),
                ],
                "A second description that loses",
            ),
            make_category("Accounts", [make_topic("Reset password", "Use the reset link", ["login"])]),
        ],
        version="1.10",
        last_updated="2024-05-20",
        author="Bob",
    )


@pytest.fixture
def knowledge_dir(tmp_path: Path, billing_source, billing_source_lower) -> Path:
    (tmp_path / "help.json").write_text(json.dumps(billing_source.to_document()), encoding="utf-8")
    (tmp_path / "faq.json").write_text(json.dumps(billing_source_lower.to_document()), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{ not json", encoding="utf-8")
    (tmp_path / "wrong_shape.json").write_text(json.dumps({"categories": []}), encoding="utf-8")
    return tmp_path
