import pytest

from knowledge_base.ranking import rank_topics, score_topic, search

from conftest import make_catalog, make_category, make_topic


@pytest.fixture
def refund_topic():
    return make_topic("Refund Policy", "Returns are accepted within 30 days.", ["billing", "money"])


@pytest.fixture
def catalog(refund_topic):
    return make_catalog(
        [
            make_category(
                "Billing",
                [
                    refund_topic,
                    make_topic("Invoices", "Download invoices; refund notes are attached.", ["pdf"]),
                ],
            ),
            make_category(
                "Support",
                [
                    make_topic("Contact", "Email us.", ["refund desk"]),
                    make_topic("Hours", "Open 9-5.", ["schedule"]),
                    make_topic("Refunds FAQ", "Common questions.", ["faq"]),
                ],
            ),
        ]
    )


class TestScoreTopic:
    def test_scenario_b_tag_only(self, refund_topic):
        assert score_topic(refund_topic, "money") == 3

    def test_scenario_b_title_only(self, refund_topic):
        assert score_topic(refund_topic, "refund") == 10

    def test_title_and_tag(self):
        topic = make_topic("Money back", "No mention here.", ["money"])
        assert score_topic(topic, "money") == 13

    def test_all_fields(self):
        topic = make_topic("Refunds", "Refunds take a week.", ["refunds"])
        assert score_topic(topic, "REFUNDS") == 18

    def test_no_match_and_empty_query(self, refund_topic):
        assert score_topic(refund_topic, "shipping") == 0
        assert score_topic(refund_topic, "") == 0


class TestSearch:
    def test_sorted_by_score_then_encounter_order(self, catalog):
        results = search(catalog, "refund", 10)
        assert [t.title for t in results] == ["Refund Policy", "Refunds FAQ", "Invoices", "Contact"]

    def test_scores_descend_and_are_positive(self, catalog):
        ranked = rank_topics(catalog, "refund")
        scores = [s.score for s in ranked]
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)
        assert ranked[0].category == "Billing"

    def test_zero_score_topics_are_excluded(self, catalog):
        titles = [t.title for t in search(catalog, "refund", 10)]
        assert "Hours" not in titles

    def test_truncates_to_max_results(self, catalog):
        assert [t.title for t in search(catalog, "refund", 2)] == ["Refund Policy", "Refunds FAQ"]
        assert search(catalog, "refund", 0) == []

    @pytest.mark.parametrize("limit", [0, 1, 5])
    def test_empty_query_returns_nothing(self, catalog, limit):
        assert search(catalog, "", limit) == []

    def test_empty_catalog(self):
        assert search(make_catalog([]), "refund", 5) == []

    def test_case_insensitive(self, catalog):
        assert search(catalog, "REFUND POLICY", 5) == search(catalog, "refund policy", 5)

    @pytest.mark.parametrize("limit", [-1, 2.5, True, None])
    def test_rejects_invalid_limits(self, catalog, limit):
        with pytest.raises(ValueError):
            search(catalog, "refund", limit)
