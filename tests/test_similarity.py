"""Tests for the containment similarity heuristic."""

from crossmodel.analysis.similarity import (
    ContainmentSimilarityScorer,
    InsightSimilarityScorer,
)


class TestContainmentSimilarityScorer:
    def setup_method(self):
        self.scorer = ContainmentSimilarityScorer()

    def test_topic_skips_stopwords(self):
        assert self.scorer.topic("The market is growing") == "market"

    def test_topic_strips_punctuation(self):
        assert self.scorer.topic('"Revenue," grew') == "revenue"

    def test_topic_falls_back_to_first_token(self):
        assert self.scorer.topic("The of and") == "the"

    def test_topic_of_empty_text(self):
        assert self.scorer.topic("") is None
        assert self.scorer.topic("  !!! ") is None

    def test_matches_on_contained_topic(self):
        assert self.scorer.matches("Revenue grew 20%", "Strong revenue growth this year")

    def test_matches_is_case_insensitive_and_symmetric(self):
        first, second = "REVENUE increased", "Quarterly revenue was flat"
        assert self.scorer.matches(first, second)
        assert self.scorer.matches(second, first)

    def test_unrelated_statements_do_not_match(self):
        assert not self.scorer.matches("Costs are rising", "Hiring slowed")

    def test_empty_statement_never_matches(self):
        assert not self.scorer.matches("", "Revenue grew")

    def test_custom_stopwords(self):
        scorer = ContainmentSimilarityScorer(stopwords=frozenset({"revenue"}))
        assert scorer.topic("Revenue grew") == "grew"

    def test_satisfies_protocol(self):
        assert isinstance(self.scorer, InsightSimilarityScorer)
