"""Verify the public package surface."""

import crossmodel


def test_public_names_are_importable():
    missing = [name for name in crossmodel.__all__ if not hasattr(crossmodel, name)]
    assert missing == []


def test_default_pipeline_from_package_root():
    raw = {
        "gpt-4": {"confidence": 0.8, "status": "completed", "results": {"keyInsights": ["Revenue grew"]}},
        "claude-3": {"confidence": 0.6, "status": "completed", "results": {"keyInsights": ["Revenue is up"]}},
    }

    report = crossmodel.normalize(raw)
    comparisons = crossmodel.compare_all(report.results)
    groups = crossmodel.resolve_entity_consensus(report.results)
    sentiment = crossmodel.resolve_sentiment_consensus(report.results)
    conflicts = crossmodel.detect_conflicts(comparisons, groups, sentiment)
    insights = crossmodel.consolidate(report.results, comparisons, groups, conflicts)

    assert comparisons[0].similarity == 100.0
    assert conflicts == []
    assert insights.common_findings == ["Revenue is up"]
    assert isinstance(insights, crossmodel.ConsolidatedInsights)
