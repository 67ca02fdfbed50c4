"""Pairwise comparison of normalized model results."""

import logging
from itertools import combinations
from typing import Dict, List, Mapping, Optional, Tuple

from crossmodel.analysis.models import ComparisonPoint, PairwiseComparison
from crossmodel.analysis.similarity import DEFAULT_SCORER, InsightSimilarityScorer
from crossmodel.results.models import AnalysisResult, EntityMention

logger = logging.getLogger(__name__)


def calculate_similarity(
    insights_a: List[str],
    insights_b: List[str],
    scorer: InsightSimilarityScorer = DEFAULT_SCORER,
) -> Tuple[float, List[Tuple[str, str]]]:
    """Calculate insight similarity between two models.

    An insight is common if it matches any insight of the other model. Matches
    are counted from both sides and the smaller count is taken, so similarity
    reaches 100 only when every insight on each side has a counterpart. The
    result is that count over the longer list, as a percentage. An empty list
    on either side yields 0.

    Returns:
        Tuple of (similarity in [0, 100], matched (insight_a, insight_b) pairs)
    """
    if not insights_a or not insights_b:
        return 0.0, []

    matched = []
    for insight in insights_a:
        for other in insights_b:
            if scorer.matches(insight, other):
                matched.append((insight, other))
                break

    matched_b = sum(
        1 for other in insights_b if any(scorer.matches(other, insight) for insight in insights_a)
    )

    total = max(len(insights_a), len(insights_b))
    similarity = min(len(matched), matched_b) / total * 100
    return min(100.0, max(0.0, similarity)), matched


def _first_mentions(entities: List[EntityMention]) -> Dict[str, EntityMention]:
    """First mention per lowercased surface form, in list order."""
    mentions: Dict[str, EntityMention] = {}
    for entity in entities:
        key = entity.text.strip().lower()
        if key not in mentions:
            mentions[key] = entity
    return mentions


def _point(
    category: str,
    content: str,
    confidences: Dict[str, float],
    positions: Optional[Dict[str, str]] = None,
) -> ComparisonPoint:
    return ComparisonPoint(
        category=category,
        content=content,
        confidence=sum(confidences.values()) / len(confidences),
        contributing_models=list(confidences.keys()),
        model_confidences=confidences,
        positions=positions or {},
    )


def _entity_points(
    a: AnalysisResult, b: AnalysisResult
) -> Tuple[List[ComparisonPoint], List[ComparisonPoint]]:
    agreements, differences = [], []
    mentions_a = _first_mentions(a.entities)
    mentions_b = _first_mentions(b.entities)

    for key, entity_a in mentions_a.items():
        entity_b = mentions_b.get(key)
        if entity_b is None:
            differences.append(
                _point(
                    "entity",
                    f"'{entity_a.text}' ({entity_a.type}) only reported by {a.model}",
                    {a.model: entity_a.confidence},
                    {a.model: entity_a.type},
                )
            )
            continue

        confidences = {a.model: entity_a.confidence, b.model: entity_b.confidence}
        positions = {a.model: entity_a.type, b.model: entity_b.type}
        if entity_a.type.lower() == entity_b.type.lower():
            agreements.append(
                _point(
                    "entity",
                    f"'{entity_a.text}' identified as {entity_a.type}",
                    confidences,
                    positions,
                )
            )
        else:
            differences.append(
                _point(
                    "entity",
                    f"'{entity_a.text}' classified as {entity_a.type} by {a.model} "
                    f"but {entity_b.type} by {b.model}",
                    confidences,
                    positions,
                )
            )

    for key, entity_b in mentions_b.items():
        if key not in mentions_a:
            differences.append(
                _point(
                    "entity",
                    f"'{entity_b.text}' ({entity_b.type}) only reported by {b.model}",
                    {b.model: entity_b.confidence},
                    {b.model: entity_b.type},
                )
            )

    return agreements, differences


def _sentiment_point(a: AnalysisResult, b: AnalysisResult) -> Tuple[Optional[ComparisonPoint], bool]:
    """Sentiment point for the pair and whether it is an agreement."""
    if a.sentiment is None or b.sentiment is None:
        return None, False

    confidences = {a.model: a.sentiment.confidence, b.model: b.sentiment.confidence}
    positions = {a.model: a.sentiment.label, b.model: b.sentiment.label}
    if a.sentiment.label == b.sentiment.label:
        return _point(
            "sentiment", f"Both report {a.sentiment.label} sentiment", confidences, positions
        ), True
    return _point(
        "sentiment",
        f"{a.model} reports {a.sentiment.label} sentiment, "
        f"{b.model} reports {b.sentiment.label}",
        confidences,
        positions,
    ), False


def _recommendation_points(
    a: AnalysisResult,
    b: AnalysisResult,
    scorer: InsightSimilarityScorer,
) -> Tuple[List[ComparisonPoint], List[ComparisonPoint]]:
    if not a.recommendations or not b.recommendations:
        return [], []

    confidences = {a.model: a.confidence, b.model: b.confidence}
    agreements = []
    for recommendation in a.recommendations:
        for other in b.recommendations:
            if scorer.matches(recommendation, other):
                agreements.append(
                    _point(
                        "recommendation",
                        recommendation,
                        confidences,
                        {a.model: recommendation, b.model: other},
                    )
                )
                break

    if agreements:
        return agreements, []
    return [], [
        _point(
            "recommendation",
            f"No overlapping recommendations between {a.model} and {b.model}",
            confidences,
            {
                a.model: "; ".join(a.recommendations),
                b.model: "; ".join(b.recommendations),
            },
        )
    ]


def compare_pair(
    first: AnalysisResult,
    second: AnalysisResult,
    scorer: Optional[InsightSimilarityScorer] = None,
) -> PairwiseComparison:
    """Compare two normalized results for the same content.

    The pair is reordered by model id, so ``compare_pair(x, y)`` and
    ``compare_pair(y, x)`` are equal.

    Args:
        first: One model's result
        second: Another model's result
        scorer: Insight similarity scorer (containment heuristic by default)

    Returns:
        Immutable pairwise comparison

    Raises:
        ValueError: If both results come from the same model
    """
    if first.model == second.model:
        raise ValueError(f"Cannot compare {first.model} with itself")

    scorer = scorer or DEFAULT_SCORER
    a, b = sorted((first, second), key=lambda result: result.model)

    similarity, matched = calculate_similarity(a.insights, b.insights, scorer)

    agreements = [
        _point(
            "insight",
            insight_a,
            {a.model: a.confidence, b.model: b.confidence},
            {a.model: insight_a, b.model: insight_b},
        )
        for insight_a, insight_b in matched
    ]
    differences = []

    entity_agreements, entity_differences = _entity_points(a, b)
    agreements.extend(entity_agreements)
    differences.extend(entity_differences)

    sentiment, agreed = _sentiment_point(a, b)
    if sentiment is not None:
        (agreements if agreed else differences).append(sentiment)

    recommendation_agreements, recommendation_differences = _recommendation_points(
        a, b, scorer
    )
    agreements.extend(recommendation_agreements)
    differences.extend(recommendation_differences)

    return PairwiseComparison(
        model_a=a.model,
        model_b=b.model,
        similarity=similarity,
        agreements=agreements,
        differences=differences,
        model_confidences={a.model: a.confidence, b.model: b.confidence},
        insight_counts={a.model: len(a.insights), b.model: len(b.insights)},
        summary=(
            f"{a.model} and {b.model} show {similarity:.1f}% similarity in their analysis."
        ),
    )


def compare_all(
    results: Mapping[str, AnalysisResult],
    scorer: Optional[InsightSimilarityScorer] = None,
) -> List[PairwiseComparison]:
    """Compare every unordered pair of models.

    Args:
        results: Dictionary mapping model ids to normalized results

    Returns:
        One comparison per pair, ordered by (model_a, model_b)
    """
    models = sorted(results)
    comparisons = [
        compare_pair(results[model_a], results[model_b], scorer)
        for model_a, model_b in combinations(models, 2)
    ]
    logger.debug("Compared %d model pair(s)", len(comparisons))
    return comparisons
