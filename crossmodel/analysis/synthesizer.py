"""Synthesis of all per-model and cross-model analysis into one judgment."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from crossmodel.analysis.models import (
    ConflictingAnalysis,
    ConflictPoint,
    ConsolidatedInsights,
    EntityConsensusGroup,
    PairwiseComparison,
    SentimentConsensus,
)
from crossmodel.analysis.similarity import DEFAULT_SCORER, InsightSimilarityScorer
from crossmodel.config import EngineConfig
from crossmodel.results.exceptions import InsufficientDataError, UpstreamAuthError
from crossmodel.results.models import AnalysisResult

logger = logging.getLogger(__name__)

AUTH_REQUIRED_SUMMARY = (
    "Authentication required to access AI analysis features. Please log in to continue."
)
AUTH_REQUIRED_ACTIONS = [
    "Log in to your account to access AI analysis",
    "If you don't have an account, please register first",
    "Check that your session hasn't expired",
]
NO_ANALYSIS_SUMMARY = "No analysis available: no model produced a usable result."
NO_ANALYSIS_ACTIONS = [
    "Retry the analysis with different AI models",
    "Check the content format and size",
]


def auth_required_insights() -> ConsolidatedInsights:
    """Judgment for an upstream authentication failure."""
    return ConsolidatedInsights(
        summary=AUTH_REQUIRED_SUMMARY,
        confidence_score=0.0,
        recommended_actions=list(AUTH_REQUIRED_ACTIONS),
        status="auth_required",
    )


def no_analysis_insights() -> ConsolidatedInsights:
    """Judgment when no model produced usable output."""
    return ConsolidatedInsights(
        summary=NO_ANALYSIS_SUMMARY,
        confidence_score=0.0,
        recommended_actions=list(NO_ANALYSIS_ACTIONS),
        status="no_analysis",
    )


def calculate_confidence_score(
    confidences: Sequence[float],
    consolidated_confidence: Optional[float] = None,
) -> float:
    """Mean model confidence, averaged with a consolidated-level estimate.

    The result never exceeds the highest individual confidence, and is 0 for
    an empty input.
    """
    if not confidences:
        return 0.0

    score = sum(confidences) / len(confidences)
    if consolidated_confidence is not None:
        score = (score + min(1.0, max(0.0, consolidated_confidence))) / 2
    return min(score, max(confidences))


def _common_entities(
    entity_groups: Sequence[EntityConsensusGroup], usable: Sequence[str]
) -> List[str]:
    findings = []
    for group in entity_groups:
        if group.consensus != "agree":
            continue
        supporting = [model for model in group.models if model in usable]
        if len(supporting) * 2 > len(usable):
            entity_type = group.mentions[0].type
            findings.append(f"Entity: {group.text} ({entity_type})")
    return findings


def _common_insights(
    results: Mapping[str, AnalysisResult],
    usable: Sequence[str],
    scorer: InsightSimilarityScorer,
) -> List[str]:
    """Insights agreed on by at least half of all model pairs, deduplicated.

    An insight carried by k models (its source plus every model with a
    matching insight) accounts for k * (k - 1) / 2 agreeing pairs.
    """
    total_pairs = len(usable) * (len(usable) - 1) // 2
    findings: List[str] = []

    for model in usable:
        for insight in results[model].insights:
            carriers = 1 + sum(
                1
                for other in usable
                if other != model
                and any(scorer.matches(insight, o) for o in results[other].insights)
            )
            agreeing_pairs = carriers * (carriers - 1) // 2
            if agreeing_pairs * 2 < total_pairs:
                continue
            if any(scorer.matches(insight, found) for found in findings):
                continue
            findings.append(insight)
    return findings


def prioritize_recommendations(
    results: Mapping[str, AnalysisResult],
    usable: Sequence[str],
    scorer: InsightSimilarityScorer = DEFAULT_SCORER,
) -> List[str]:
    """Deduplicate recommendations and order them by support.

    Similar recommendations (containment heuristic) are merged under the first
    one seen. Groups are ordered by number of proposing models, then by those
    models' average confidence, then by first appearance.
    """
    groups: List[Dict] = []
    for model in usable:
        for recommendation in results[model].recommendations:
            for group in groups:
                if scorer.matches(recommendation, group["text"]):
                    if model not in group["models"]:
                        group["models"].append(model)
                    break
            else:
                groups.append({"text": recommendation, "models": [model]})

    def priority(indexed_group):
        index, group = indexed_group
        confidences = [results[m].confidence for m in group["models"]]
        return (-len(group["models"]), -sum(confidences) / len(confidences), index)

    ordered = sorted(enumerate(groups), key=priority)
    return [group["text"] for _, group in ordered]


def _conflicting_analyses(conflicts: Sequence[ConflictPoint]) -> List[ConflictingAnalysis]:
    return [
        ConflictingAnalysis(
            finding=conflict.description,
            category=conflict.category,
            severity=conflict.severity,
            models=list(conflict.models),
            confidence=dict(conflict.model_confidences),
            resolution=conflict.resolution,
        )
        for conflict in conflicts
    ]


def _summary(
    results: Mapping[str, AnalysisResult],
    usable: Sequence[str],
    comparisons: Sequence[PairwiseComparison],
    conflicts: Sequence[ConflictPoint],
    sentiment: Optional[SentimentConsensus],
) -> str:
    parts = [
        f"Multi-model analysis completed using {len(usable)} model(s): {', '.join(usable)}."
    ]

    if comparisons:
        average = sum(c.similarity for c in comparisons) / len(comparisons)
        parts.append(f"Average pairwise similarity is {average:.1f}%.")

    if sentiment is not None and sentiment.models:
        if sentiment.consensus:
            parts.append(f"Models agree on {sentiment.dominant_label} sentiment.")
        else:
            parts.append("Models disagree on overall sentiment.")

    if conflicts:
        high = sum(1 for c in conflicts if c.severity == "high")
        parts.append(f"{len(conflicts)} conflict(s) detected, {high} high severity.")
    else:
        parts.append("No conflicts detected.")

    # Lead with the most confident model's own summary
    lead = max(usable, key=lambda model: (results[model].confidence, -usable.index(model)))
    if results[lead].summary:
        parts.append(results[lead].summary)

    return " ".join(parts)


def consolidate(
    results: Mapping[str, AnalysisResult],
    comparisons: Sequence[PairwiseComparison],
    entity_groups: Sequence[EntityConsensusGroup],
    conflicts: Sequence[ConflictPoint],
    *,
    sentiment: Optional[SentimentConsensus] = None,
    consolidated_confidence: Optional[float] = None,
    upstream_error: Optional[Exception] = None,
    strict: bool = False,
    scorer: Optional[InsightSimilarityScorer] = None,
    config: Optional[EngineConfig] = None,
) -> ConsolidatedInsights:
    """Combine normalized results, consensus and conflicts into one judgment.

    Never raises for empty input unless ``strict`` is set: an empty or
    unusable result set yields a ``no_analysis`` judgment, and an upstream
    ``UpstreamAuthError`` yields an ``auth_required`` one.

    Args:
        results: Dictionary mapping model ids to normalized results
        comparisons: Pairwise comparisons of the results
        entity_groups: Entity consensus groups of the results
        conflicts: Ranked conflicts
        sentiment: Sentiment consensus, used in the summary
        consolidated_confidence: Optional consolidated-level confidence estimate
        upstream_error: Error reported by the model invocation layer
        strict: Raise InsufficientDataError instead of degrading
        scorer: Insight similarity scorer
        config: Output limits

    Returns:
        Consolidated insights

    Raises:
        InsufficientDataError: If strict and no model produced usable output
    """
    config = config or EngineConfig()
    scorer = scorer or DEFAULT_SCORER

    if isinstance(upstream_error, UpstreamAuthError):
        logger.warning("Upstream authentication failure: %s", upstream_error)
        return auth_required_insights()

    # A model reporting zero confidence contributes nothing
    usable = [model for model in sorted(results) if results[model].confidence > 0]

    if not usable:
        if strict:
            raise InsufficientDataError("No model produced a usable result")
        logger.warning("No usable model output to consolidate")
        return no_analysis_insights()

    common_findings = _common_entities(entity_groups, usable) + _common_insights(
        results, usable, scorer
    )
    recommended_actions = prioritize_recommendations(results, usable, scorer)

    if config.max_common_findings is not None:
        common_findings = common_findings[: config.max_common_findings]
    if config.max_recommended_actions is not None:
        recommended_actions = recommended_actions[: config.max_recommended_actions]

    insights = ConsolidatedInsights(
        summary=_summary(results, usable, comparisons, conflicts, sentiment),
        confidence_score=calculate_confidence_score(
            [results[model].confidence for model in usable], consolidated_confidence
        ),
        common_findings=common_findings,
        conflicting_analyses=_conflicting_analyses(conflicts),
        recommended_actions=recommended_actions,
        status="ok",
        models_used=usable,
    )
    logger.info(
        "Consolidated %d model(s) with confidence %.2f",
        len(usable),
        insights.confidence_score,
    )
    return insights
