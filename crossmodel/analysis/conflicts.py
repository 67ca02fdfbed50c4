"""Conflict detection, severity ranking and resolution suggestions."""

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Set

from crossmodel.analysis.models import (
    SEVERITY_RANK,
    ConflictPoint,
    EntityConsensusGroup,
    PairwiseComparison,
    SentimentConsensus,
    Severity,
)
from crossmodel.config import EngineConfig
from crossmodel.results.exceptions import InconsistentInputError

logger = logging.getLogger(__name__)

HIGH_SEVERITY_ENTITY_TYPES = frozenset({"person", "organization"})

# Agreement categories whose per-model confidences refer to the same claim
SAME_CLAIM_CATEGORIES = ("entity", "sentiment")


def confidence_spread(confidences: Iterable[float]) -> float:
    values = list(confidences)
    if len(values) < 2:
        return 0.0
    return max(values) - min(values)


def grade_severity(
    confidences: Dict[str, float],
    config: EngineConfig,
    high: bool = False,
) -> Severity:
    """Grade a conflict: high if flagged, medium on a wide confidence spread, else low."""
    if high:
        return "high"
    if confidence_spread(confidences.values()) > config.confidence_spread_medium:
        return "medium"
    return "low"


def _check_inputs(
    comparisons: Sequence[PairwiseComparison],
    entity_groups: Sequence[EntityConsensusGroup],
    sentiment: SentimentConsensus,
) -> None:
    compared: Set[str] = set()
    for comparison in comparisons:
        compared.update(comparison.models)

    referenced: Set[str] = {vote.model for vote in sentiment.models}
    for group in entity_groups:
        referenced.update(group.models)

    if comparisons:
        missing = referenced - compared
        if missing:
            raise InconsistentInputError(
                f"Models {sorted(missing)} appear in consensus inputs but not in comparisons"
            )
    elif len(referenced) > 1:
        raise InconsistentInputError(
            f"Consensus inputs reference {sorted(referenced)} but no comparisons were given"
        )


def _entity_conflicts(
    entity_groups: Sequence[EntityConsensusGroup], config: EngineConfig
) -> List[ConflictPoint]:
    conflicts = []
    for group in entity_groups:
        if group.consensus == "agree":
            continue

        by_type: Dict[str, List[str]] = {}
        for mention in group.mentions:
            by_type.setdefault(mention.type.strip().lower(), []).append(mention.model)
        views = [f"{entity_type}: {', '.join(models)}" for entity_type, models in by_type.items()]

        if group.consensus == "disagree" and HIGH_SEVERITY_ENTITY_TYPES & set(by_type):
            severity: Severity = "high"
        else:
            severity = "medium"

        conflicts.append(
            ConflictPoint(
                category="classification",
                description=(
                    f"Models classify '{group.text}' as {len(by_type)} different types"
                ),
                perspective_a=views[0],
                perspective_b="; ".join(views[1:]),
                severity=severity,
                models=group.models,
                model_confidences={m.model: m.confidence for m in group.mentions},
                positions={m.model: m.type.strip().lower() for m in group.mentions},
            )
        )
    return conflicts


def _model_confidences(comparisons: Sequence[PairwiseComparison]) -> Dict[str, float]:
    """Overall confidence of each compared model."""
    confidences: Dict[str, float] = {}
    for comparison in comparisons:
        confidences.update(comparison.model_confidences)
    return confidences


def _sentiment_conflicts(
    sentiment: SentimentConsensus,
    model_confidences: Dict[str, float],
    config: EngineConfig,
) -> List[ConflictPoint]:
    """Conflicts between every pair of differing sentiment labels.

    A pair is high severity when either model is confident, judged by the
    larger of its sentiment confidence and its overall confidence.
    """
    conflicts = []
    for first, second in combinations(sentiment.models, 2):
        if first.sentiment == second.sentiment:
            continue

        confidences = {first.model: first.confidence, second.model: second.confidence}
        strongest = max(
            max(vote.confidence, model_confidences.get(vote.model, 0.0))
            for vote in (first, second)
        )
        high = strongest >= config.conflict_high_confidence_threshold
        conflicts.append(
            ConflictPoint(
                category="interpretation",
                description=(
                    f"Sentiment disagreement between {first.model} and {second.model}"
                ),
                perspective_a=(
                    f"{first.model}: {first.sentiment} ({first.confidence:.0%} confidence)"
                ),
                perspective_b=(
                    f"{second.model}: {second.sentiment} ({second.confidence:.0%} confidence)"
                ),
                severity=grade_severity(confidences, config, high=high),
                models=[first.model, second.model],
                model_confidences=confidences,
                positions={first.model: first.sentiment, second.model: second.sentiment},
            )
        )
    return conflicts


def _comparison_conflicts(
    comparisons: Sequence[PairwiseComparison], config: EngineConfig
) -> List[ConflictPoint]:
    conflicts = []
    for comparison in comparisons:
        a, b = comparison.model_a, comparison.model_b

        for point in comparison.agreements:
            if point.category not in SAME_CLAIM_CATEGORIES:
                continue
            spread = confidence_spread(point.model_confidences.values())
            if spread <= config.confidence_spread_medium:
                continue
            conflicts.append(
                ConflictPoint(
                    category="confidence",
                    description=f"Confidence gap of {spread:.0%} on: {point.content}",
                    perspective_a=f"{a}: {point.model_confidences[a]:.0%} confidence",
                    perspective_b=f"{b}: {point.model_confidences[b]:.0%} confidence",
                    severity="medium",
                    models=[a, b],
                    model_confidences=dict(point.model_confidences),
                    positions=dict(point.positions),
                )
            )

        for point in comparison.differences:
            if point.category != "recommendation":
                continue
            conflicts.append(
                ConflictPoint(
                    category="recommendation",
                    description=point.content,
                    perspective_a=f"{a}: {point.positions.get(a, '')}",
                    perspective_b=f"{b}: {point.positions.get(b, '')}",
                    severity=grade_severity(comparison.model_confidences, config),
                    models=[a, b],
                    model_confidences=dict(comparison.model_confidences),
                    positions=dict(point.positions),
                )
            )

        counts = comparison.insight_counts
        if (
            counts.get(a, 0) > 0
            and counts.get(b, 0) > 0
            and comparison.similarity < config.low_similarity_threshold
        ):
            conflicts.append(
                ConflictPoint(
                    category="interpretation",
                    description=(
                        f"{a} and {b} emphasize different insights "
                        f"({comparison.similarity:.1f}% similarity)"
                    ),
                    perspective_a=f"{a}: {counts[a]} insight(s)",
                    perspective_b=f"{b}: {counts[b]} insight(s)",
                    severity=grade_severity(comparison.model_confidences, config),
                    models=[a, b],
                    model_confidences=dict(comparison.model_confidences),
                )
            )
    return conflicts


def rank_conflicts(conflicts: Iterable[ConflictPoint]) -> List[ConflictPoint]:
    """Order conflicts by severity (high first), then category, then description."""
    return sorted(
        conflicts,
        key=lambda c: (SEVERITY_RANK[c.severity], c.category, c.description),
    )


def detect_conflicts(
    comparisons: Sequence[PairwiseComparison],
    entity_groups: Sequence[EntityConsensusGroup],
    sentiment: SentimentConsensus,
    config: Optional[EngineConfig] = None,
) -> List[ConflictPoint]:
    """Detect and rank disagreements between models.

    Args:
        comparisons: Pairwise comparisons of the models
        entity_groups: Entity consensus groups over the same models
        sentiment: Sentiment consensus over the same models
        config: Calibration thresholds (defaults when None)

    Returns:
        Conflicts ranked by severity

    Raises:
        InconsistentInputError: If the inputs do not describe the same models
    """
    config = config or EngineConfig()
    _check_inputs(comparisons, entity_groups, sentiment)

    conflicts = (
        _entity_conflicts(entity_groups, config)
        + _sentiment_conflicts(sentiment, _model_confidences(comparisons), config)
        + _comparison_conflicts(comparisons, config)
    )
    ranked = rank_conflicts(conflicts)

    if ranked:
        logger.info(
            "Detected %d conflict(s) (%d high severity)",
            len(ranked),
            sum(1 for c in ranked if c.severity == "high"),
        )
    return ranked


def suggest_resolution(
    conflict: ConflictPoint, config: Optional[EngineConfig] = None
) -> str:
    """Propose a resolution for a conflict.

    Strategies, in order: majority rule when a strict majority of models hold
    the same position; confidence weighted when the most confident model leads
    the runner-up by more than the spread threshold; otherwise expert review.
    """
    config = config or EngineConfig()

    supporters: Dict[str, List[str]] = {}
    for model in sorted(conflict.positions):
        supporters.setdefault(conflict.positions[model], []).append(model)

    if supporters:
        position, models = max(supporters.items(), key=lambda item: len(item[1]))
        if len(models) * 2 > len(conflict.positions):
            return (
                f"Majority rule: {', '.join(models)} ({len(models)} of "
                f"{len(conflict.positions)} models) support '{position}'."
            )

    ranked = sorted(conflict.model_confidences.items(), key=lambda item: (-item[1], item[0]))
    if len(ranked) >= 2 and ranked[0][1] - ranked[1][1] > config.confidence_spread_medium:
        model, confidence = ranked[0]
        position = conflict.positions.get(model)
        stance = f"'{position}'" if position else "interpretation"
        return (
            f"Confidence weighted: adopt {model}'s {stance} "
            f"({confidence:.0%} confidence)."
        )

    return f"Expert review recommended: {conflict.description}."


def resolve_conflict(
    conflict: ConflictPoint,
    resolution: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> str:
    """Resolve a conflict with the given text, or a suggested one.

    Returns:
        The resolution text that was attached

    Raises:
        AlreadyResolvedError: If the conflict already carries a resolution
    """
    text = resolution or suggest_resolution(conflict, config)
    conflict.resolve(text)
    logger.info("Resolved %s conflict: %s", conflict.category, text)
    return text
