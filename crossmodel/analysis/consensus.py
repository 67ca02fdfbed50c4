"""Consensus calculation over entity and sentiment outputs of several models."""

import logging
from typing import Dict, Iterable, List, Mapping

from crossmodel.analysis.models import (
    ConsensusLevel,
    EntityConsensusGroup,
    EntityModelMention,
    SentimentConsensus,
    SentimentVote,
)
from crossmodel.results.models import AnalysisResult

logger = logging.getLogger(__name__)


def entity_key(text: str) -> str:
    """Grouping key for an entity surface form."""
    return text.strip().lower()


def classify_type_consensus(types: Iterable[str]) -> ConsensusLevel:
    """Classify agreement from the asserted entity types.

    Cardinality rule, not a vote: one distinct type agrees, two are a partial
    agreement, three or more disagree.

    Raises:
        ValueError: If no types are given
    """
    distinct = {entity_type.strip().lower() for entity_type in types}
    if not distinct:
        raise ValueError("At least one entity type is required")
    if len(distinct) == 1:
        return "agree"
    if len(distinct) == 2:
        return "partial"
    return "disagree"


def resolve_entity_consensus(
    results: Mapping[str, AnalysisResult],
) -> List[EntityConsensusGroup]:
    """Group entity mentions across models by surface form.

    Models are visited in id order and entities in list order; a model that
    mentions the same form twice contributes its first mention only.

    Args:
        results: Dictionary mapping model ids to normalized results

    Returns:
        One consensus group per distinct (trimmed, case-insensitive) surface form
    """
    texts: Dict[str, str] = {}
    mentions: Dict[str, List[EntityModelMention]] = {}

    for model in sorted(results):
        for entity in results[model].entities:
            key = entity_key(entity.text)
            if not key:
                continue
            if key not in texts:
                texts[key] = entity.text.strip()
                mentions[key] = []
            if any(mention.model == model for mention in mentions[key]):
                continue
            mentions[key].append(
                EntityModelMention(
                    model=model,
                    type=entity.type,
                    confidence=entity.confidence,
                    context=entity.context,
                )
            )

    groups = [
        EntityConsensusGroup(
            text=texts[key],
            mentions=mentions[key],
            consensus=classify_type_consensus(m.type for m in mentions[key]),
        )
        for key in texts
    ]
    logger.debug("Resolved %d entity group(s)", len(groups))
    return groups


def resolve_sentiment_consensus(
    results: Mapping[str, AnalysisResult],
) -> SentimentConsensus:
    """Calculate sentiment consensus across models that report sentiment.

    Args:
        results: Dictionary mapping model ids to normalized results

    Returns:
        Consensus flag (exactly one distinct label), average confidence and
        the most frequent label. No reporting models gives no consensus and
        an average of 0.0.
    """
    votes = [
        SentimentVote(
            model=model,
            sentiment=results[model].sentiment.label,
            confidence=results[model].sentiment.confidence,
        )
        for model in sorted(results)
        if results[model].sentiment is not None
    ]

    if not votes:
        return SentimentConsensus()

    labels = [vote.sentiment for vote in votes]
    average_confidence = sum(vote.confidence for vote in votes) / len(votes)

    # Most frequent label; ties go to the label seen first
    dominant = max(dict.fromkeys(labels), key=labels.count)

    return SentimentConsensus(
        models=votes,
        consensus=len(set(labels)) == 1,
        average_confidence=average_confidence,
        dominant_label=dominant,
    )
