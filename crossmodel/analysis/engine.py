"""Main orchestrator for cross-model consolidation."""

import logging
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from crossmodel.analysis.comparator import compare_all
from crossmodel.analysis.conflicts import detect_conflicts, resolve_conflict
from crossmodel.analysis.consensus import (
    resolve_entity_consensus,
    resolve_sentiment_consensus,
)
from crossmodel.analysis.models import (
    ConflictPoint,
    ConsolidatedInsights,
    EntityConsensusGroup,
    PairwiseComparison,
    SentimentConsensus,
)
from crossmodel.analysis.similarity import DEFAULT_SCORER, InsightSimilarityScorer
from crossmodel.analysis.synthesizer import consolidate
from crossmodel.config import EngineConfig
from crossmodel.results.normalizer import NormalizationReport, normalize
from crossmodel.results.registry import ModelRegistry

logger = logging.getLogger(__name__)


class EngineRun(BaseModel):
    """Everything derived from one consolidation run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    report: NormalizationReport
    comparisons: List[PairwiseComparison] = Field(default_factory=list)
    entity_groups: List[EntityConsensusGroup] = Field(default_factory=list)
    sentiment: SentimentConsensus = Field(default_factory=SentimentConsensus)
    conflicts: List[ConflictPoint] = Field(default_factory=list)
    insights: ConsolidatedInsights

    def comparison_for(self, first: str, second: str) -> Optional[PairwiseComparison]:
        """Look up the comparison of two models in either order."""
        model_a, model_b = sorted((first, second))
        for comparison in self.comparisons:
            if comparison.model_a == model_a and comparison.model_b == model_b:
                return comparison
        return None


class ConsolidationEngine:
    """Runs normalization, comparison, consensus, conflict detection and synthesis."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[ModelRegistry] = None,
        scorer: Optional[InsightSimilarityScorer] = None,
    ):
        """Initialize engine.

        Args:
            config: Calibration thresholds and output limits
            registry: Supported models; when None any model id is accepted
            scorer: Insight similarity scorer (containment heuristic by default)
        """
        self.config = config or EngineConfig()
        self.registry = registry
        self.scorer = scorer or DEFAULT_SCORER

    def run(
        self,
        raw_results: Mapping[str, Any],
        upstream_error: Optional[Exception] = None,
        consolidated_confidence: Optional[float] = None,
        suggest_resolutions: bool = False,
    ) -> EngineRun:
        """Consolidate raw per-model results.

        Args:
            raw_results: Dictionary mapping model ids to raw result records
            upstream_error: Error from the model invocation layer, if any
            consolidated_confidence: Optional consolidated-level confidence estimate
            suggest_resolutions: Attach a suggested resolution to every conflict

        Returns:
            Engine run with all derived structures
        """
        report = normalize(raw_results, self.registry)
        results = report.results

        comparisons = compare_all(results, self.scorer)
        entity_groups = resolve_entity_consensus(results)
        sentiment = resolve_sentiment_consensus(results)
        conflicts = detect_conflicts(comparisons, entity_groups, sentiment, self.config)
        if suggest_resolutions:
            for conflict in conflicts:
                resolve_conflict(conflict, config=self.config)

        insights = consolidate(
            results,
            comparisons,
            entity_groups,
            conflicts,
            sentiment=sentiment,
            consolidated_confidence=consolidated_confidence,
            upstream_error=upstream_error,
            scorer=self.scorer,
            config=self.config,
        )

        return EngineRun(
            report=report,
            comparisons=comparisons,
            entity_groups=entity_groups,
            sentiment=sentiment,
            conflicts=conflicts,
            insights=insights,
        )
