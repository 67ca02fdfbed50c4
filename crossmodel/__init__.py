"""Cross-model analysis consolidation and conflict resolution."""

from crossmodel.analysis.comparator import compare_all, compare_pair
from crossmodel.analysis.conflicts import detect_conflicts, resolve_conflict, suggest_resolution
from crossmodel.analysis.consensus import (
    resolve_entity_consensus,
    resolve_sentiment_consensus,
)
from crossmodel.analysis.engine import ConsolidationEngine, EngineRun
from crossmodel.analysis.models import (
    ComparisonPoint,
    ConflictingAnalysis,
    ConflictPoint,
    ConsolidatedInsights,
    EntityConsensusGroup,
    PairwiseComparison,
    SentimentConsensus,
)
from crossmodel.analysis.similarity import (
    ContainmentSimilarityScorer,
    InsightSimilarityScorer,
)
from crossmodel.analysis.synthesizer import consolidate
from crossmodel.config import EngineConfig
from crossmodel.export.report import export_report, export_report_json
from crossmodel.results.exceptions import (
    AlreadyResolvedError,
    ClampedValueWarning,
    ConsolidationError,
    InconsistentInputError,
    InsufficientDataError,
    MalformedResultError,
    UpstreamAuthError,
)
from crossmodel.results.models import AnalysisResult, EntityMention, SentimentEstimate
from crossmodel.results.normalizer import NormalizationReport, normalize
from crossmodel.results.registry import ModelDescriptor, ModelRegistry

__all__ = [
    "AlreadyResolvedError",
    "AnalysisResult",
    "ClampedValueWarning",
    "ComparisonPoint",
    "ConflictPoint",
    "ConflictingAnalysis",
    "ConsolidatedInsights",
    "ConsolidationEngine",
    "ConsolidationError",
    "ContainmentSimilarityScorer",
    "EngineConfig",
    "EngineRun",
    "EntityConsensusGroup",
    "EntityMention",
    "InconsistentInputError",
    "InsightSimilarityScorer",
    "InsufficientDataError",
    "MalformedResultError",
    "ModelDescriptor",
    "ModelRegistry",
    "NormalizationReport",
    "PairwiseComparison",
    "SentimentConsensus",
    "SentimentEstimate",
    "UpstreamAuthError",
    "compare_all",
    "compare_pair",
    "consolidate",
    "detect_conflicts",
    "export_report",
    "export_report_json",
    "normalize",
    "resolve_conflict",
    "resolve_entity_consensus",
    "resolve_sentiment_consensus",
    "suggest_resolution",
]
