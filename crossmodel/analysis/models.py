"""Models for cross-model comparison, consensus and consolidation."""

import threading
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, PrivateAttr, computed_field, model_validator

from crossmodel.results.exceptions import AlreadyResolvedError
from crossmodel.results.models import CamelModel, SentimentLabel

PointCategory = Literal["insight", "entity", "sentiment", "recommendation", "topic"]
ConsensusLevel = Literal["agree", "partial", "disagree"]
ConflictCategory = Literal["interpretation", "confidence", "classification", "recommendation"]
Severity = Literal["low", "medium", "high"]
InsightsStatus = Literal["ok", "no_analysis", "auth_required"]

SEVERITY_RANK = {"high": 0, "medium": 1, "low": 2}

# Serializes resolution writes across threads
_RESOLUTION_LOCK = threading.Lock()


class ComparisonPoint(CamelModel):
    """A single agreement or difference between two models."""

    model_config = ConfigDict(frozen=True)

    category: PointCategory
    content: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    contributing_models: List[str] = Field(default_factory=list)
    model_confidences: Dict[str, float] = Field(default_factory=dict)
    positions: Dict[str, str] = Field(default_factory=dict)


class PairwiseComparison(CamelModel):
    """Comparison of two models' results, stored in canonical model order."""

    model_config = ConfigDict(frozen=True)

    model_a: str
    model_b: str
    similarity: float = Field(..., ge=0.0, le=100.0)
    agreements: List[ComparisonPoint] = Field(default_factory=list)
    differences: List[ComparisonPoint] = Field(default_factory=list)
    model_confidences: Dict[str, float] = Field(default_factory=dict)
    insight_counts: Dict[str, int] = Field(default_factory=dict)
    summary: str = ""

    @property
    def models(self) -> List[str]:
        return [self.model_a, self.model_b]

    def involves(self, model: str) -> bool:
        return model in (self.model_a, self.model_b)


class EntityModelMention(CamelModel):
    """One model's reading of an entity surface form."""

    model: str
    type: str
    confidence: float
    context: Optional[str] = None


class EntityConsensusGroup(CamelModel):
    """All models' mentions of one entity surface form."""

    text: str
    mentions: List[EntityModelMention] = Field(..., min_length=1)
    consensus: ConsensusLevel

    @property
    def distinct_types(self) -> List[str]:
        """Distinct asserted types, in first-seen order."""
        seen: List[str] = []
        for mention in self.mentions:
            if mention.type not in seen:
                seen.append(mention.type)
        return seen

    @property
    def models(self) -> List[str]:
        return [mention.model for mention in self.mentions]


class SentimentVote(CamelModel):
    model: str
    sentiment: SentimentLabel
    confidence: float


class SentimentConsensus(CamelModel):
    """Aggregate of the sentiment labels reported by the models."""

    models: List[SentimentVote] = Field(default_factory=list)
    consensus: bool = False
    average_confidence: float = 0.0
    dominant_label: Optional[SentimentLabel] = None


class ConflictPoint(CamelModel):
    """A categorized, severity-ranked disagreement between models.

    ``resolution`` is a single-assignment cell: set it through ``resolve``.
    """

    category: ConflictCategory
    description: str
    perspective_a: str
    perspective_b: str
    severity: Severity
    models: List[str] = Field(default_factory=list)
    model_confidences: Dict[str, float] = Field(default_factory=dict)
    positions: Dict[str, str] = Field(default_factory=dict)

    _resolution: Optional[str] = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def restore_resolution(cls, data: Any, handler):
        """Reattach a resolution carried by a dumped conflict."""
        resolution = data.get("resolution") if isinstance(data, dict) else None
        conflict = handler(data)
        if resolution is not None and not conflict.is_resolved:
            conflict.resolve(resolution)
        return conflict

    @computed_field
    @property
    def resolution(self) -> Optional[str]:
        return self._resolution

    @property
    def is_resolved(self) -> bool:
        return self._resolution is not None

    def resolve(self, resolution: str) -> None:
        """Attach a resolution.

        Raises:
            ValueError: If the resolution text is empty
            AlreadyResolvedError: If the conflict was already resolved
        """
        if not resolution or not resolution.strip():
            raise ValueError("Resolution must be non-empty text")

        with _RESOLUTION_LOCK:
            if self._resolution is not None:
                raise AlreadyResolvedError(
                    f"Conflict already resolved: {self.description}",
                    existing_resolution=self._resolution,
                )
            self._resolution = resolution.strip()


class ConflictingAnalysis(CamelModel):
    """A conflict as reported in the consolidated judgment."""

    finding: str
    category: Optional[ConflictCategory] = None
    severity: Optional[Severity] = None
    models: List[str] = Field(default_factory=list)
    confidence: Dict[str, float] = Field(default_factory=dict)
    resolution: Optional[str] = None


class ConsolidatedInsights(CamelModel):
    """Single consolidated judgment over all model outputs."""

    summary: str
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    common_findings: List[str] = Field(default_factory=list)
    conflicting_analyses: List[ConflictingAnalysis] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    status: InsightsStatus = "ok"
    models_used: List[str] = Field(default_factory=list)

    @property
    def has_analysis(self) -> bool:
        return self.status == "ok"

    @property
    def requires_action(self) -> bool:
        """True when the consumer must prompt the user to regain access."""
        return self.status == "auth_required"
