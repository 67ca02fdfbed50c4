"""Models for per-model analysis results."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SentimentLabel = Literal["positive", "negative", "neutral"]
SENTIMENT_LABELS = ("positive", "negative", "neutral")


class CamelModel(BaseModel):
    """Base model serializing to the camelCase wire format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class EntityMention(CamelModel):
    """A single entity mention extracted by one model."""

    text: str
    type: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    context: Optional[str] = None


class SentimentEstimate(CamelModel):
    """Overall sentiment reported by one model."""

    label: SentimentLabel
    confidence: float = Field(..., ge=0.0, le=1.0)


class AnalysisResult(CamelModel):
    """Normalized analysis output of one model for one content item."""

    model: str
    confidence: float = Field(..., ge=0.0, le=1.0, description="Model's trust in its own output (0-1)")
    processing_time_ms: int = Field(0, ge=0)
    summary: str = ""
    insights: List[str] = Field(default_factory=list)
    entities: List[EntityMention] = Field(default_factory=list)
    sentiment: Optional[SentimentEstimate] = None
    recommendations: List[str] = Field(default_factory=list)
