"""Builders for raw and normalized model results used across tests."""

from typing import Dict, Iterable, Optional, Tuple

from crossmodel.results.models import AnalysisResult, EntityMention, SentimentEstimate

Entity = Tuple[str, str, float]


def make_result(
    model: str,
    confidence: float = 0.8,
    insights: Iterable[str] = (),
    entities: Iterable[Entity] = (),
    sentiment: Optional[Tuple[str, float]] = None,
    recommendations: Iterable[str] = (),
    summary: str = "",
    processing_time_ms: int = 1000,
) -> AnalysisResult:
    return AnalysisResult(
        model=model,
        confidence=confidence,
        processing_time_ms=processing_time_ms,
        summary=summary,
        insights=list(insights),
        entities=[
            EntityMention(text=text, type=entity_type, confidence=entity_confidence)
            for text, entity_type, entity_confidence in entities
        ],
        sentiment=(
            SentimentEstimate(label=sentiment[0], confidence=sentiment[1])
            if sentiment
            else None
        ),
        recommendations=list(recommendations),
    )


def make_raw(
    confidence: float = 0.8,
    insights: Iterable[str] = (),
    entities: Iterable[Entity] = (),
    sentiment: Optional[Tuple[str, float]] = None,
    recommendations: Iterable[str] = (),
    summary: str = "",
    processing_time: int = 1000,
    status: str = "completed",
) -> Dict:
    return {
        "confidence": confidence,
        "processingTime": processing_time,
        "status": status,
        "results": {
            "summary": summary,
            "keyInsights": list(insights),
            "entities": [
                {"text": text, "type": entity_type, "confidence": entity_confidence}
                for text, entity_type, entity_confidence in entities
            ],
            "sentimentAnalysis": (
                {"overall": sentiment[0], "confidence": sentiment[1]} if sentiment else None
            ),
            "recommendations": list(recommendations),
        },
    }


def results_map(*results: AnalysisResult) -> Dict[str, AnalysisResult]:
    return {result.model: result for result in results}
