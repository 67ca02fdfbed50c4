"""Validation and coercion of raw per-model results."""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from crossmodel.results.exceptions import ClampedValueWarning, MalformedResultError
from crossmodel.results.models import (
    SENTIMENT_LABELS,
    AnalysisResult,
    EntityMention,
    SentimentEstimate,
)
from crossmodel.results.registry import ModelRegistry

logger = logging.getLogger(__name__)

# Accepted spellings for each field, wire format first
PROCESSING_TIME_KEYS = ("processingTimeMs", "processingTime", "processing_time_ms")
SUMMARY_KEYS = ("summary", "description")
INSIGHT_KEYS = ("keyInsights", "insights", "key_insights")
SENTIMENT_KEYS = ("sentimentAnalysis", "sentiment", "sentiment_analysis")
SENTIMENT_LABEL_KEYS = ("overall", "label")


class NormalizationReport(BaseModel):
    """Outcome of normalizing a batch of raw model results."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    results: Dict[str, AnalysisResult] = Field(default_factory=dict)
    rejected: Dict[str, MalformedResultError] = Field(default_factory=dict)
    warnings: List[ClampedValueWarning] = Field(default_factory=list)

    @property
    def has_results(self) -> bool:
        return bool(self.results)

    def warnings_for(self, model: str) -> List[ClampedValueWarning]:
        return [w for w in self.warnings if w.model == model]


def _first_present(data: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _as_number(value: Any) -> Optional[float]:
    """Coerce a JSON scalar to float, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def _clamp_unit(
    value: float,
    model: str,
    field: str,
    warnings: List[ClampedValueWarning],
) -> float:
    clamped = min(1.0, max(0.0, value))
    if clamped != value:
        warning = ClampedValueWarning(model, field, value, clamped)
        logger.warning(str(warning))
        warnings.append(warning)
    return clamped


def _string_list(value: Any, model: str, field: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        logger.warning("%s: ignoring %s of type %s", model, field, type(value).__name__)
        return []

    items = []
    for item in value:
        if not isinstance(item, str):
            logger.debug("%s: dropping non-text %s item %r", model, field, item)
            continue
        item = item.strip()
        if item:
            items.append(item)
    return items


def _entities(
    value: Any, model: str, warnings: List[ClampedValueWarning]
) -> List[EntityMention]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning("%s: ignoring entities of type %s", model, type(value).__name__)
        return []

    entities = []
    for index, raw in enumerate(value):
        if not isinstance(raw, Mapping):
            logger.debug("%s: dropping entity #%d, not an object", model, index)
            continue
        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            logger.debug("%s: dropping entity #%d without text", model, index)
            continue

        entity_type = raw.get("type")
        if not isinstance(entity_type, str) or not entity_type.strip():
            entity_type = "unknown"

        confidence = _as_number(raw.get("confidence"))
        if confidence is None:
            confidence = 0.0
        else:
            confidence = _clamp_unit(
                confidence, model, f"entities[{index}].confidence", warnings
            )

        context = raw.get("context")
        entities.append(
            EntityMention(
                text=text.strip(),
                type=entity_type.strip().lower(),
                confidence=confidence,
                context=context if isinstance(context, str) else None,
            )
        )
    return entities


def _sentiment(
    value: Any, model: str, warnings: List[ClampedValueWarning]
) -> Optional[SentimentEstimate]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        logger.warning("%s: ignoring sentiment of type %s", model, type(value).__name__)
        return None

    label = _first_present(value, SENTIMENT_LABEL_KEYS)
    if not isinstance(label, str) or label.strip().lower() not in SENTIMENT_LABELS:
        logger.warning("%s: ignoring unknown sentiment label %r", model, label)
        return None

    confidence = _as_number(value.get("confidence"))
    if confidence is None:
        confidence = 0.0
    else:
        confidence = _clamp_unit(confidence, model, "sentiment.confidence", warnings)

    return SentimentEstimate(label=label.strip().lower(), confidence=confidence)


def normalize_result(
    model: str,
    raw: Any,
    registry: Optional[ModelRegistry] = None,
) -> Tuple[AnalysisResult, List[ClampedValueWarning]]:
    """Normalize one raw model result.

    Args:
        model: Model id the result is keyed by
        raw: Raw record as received from the model invocation layer
        registry: Supported models. When given, unknown ids are rejected.

    Returns:
        Tuple of the normalized result and any clamping warnings

    Raises:
        MalformedResultError: If the record cannot be normalized
    """
    if registry is not None and model not in registry:
        raise MalformedResultError(model, "model is not registered", raw)
    if not isinstance(raw, Mapping):
        raise MalformedResultError(model, "result is not an object", raw)

    status = raw.get("status")
    if status is not None and status != "completed":
        raise MalformedResultError(model, f"status is {status!r}", raw)

    payload = raw.get("results")
    if payload is None:
        raise MalformedResultError(model, "missing 'results' payload", raw)
    if not isinstance(payload, Mapping):
        raise MalformedResultError(model, "'results' is not an object", raw)

    confidence = _as_number(raw.get("confidence"))
    if confidence is None:
        raise MalformedResultError(model, "confidence is missing or not numeric", raw)

    warnings: List[ClampedValueWarning] = []
    confidence = _clamp_unit(confidence, model, "confidence", warnings)

    processing_time = _as_number(_first_present(raw, PROCESSING_TIME_KEYS))
    if processing_time is None or math.isinf(processing_time):
        processing_time = 0.0
    elif processing_time < 0:
        warning = ClampedValueWarning(model, "processingTimeMs", processing_time, 0.0)
        logger.warning(str(warning))
        warnings.append(warning)
        processing_time = 0.0

    summary = _first_present(payload, SUMMARY_KEYS)

    result = AnalysisResult(
        model=model,
        confidence=confidence,
        processing_time_ms=int(round(processing_time)),
        summary=summary.strip() if isinstance(summary, str) else "",
        insights=_string_list(_first_present(payload, INSIGHT_KEYS), model, "insights"),
        entities=_entities(payload.get("entities"), model, warnings),
        sentiment=_sentiment(_first_present(payload, SENTIMENT_KEYS), model, warnings),
        recommendations=_string_list(
            payload.get("recommendations"), model, "recommendations"
        ),
    )
    return result, warnings


def normalize(
    raw_results: Mapping[str, Any],
    registry: Optional[ModelRegistry] = None,
) -> NormalizationReport:
    """Normalize raw results keyed by model id.

    Malformed records are excluded and recorded; they never abort the batch.

    Args:
        raw_results: Dictionary mapping model ids to raw result records
        registry: Supported models (optional)

    Returns:
        Report with normalized results, rejections and clamping warnings
    """
    report = NormalizationReport()

    for model in sorted(raw_results, key=str):
        try:
            result, warnings = normalize_result(str(model), raw_results[model], registry)
        except MalformedResultError as e:
            logger.warning("Excluding %s: %s", model, e.reason)
            report.rejected[str(model)] = e
            continue

        report.results[result.model] = result
        report.warnings.extend(warnings)

    logger.debug(
        "Normalized %d result(s), rejected %d",
        len(report.results),
        len(report.rejected),
    )
    return report
