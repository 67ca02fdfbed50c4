"""Export of consolidated analysis reports as JSON documents."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from crossmodel.analysis.models import ConsolidatedInsights
from crossmodel.results.models import AnalysisResult
from crossmodel.results.normalizer import PROCESSING_TIME_KEYS


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as UTC ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _raw_confidence(value: Any) -> Optional[float]:
    if isinstance(value, AnalysisResult):
        return value.confidence
    if isinstance(value, Mapping) and _is_number(value.get("confidence")):
        return float(value["confidence"])
    return None


def _raw_processing_time(value: Any) -> float:
    if isinstance(value, AnalysisResult):
        return value.processing_time_ms
    if isinstance(value, Mapping):
        for key in PROCESSING_TIME_KEYS:
            if _is_number(value.get(key)):
                return float(value[key])
    return 0.0


def _serializable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return to_jsonable_python(value, fallback=str)


def calculate_total_processing_time(raw_results: Mapping[str, Any]) -> int:
    """Total processing time across all models, in milliseconds."""
    return int(round(sum(_raw_processing_time(value) for value in raw_results.values())))


def calculate_overall_confidence(
    consolidated: ConsolidatedInsights, raw_results: Mapping[str, Any]
) -> float:
    """Mean of per-model confidences and the consolidated score (when non-zero)."""
    confidences = [
        confidence
        for confidence in (_raw_confidence(value) for value in raw_results.values())
        if confidence is not None
    ]
    if consolidated.confidence_score:
        confidences.append(consolidated.confidence_score)

    if not confidences:
        return 0.0
    return sum(confidences) / len(confidences)


def export_report(
    consolidated: ConsolidatedInsights,
    raw_results: Mapping[str, Any],
    *,
    content_id: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the archival report document.

    Args:
        consolidated: Consolidated judgment
        raw_results: Per-model results as received (raw records or AnalysisResult)
        content_id: Identifier of the analyzed content item
        timestamp: Report time (now when None)

    Returns:
        JSON-serializable report dictionary
    """
    return {
        "timestamp": format_timestamp(timestamp),
        "uploadId": content_id,
        "analysisResults": {
            "ai": {str(model): _serializable(value) for model, value in raw_results.items()},
            "consolidated": consolidated.model_dump(mode="json", by_alias=True),
        },
        "summary": {
            "modelsUsed": [str(model) for model in raw_results.keys()],
            "totalProcessingTime": calculate_total_processing_time(raw_results),
            "overallConfidence": calculate_overall_confidence(consolidated, raw_results),
            "keyInsights": list(consolidated.common_findings),
        },
    }


def export_report_json(
    consolidated: ConsolidatedInsights,
    raw_results: Mapping[str, Any],
    *,
    content_id: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> str:
    """Render the report document as indented JSON text."""
    report = export_report(
        consolidated, raw_results, content_id=content_id, timestamp=timestamp
    )
    return json.dumps(report, indent=2, ensure_ascii=False)


def load_consolidated(document: Mapping[str, Any]) -> ConsolidatedInsights:
    """Recover the consolidated judgment from an exported report document."""
    return ConsolidatedInsights.model_validate(document["analysisResults"]["consolidated"])
