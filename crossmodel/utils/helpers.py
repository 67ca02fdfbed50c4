"""Helper utilities for displaying consolidation output."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from crossmodel.results.registry import ModelRegistry

SEVERITY_STYLES = {"high": "red", "medium": "yellow", "low": "green"}
CONSENSUS_STYLES = {"agree": "green", "partial": "yellow", "disagree": "red"}


def format_percentage(value: Optional[float]) -> str:
    """Format percentage for display.

    Args:
        value: Percentage value (0-1)

    Returns:
        Formatted percentage string
    """
    if value is None:
        return "N/A"
    return f"{value * 100:.1f}%"


def format_similarity(value: Optional[float]) -> str:
    """Format a 0-100 similarity score for display."""
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def format_models(model_ids: Iterable[str], registry: Optional[ModelRegistry] = None) -> str:
    """Join model ids as display names with icons when known."""
    labels = []
    for model_id in model_ids:
        descriptor = registry.get(model_id) if registry else None
        labels.append(f"{descriptor.icon} {descriptor.display_name}" if descriptor else model_id)
    return ", ".join(labels)


def styled(text: str, style: Optional[str]) -> str:
    """Wrap text in rich markup for the given style."""
    if not style:
        return text
    return f"[{style}]{text}[/{style}]"


def load_raw_results(path: Path) -> Dict[str, Any]:
    """Load raw per-model results from a JSON file.

    Accepts either a mapping of model id to raw record, or an exported report
    (the records are then read from ``analysisResults.ai``).

    Raises:
        ValueError: If the file does not hold a JSON object
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object keyed by model id")

    analysis_results = data.get("analysisResults")
    if isinstance(analysis_results, dict) and isinstance(analysis_results.get("ai"), dict):
        return analysis_results["ai"]
    return data
