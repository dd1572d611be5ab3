# utils/organ_extraction.py
# Best-effort extraction of per-organ metrics from free-text model output

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

PARSED = "parsed"
NO_MATCH = "no_match"
MALFORMED_JSON = "malformed_json"

# Greedy: first "{" through last "}"
JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")


@dataclass
class ExtractedMetric:
    organ_type: str
    name: str
    value: str
    status: Optional[str] = None
    trend: Optional[str] = None
    health_score: Optional[float] = None


@dataclass
class ExtractionResult:
    """Tagged outcome of the extraction step: parsed, no_match or malformed_json"""
    status: str
    organs: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_parsed(self) -> bool:
        return self.status == PARSED

    def metrics(self) -> List[ExtractedMetric]:
        """Flatten organ entries into one record per metric"""
        flattened = []
        for organ_type, organ in self.organs.items():
            health = _health_score(organ.get("health"))
            for metric in organ["metrics"]:
                flattened.append(ExtractedMetric(
                    organ_type=organ_type,
                    name=_as_text(metric.get("name")) or "",
                    value=_as_text(metric.get("value")) or "",
                    status=_as_text(metric.get("status")),
                    trend=_as_text(metric.get("trend")),
                    health_score=health
                ))
        return flattened


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _health_score(value: Any) -> Optional[float]:
    # bool is an int subclass; "health": true is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        score = float(value)
    except OverflowError:
        return None
    # json accepts Infinity and NaN
    if not math.isfinite(score):
        return None
    return min(max(score, 0.0), 100.0)


def _normalize_organs(raw_organs: Any) -> Dict[str, Any]:
    """Keep organ entries that carry a metrics list of objects"""
    if not isinstance(raw_organs, dict):
        return {}

    organs = {}
    for organ_type, organ in raw_organs.items():
        if not isinstance(organ, dict) or not isinstance(organ.get("metrics"), list):
            continue
        organs[organ_type] = {
            "metrics": [m for m in organ["metrics"] if isinstance(m, dict)],
            "health": organ.get("health")
        }
    return organs


def extract_organ_metrics(text: str) -> ExtractionResult:
    """
    Locate a JSON object in model output and pull out its "organs" map

    Args:
        text: Raw text returned by the model

    Returns:
        ExtractionResult tagged parsed, no_match or malformed_json
    """
    match = JSON_BLOCK_PATTERN.search(text or "")
    if not match:
        return ExtractionResult(status=NO_MATCH)

    try:
        data = json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        # RecursionError: deeply nested arrays
        return ExtractionResult(status=MALFORMED_JSON, error=str(e))

    if not isinstance(data, dict):
        return ExtractionResult(status=MALFORMED_JSON, error="JSON block is not an object")

    organs = _normalize_organs(data.get("organs"))
    logger.debug(f"Extracted {len(organs)} organ entries from analysis")
    return ExtractionResult(status=PARSED, organs=organs)
