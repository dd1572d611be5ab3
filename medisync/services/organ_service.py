"""
Organ Service - dashboard data built from stored organ metrics
"""
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from medisync.config import DEFAULT_ORGANS, ORGAN_COLORS, DEFAULT_ORGAN_COLOR
from medisync.models.organ_metric import OrganMetric

logger = logging.getLogger(__name__)


def _newest_first(query):
    return query.order_by(
        OrganMetric.recorded_date.desc(),
        OrganMetric.created_at.desc(),
        OrganMetric.id.desc()
    )


def list_metrics(db: Session, owner: str, organ_type: str) -> List[OrganMetric]:
    """All metrics for one organ, newest recorded first"""
    return _newest_first(db.query(OrganMetric).filter(
        OrganMetric.user_id == owner,
        OrganMetric.organ_type == organ_type
    )).all()


def _average_by(metrics: List[OrganMetric], period_length: int) -> List[Dict[str, Any]]:
    """Mean health score per recorded_date prefix (4 = year, 7 = month), ascending"""
    buckets: Dict[str, List[float]] = {}
    for metric in metrics:
        if metric.health_score is None or not metric.recorded_date:
            continue
        buckets.setdefault(metric.recorded_date[:period_length], []).append(metric.health_score)

    return [
        {"period": period, "health": round(sum(scores) / len(scores))}
        for period, scores in sorted(buckets.items())
    ]


class OrganService:
    """Service for organ dashboard summaries"""

    def build_organ_data(self, organ_type: str, metrics: List[OrganMetric]) -> Dict[str, Any]:
        """
        Summarize one organ's metrics into dashboard card data

        Args:
            organ_type: Organ key, e.g. "heart"
            metrics: The organ's metrics, newest first

        Returns:
            Dict in OrganData shape
        """
        current_health: Optional[float] = next(
            (m.health_score for m in metrics if m.health_score is not None),
            None
        )

        latest = OrderedDict()
        for metric in metrics:
            if metric.metric_name not in latest:
                latest[metric.metric_name] = metric

        return {
            "name": organ_type.title(),
            "color": ORGAN_COLORS.get(organ_type, DEFAULT_ORGAN_COLOR),
            "currentHealth": round(current_health) if current_health is not None else 0,
            "metrics": [
                {
                    "name": m.metric_name,
                    "value": m.metric_value,
                    "status": m.status or "",
                    "trend": m.trend or ""
                }
                for m in latest.values()
            ],
            "yearlyData": [
                {"year": row["period"], "health": row["health"]}
                for row in _average_by(metrics, 4)
            ],
            "monthlyData": [
                {"month": row["period"], "health": row["health"]}
                for row in _average_by(metrics, 7)
            ],
        }

    def get_organ(self, db: Session, owner: str, organ_type: str) -> Dict[str, Any]:
        return self.build_organ_data(organ_type, list_metrics(db, owner, organ_type))

    def get_dashboard(self, db: Session, owner: str) -> Dict[str, Any]:
        """
        Dashboard data for the default organs plus any other organ with metrics

        Returns:
            Dict with organs map and overallHealth
        """
        rows = _newest_first(db.query(OrganMetric).filter(OrganMetric.user_id == owner)).all()

        grouped: Dict[str, List[OrganMetric]] = OrderedDict((organ, []) for organ in DEFAULT_ORGANS)
        for row in rows:
            grouped.setdefault(row.organ_type, []).append(row)

        organs = {
            organ_type: self.build_organ_data(organ_type, metrics)
            for organ_type, metrics in grouped.items()
        }

        scored = [
            organs[organ_type]["currentHealth"]
            for organ_type, metrics in grouped.items()
            if any(m.health_score is not None for m in metrics)
        ]
        overall = round(sum(scored) / len(scored)) if scored else 0

        logger.debug(f"Built dashboard for {owner}: {len(organs)} organs, overall {overall}")
        return {"organs": organs, "overallHealth": overall}


# Singleton instance
organ_service = OrganService()
