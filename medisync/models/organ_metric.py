"""
Organ Metric Model
"""
from sqlalchemy import Column, String, Text, Integer, Float, DateTime, ForeignKey

from medisync.database import Base, utcnow


class OrganMetric(Base):
    """One named health observation attributed to an organ"""
    __tablename__ = "organ_metrics"

    # Primary key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Owner and originating report (a metric may exist without a report)
    user_id = Column(String(255), nullable=False, index=True)
    report_id = Column(Integer, ForeignKey("medical_reports.id"), nullable=True, index=True)

    # Metric details
    # Free text from the model, unbounded
    organ_type = Column(Text, nullable=False, index=True)  # heart, lungs, liver, kidneys
    metric_name = Column(Text, nullable=False)
    metric_value = Column(Text, nullable=False)  # unit embedded, e.g. "72 bpm"
    health_score = Column(Float, nullable=True)  # 0-100
    status = Column(Text, nullable=True)
    trend = Column(Text, nullable=True)
    recorded_date = Column(String(10), nullable=False)  # YYYY-MM-DD

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "report_id": self.report_id,
            "organ_type": self.organ_type,
            "metric_name": self.metric_name,
            "metric_value": self.metric_value,
            "health_score": self.health_score,
            "status": self.status,
            "trend": self.trend,
            "recorded_date": self.recorded_date,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
