"""
Report and Organ Metric Schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicalReport(BaseModel):
    """Stored medical report"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    filename: str
    file_size: int
    file_type: str
    r2_key: str
    analysis_status: str
    analysis_data: Optional[str] = None
    upload_date: str
    created_at: datetime
    updated_at: datetime


class OrganMetric(BaseModel):
    """Stored organ metric"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    report_id: Optional[int] = None
    organ_type: str
    metric_name: str
    metric_value: str
    health_score: Optional[float] = None
    status: Optional[str] = None
    trend: Optional[str] = None
    recorded_date: str
    created_at: datetime
    updated_at: datetime


class ReportListResponse(BaseModel):
    reports: List[MedicalReport]


class MetricListResponse(BaseModel):
    metrics: List[OrganMetric]


class UploadResponse(BaseModel):
    """Upload-and-analyze response"""
    success: bool = True
    reportId: int
    analysis: str
    filename: str
    analysisStatus: str = Field(..., description="completed or degraded")
