"""
Organ Dashboard Schemas
"""
from typing import Dict, List

from pydantic import BaseModel


class OrganMetricSummary(BaseModel):
    name: str
    value: str
    status: str = ""
    trend: str = ""


class YearlyHealth(BaseModel):
    year: str
    health: int


class MonthlyHealth(BaseModel):
    month: str
    health: int


class OrganData(BaseModel):
    """Dashboard card data for one organ"""
    name: str
    color: str
    currentHealth: int
    metrics: List[OrganMetricSummary]
    yearlyData: List[YearlyHealth]
    monthlyData: List[MonthlyHealth]


class OrganDashboardResponse(BaseModel):
    organs: Dict[str, OrganData]
    overallHealth: int
