"""
Organ Metric API Routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medisync.api.dependencies import get_db, get_current_owner
from medisync.schemas.organs import OrganData, OrganDashboardResponse
from medisync.schemas.reports import MetricListResponse
from medisync.services.organ_service import list_metrics, organ_service


router = APIRouter()


@router.get("/metrics/{organ_type}", response_model=MetricListResponse)
async def get_organ_metrics(
    organ_type: str,
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Get all metrics recorded for one organ, newest first
    """
    metrics = list_metrics(db, owner, organ_type)
    return {"metrics": [metric.to_dict() for metric in metrics]}


@router.get("/organs", response_model=OrganDashboardResponse)
async def get_organ_dashboard(
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Dashboard cards for every organ plus an overall health score
    """
    return organ_service.get_dashboard(db, owner)


@router.get("/organs/{organ_type}", response_model=OrganData)
async def get_organ(
    organ_type: str,
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Dashboard card for one organ
    """
    return organ_service.get_organ(db, owner, organ_type)
