"""
Report API Routes - upload, analysis, listing and file download
"""
import logging
import os
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from medisync.api.dependencies import get_db, get_current_owner, get_gemini_service, get_storage_service
from medisync.config import settings
from medisync.database import utcnow
from medisync.models.medical_report import MedicalReport
from medisync.models.organ_metric import OrganMetric
from medisync.schemas.reports import ReportListResponse, UploadResponse
from medisync.services.gemini_service import GeminiService
from medisync.services.storage_service import BlobStorageService, build_report_key
from medisync.utils.organ_extraction import extract_organ_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


def _store_organ_metrics(db: Session, report: MedicalReport, analysis_text: str) -> int:
    """Insert one OrganMetric per metric found in the analysis; returns rows written"""
    extraction = extract_organ_metrics(analysis_text)
    if not extraction.is_parsed:
        logger.warning(
            f"No organ metrics stored for report {report.id}: {extraction.status}"
            + (f" ({extraction.error})" if extraction.error else "")
        )
        return 0

    rows = [
        OrganMetric(
            user_id=report.user_id,
            report_id=report.id,
            organ_type=metric.organ_type,
            metric_name=metric.name,
            metric_value=metric.value,
            health_score=metric.health_score,
            status=metric.status,
            trend=metric.trend,
            recorded_date=report.upload_date
        )
        for metric in extraction.metrics()
    ]
    db.add_all(rows)
    db.commit()
    return len(rows)


@router.post("/upload", response_model=UploadResponse)
async def upload_report(
    file: Optional[UploadFile] = File(None),
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db),
    storage: BlobStorageService = Depends(get_storage_service),
    gemini: GeminiService = Depends(get_gemini_service)
):
    """
    Store a medical report, analyze it with AI and record organ metrics

    Success is reported once the file is stored, even when the analysis
    degrades to the fallback text.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    filename = file.filename
    file_type = file.content_type or "application/octet-stream"
    data = await file.read()
    upload_date = utcnow().date().isoformat()

    # Store raw bytes
    r2_key = build_report_key(owner, int(time.time() * 1000), os.path.basename(filename))
    await run_in_threadpool(storage.put, r2_key, data, file_type)

    # Store metadata
    report = MedicalReport(
        user_id=owner,
        filename=filename,
        file_size=len(data),
        file_type=file_type,
        r2_key=r2_key,
        analysis_status="pending",
        analysis_data=None,
        upload_date=upload_date
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(f"Report {report.id} uploaded by {owner}: {filename} ({len(data)} bytes)")

    # Analyze with AI
    content = data.decode("utf-8", errors="replace")[:settings.REPORT_CONTENT_LIMIT]
    outcome = await gemini.analyze_report(filename, content)

    report.analysis_status = "completed"
    report.analysis_data = outcome.text if outcome.is_completed else None
    db.commit()

    if outcome.is_completed:
        try:
            stored = _store_organ_metrics(db, report, outcome.text)
            logger.info(f"Stored {stored} organ metrics for report {report.id}")
        except Exception as e:
            # The report is already stored; metric extraction is best-effort
            db.rollback()
            logger.error(f"Storing organ metrics failed for report {report.id}: {e}", exc_info=True)
    else:
        logger.warning(f"Report {report.id} analysis degraded: {outcome.cause}")

    return UploadResponse(
        success=True,
        reportId=report.id,
        analysis=outcome.text,
        filename=filename,
        analysisStatus=outcome.status
    )


@router.get("/reports", response_model=ReportListResponse)
async def get_reports(
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Get all reports for the current owner, newest first
    """
    reports = db.query(MedicalReport).filter(
        MedicalReport.user_id == owner
    ).order_by(MedicalReport.created_at.desc(), MedicalReport.id.desc()).all()

    return {"reports": [report.to_dict() for report in reports]}


@router.get("/files/{report_id}")
async def download_file(
    report_id: int,
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db),
    storage: BlobStorageService = Depends(get_storage_service)
):
    """
    Stream a report's original file with its stored content type and ETag
    """
    report = db.query(MedicalReport).filter(
        MedicalReport.id == report_id,
        MedicalReport.user_id == owner
    ).first()

    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")

    blob = storage.get(report.r2_key)
    if blob is None:
        logger.warning(f"Report {report_id} points at missing blob {report.r2_key}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found in storage")

    return StreamingResponse(
        blob.iter_bytes(),
        media_type=blob.content_type,
        headers={"ETag": blob.etag, "Content-Length": str(blob.size)}
    )
