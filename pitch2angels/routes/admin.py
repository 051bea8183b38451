# pitch2angels/routes/admin.py
import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from pitch2angels.auth.dependencies import require_admin
from pitch2angels.database import get_db
from pitch2angels.schemas.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationReviewUpdate,
    ApplicationSummary,
    MessageResponse,
    StatisticsResponse
)
from pitch2angels.services.application_service import ApplicationService, DEFAULT_LIMIT, DEFAULT_PAGE
from pitch2angels.services.export_service import EXPORT_FILENAME, export_applications_csv

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)]
)

logger = logging.getLogger(__name__)


@router.get("/applications", response_model=ApplicationListResponse)
async def list_applications(
    page: str = Query(str(DEFAULT_PAGE)),
    limit: str = Query(str(DEFAULT_LIMIT)),
    search: str = Query(""),
    region: str = Query(""),
    status_filter: str = Query("", alias="status"),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db)
):
    """
    Paginated application list.

    - search: matches first/last name, email and business name
    - region: exact region
    - status: pending, reviewed, approved, rejected or shortlisted
    """
    applications, pagination = ApplicationService.list_applications(
        db,
        page=page,
        limit=limit,
        search=search,
        region=region,
        status_filter=status_filter,
        sort_by=sort_by,
        sort_order=sort_order
    )
    return {
        "success": True,
        "data": {
            "applications": [ApplicationSummary.model_validate(a) for a in applications],
            "pagination": pagination
        }
    }


@router.patch("/applications/{application_id}", response_model=MessageResponse)
async def update_application_review(
    application_id: int,
    update: ApplicationReviewUpdate,
    db: Session = Depends(get_db)
):
    """Update review metadata (reviewed flag, status, notes)"""
    logger.info(f"Review update for application {application_id} by {update.reviewed_by}")
    application = ApplicationService.update_review(db, application_id, update)
    return {
        "success": True,
        "data": ApplicationResponse.model_validate(application),
        "message": "Application updated successfully"
    }


@router.delete("/applications/{application_id}")
async def delete_application(application_id: int, db: Session = Depends(get_db)):
    ApplicationService.delete_application(db, application_id)
    return {"success": True, "message": "Application deleted successfully"}


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(db: Session = Depends(get_db)):
    return {"success": True, "data": ApplicationService.statistics(db)}


@router.get("/export")
async def export_applications(
    search: str = Query(""),
    region: str = Query(""),
    status_filter: str = Query("", alias="status"),
    db: Session = Depends(get_db)
):
    logger.info(f"CSV export requested (search={search!r}, region={region!r}, status={status_filter!r})")
    csv_body = export_applications_csv(db, search=search, region=region, status_filter=status_filter)
    return Response(
        content=csv_body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"}
    )
