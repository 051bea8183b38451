# pitch2angels/services/application_service.py
import json
import logging
import math
import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Dict, Any, List, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, Query

from pitch2angels.config import settings
from pitch2angels.models.application import Application, REVIEW_STATUSES
from pitch2angels.schemas.application import ApplicationSubmission, ApplicationReviewUpdate
from pitch2angels.utils.text import clean_text, clean_optional, is_blank, is_valid_email
from pitch2angels.utils.upload import IncomingFile, LocalBlobStore, validate_upload

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = [
    "first_name", "last_name", "email", "phone",
    "city", "region", "business_name", "description",
    "amount_paid", "transaction_reference", "bank_name",
    "account_holder_name", "payment_date", "signature"
]

SORTABLE_COLUMNS = {
    "id": Application.id,
    "created_at": Application.created_at,
    "first_name": Application.first_name,
    "last_name": Application.last_name,
    "email": Application.email,
    "region": Application.region,
    "business_name": Application.business_name,
    "amount_paid": Application.amount_paid,
    "payment_date": Application.payment_date,
    "review_status": Application.review_status,
    "reviewed_at": Application.reviewed_at,
}

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _error(status_code: int, error: str, **extra) -> HTTPException:
    detail = {"error": error}
    detail.update(extra)
    return HTTPException(status_code=status_code, detail=detail)


def parse_categories(raw) -> List[str]:
    """Categories arrive as a JSON array string; anything malformed becomes []."""
    if not raw:
        return []
    values = raw
    if isinstance(raw, str):
        try:
            values = json.loads(raw)
        except ValueError:
            return []
    if not isinstance(values, list):
        return []
    categories = []
    for value in values:
        cleaned = clean_text(str(value))
        if cleaned:
            categories.append(cleaned)
    return categories


def parse_amount(raw) -> float:
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def parse_bool(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    return isinstance(raw, str) and raw.strip().lower() == "true"


def parse_payment_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid payment date",
            message="Payment date must be in YYYY-MM-DD format"
        )


def parse_page_params(page, limit) -> Tuple[int, int]:
    try:
        page_num = max(1, int(page))
    except (TypeError, ValueError):
        page_num = DEFAULT_PAGE
    try:
        limit_num = max(1, min(MAX_LIMIT, int(limit)))
    except (TypeError, ValueError):
        limit_num = DEFAULT_LIMIT
    return page_num, limit_num


def _integrity_status(exc: IntegrityError) -> Tuple[int, str, str]:
    pgcode = getattr(exc.orig, "pgcode", None)
    message = str(exc.orig).lower()
    if pgcode == "23505" or "unique" in message or "duplicate" in message:
        return status.HTTP_409_CONFLICT, "Duplicate entry", "An application with this email already exists"
    if pgcode == "23502" or "not null" in message or "null value" in message:
        return status.HTTP_400_BAD_REQUEST, "Missing required data", "Please fill all required fields"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "Failed to submit application. Please try again later."


class ApplicationService:
    """Submission handling and the admin query layer over the applications table"""

    # ------------------ Submission ------------------

    @staticmethod
    def validate_submission(submission: ApplicationSubmission) -> List[str]:
        """Return the wire names of required fields that are missing"""
        return [
            ApplicationSubmission.wire_name(field)
            for field in REQUIRED_FIELDS
            if is_blank(getattr(submission, field))
        ]

    @staticmethod
    def _upload(store: LocalBlobStore, file: IncomingFile, folder: str, prefix: str) -> str:
        timestamp = int(time.time() * 1000)
        filename = f"{prefix}-{timestamp}-{file.filename}"
        logger.info(f"☁️ Uploading {prefix} to {folder}: {filename}")
        url = store.store(file.content, folder, filename, file.content_type)
        logger.info(f"✅ Uploaded {prefix}: {url}")
        return url

    @staticmethod
    def _discard_uploads(store: LocalBlobStore, urls: List[str]) -> None:
        for url in urls:
            try:
                store.delete(url)
            except OSError as e:
                logger.warning(f"Could not remove orphaned upload {url}: {e}")

    @staticmethod
    def submit(
        db: Session,
        store: LocalBlobStore,
        submission: ApplicationSubmission,
        product_image: Optional[IncomingFile],
        payment_receipt: Optional[IncomingFile]
    ) -> Application:
        """
        Validate a submission, upload both files and insert one row.

        Uploads happen only after every check passes; if the insert fails the
        uploaded files are removed again.
        """
        start_time = time.monotonic()
        logger.info("📝 Application submission started")

        # Bad files are rejected before any field checks
        for file in (product_image, payment_receipt):
            if file is not None:
                validate_upload(file)

        missing = ApplicationService.validate_submission(submission)
        if missing:
            logger.info(f"Submission rejected, missing fields: {missing}")
            raise _error(status.HTTP_400_BAD_REQUEST, "Missing required fields", missingFields=missing)

        if not is_valid_email(submission.email):
            raise _error(status.HTTP_400_BAD_REQUEST, "Invalid email format")

        categories = parse_categories(submission.categories)

        if product_image is None or payment_receipt is None:
            raise _error(
                status.HTTP_400_BAD_REQUEST,
                "Both product image and payment receipt are required"
            )

        payment_date = parse_payment_date(submission.payment_date)
        email = clean_text(submission.email.lower())

        existing = db.query(Application.id).filter(func.lower(Application.email) == email).first()
        if existing:
            logger.warning(f"Duplicate application for {email}")
            raise _error(
                status.HTTP_409_CONFLICT,
                "Duplicate entry",
                message="An application with this email already exists"
            )

        uploaded: List[str] = []
        try:
            product_image_url = ApplicationService._upload(store, product_image, "products", "product")
            uploaded.append(product_image_url)
            payment_receipt_url = ApplicationService._upload(store, payment_receipt, "receipts", "receipt")
            uploaded.append(payment_receipt_url)

            application = Application(
                first_name=clean_text(submission.first_name),
                last_name=clean_text(submission.last_name),
                guardian_name=clean_optional(submission.guardian_name),
                phone=clean_text(submission.phone),
                email=email,
                city=clean_text(submission.city),
                region=clean_text(submission.region),
                pronouns=clean_optional(submission.pronouns),
                occupation=clean_optional(submission.occupation),
                business_name=clean_text(submission.business_name),
                website=clean_optional(submission.website),
                categories=categories,
                phase=clean_optional(submission.phase),
                has_collaborators=clean_optional(submission.has_collaborators) or "no",
                collaborator_names=clean_optional(submission.collaborator_names),
                description=clean_text(submission.description),
                product_image=product_image_url,
                bank_name=clean_text(submission.bank_name),
                account_holder_name=clean_text(submission.account_holder_name),
                transaction_reference=clean_text(submission.transaction_reference),
                amount_paid=parse_amount(submission.amount_paid),
                payment_date=payment_date,
                payment_receipt=payment_receipt_url,
                agreed_to_terms=parse_bool(submission.agreed_to_terms),
                signature=clean_text(submission.signature)
            )

            logger.info("📊 Inserting application row...")
            db.add(application)
            db.commit()
            db.refresh(application)

        except IntegrityError as e:
            db.rollback()
            ApplicationService._discard_uploads(store, uploaded)
            status_code, error, message = _integrity_status(e)
            logger.error(f"❌ Application insert rejected: {e.orig}")
            raise _error(status_code, error, message=message)

        except Exception as e:
            db.rollback()
            ApplicationService._discard_uploads(store, uploaded)
            process_time = int((time.monotonic() - start_time) * 1000)
            logger.exception(f"❌ Application submission error: {e}")
            extra = {
                "message": "Failed to submit application. Please try again later.",
                "processTime": process_time
            }
            if settings.is_development:
                extra["details"] = str(e)
            raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", **extra)

        process_time = int((time.monotonic() - start_time) * 1000)
        logger.info(f"✅ Application {application.id} submitted successfully in {process_time}ms")
        return application

    # ------------------ Lookup ------------------

    @staticmethod
    def get_application(db: Session, application_id: int) -> Application:
        application = db.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise _error(status.HTTP_404_NOT_FOUND, "Application not found")
        return application

    @staticmethod
    def apply_filters(
        query: Query,
        search: Optional[str] = None,
        region: Optional[str] = None,
        status_filter: Optional[str] = None
    ) -> Query:
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Application.first_name.ilike(pattern),
                Application.last_name.ilike(pattern),
                Application.email.ilike(pattern),
                Application.business_name.ilike(pattern)
            ))

        if region and region != "all":
            query = query.filter(Application.region == region)

        if status_filter == "reviewed":
            query = query.filter(Application.reviewed.is_(True))
        elif status_filter == "pending":
            query = query.filter(Application.reviewed.is_(False))
        elif status_filter in REVIEW_STATUSES:
            query = query.filter(Application.review_status == status_filter)

        return query

    @staticmethod
    def list_applications(
        db: Session,
        page=DEFAULT_PAGE,
        limit=DEFAULT_LIMIT,
        search: Optional[str] = None,
        region: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Tuple[List[Application], Dict[str, int]]:
        page_num, limit_num = parse_page_params(page, limit)
        offset = (page_num - 1) * limit_num

        query = ApplicationService.apply_filters(db.query(Application), search, region, status_filter)
        total = query.count()

        column = SORTABLE_COLUMNS.get(sort_by, Application.created_at)
        ordering = column.asc() if (sort_order or "").lower() == "asc" else column.desc()
        tiebreak = Application.id.asc() if (sort_order or "").lower() == "asc" else Application.id.desc()

        applications = query.order_by(ordering, tiebreak).offset(offset).limit(limit_num).all()

        pagination = {
            "page": page_num,
            "limit": limit_num,
            "total": total,
            "pages": math.ceil(total / limit_num)
        }
        return applications, pagination

    # ------------------ Review ------------------

    @staticmethod
    def update_review(db: Session, application_id: int, update: ApplicationReviewUpdate) -> Application:
        """Apply review metadata; no other column is ever touched here."""
        if not update.has_valid_status():
            raise _error(status.HTTP_400_BAD_REQUEST, "Invalid review status")

        if not update.has_updates():
            raise _error(status.HTTP_400_BAD_REQUEST, "No updates provided")

        application = ApplicationService.get_application(db, application_id)

        if update.reviewed is not None:
            application.reviewed = update.reviewed
            if update.reviewed:
                application.reviewed_at = datetime.now(timezone.utc)
                application.reviewed_by = update.reviewed_by

        if update.review_status:
            application.review_status = update.review_status

        if update.review_notes is not None:
            application.review_notes = update.review_notes

        try:
            db.commit()
            db.refresh(application)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating review for application {application_id}: {e}", exc_info=True)
            raise _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                message="Failed to update application"
            )

        logger.info(
            f"Application {application.id} review updated: "
            f"reviewed={application.reviewed} status={application.review_status}"
        )
        return application

    @staticmethod
    def delete_application(db: Session, application_id: int) -> None:
        application = ApplicationService.get_application(db, application_id)
        try:
            db.delete(application)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting application {application_id}: {e}", exc_info=True)
            raise _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                message="Failed to delete application"
            )
        logger.info(f"Application {application_id} deleted")

    # ------------------ Statistics ------------------

    @staticmethod
    def statistics(db: Session) -> Dict[str, Any]:
        today_start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

        total = db.query(Application).count()
        today = db.query(Application).filter(Application.created_at >= today_start).count()

        region_count = func.count(Application.id)
        by_region = (
            db.query(Application.region, region_count)
            .group_by(Application.region)
            .order_by(region_count.desc(), Application.region.asc())
            .all()
        )

        by_status = {"pending": db.query(Application).filter(Application.reviewed.is_(False)).count()}
        for review_status in ("approved", "rejected", "shortlisted"):
            by_status[review_status] = db.query(Application).filter(
                Application.reviewed.is_(True),
                Application.review_status == review_status
            ).count()

        day = func.date(Application.created_at)
        recent = (
            db.query(day, func.count(Application.id))
            .filter(Application.created_at >= today_start - timedelta(days=7))
            .group_by(day)
            .order_by(day.desc())
            .all()
        )

        return {
            "total": total,
            "today": today,
            "byRegion": [{"region": region, "count": count} for region, count in by_region],
            "byStatus": by_status,
            "recent": [{"date": str(created_on), "count": count} for created_on, count in recent]
        }
