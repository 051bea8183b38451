# pitch2angels/services/export_service.py
import csv
import io
import logging
from typing import Optional, List

from sqlalchemy.orm import Session

from pitch2angels.models.application import Application
from pitch2angels.services.application_service import ApplicationService

logger = logging.getLogger(__name__)

# (header, attribute) pairs, in column order
EXPORT_COLUMNS = [
    ("ID", "id"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("City", "city"),
    ("Region", "region"),
    ("Business Name", "business_name"),
    ("Categories", "categories"),
    ("Phase", "phase"),
    ("Amount Paid", "amount_paid"),
    ("Transaction Reference", "transaction_reference"),
    ("Bank Name", "bank_name"),
    ("Payment Date", "payment_date"),
    ("Created At", "created_at"),
    ("Reviewed", "reviewed"),
    ("Review Status", "review_status"),
    ("Reviewed At", "reviewed_at"),
]

EXPORT_FILENAME = "applications.csv"


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def export_row(application: Application) -> List[str]:
    return [format_cell(getattr(application, attribute)) for _, attribute in EXPORT_COLUMNS]


def export_applications_csv(
    db: Session,
    search: Optional[str] = None,
    region: Optional[str] = None,
    status_filter: Optional[str] = None
) -> str:
    """Render matching applications, newest first, with every cell quoted."""
    query = ApplicationService.apply_filters(db.query(Application), search, region, status_filter)
    applications = query.order_by(Application.created_at.desc(), Application.id.desc()).all()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(header for header, _ in EXPORT_COLUMNS) + "\n")
    for application in applications:
        writer.writerow(export_row(application))

    logger.info(f"Exported {len(applications)} applications to CSV")
    return buffer.getvalue()
