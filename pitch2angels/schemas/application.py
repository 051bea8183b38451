# pitch2angels/schemas/application.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional, List, Any

from pitch2angels.models.application import REVIEW_STATUSES


class ApplicationSubmission(BaseModel):
    """Raw text fields of the multipart submission, keyed by their wire names."""

    # SECTION A: Applicant
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    guardian_name: Optional[str] = Field(None, alias="guardianName")
    phone: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    pronouns: Optional[str] = None
    occupation: Optional[str] = None

    # SECTION B: Business
    business_name: Optional[str] = Field(None, alias="businessName")
    website: Optional[str] = None
    categories: Optional[str] = None
    phase: Optional[str] = None
    has_collaborators: Optional[str] = Field(None, alias="hasCollaborators")
    collaborator_names: Optional[str] = Field(None, alias="collaboratorNames")
    description: Optional[str] = None

    # SECTION C: Payment & consent
    bank_name: Optional[str] = Field(None, alias="bankName")
    account_holder_name: Optional[str] = Field(None, alias="accountHolderName")
    transaction_reference: Optional[str] = Field(None, alias="transactionReference")
    amount_paid: Optional[str] = Field(None, alias="amountPaid")
    payment_date: Optional[str] = Field(None, alias="paymentDate")
    agreed_to_terms: Optional[str] = Field(None, alias="agreedToTerms")
    signature: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, title="ApplicationSubmission")

    @classmethod
    def wire_name(cls, field_name: str) -> str:
        field = cls.model_fields[field_name]
        return field.alias or field_name


class ApplicationSummary(BaseModel):
    """Row shape used by the admin list"""
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    city: str
    region: str
    business_name: str
    categories: List[str] = []
    phase: Optional[str] = None
    description: str
    product_image: str
    payment_receipt: str
    amount_paid: float
    transaction_reference: str
    bank_name: str
    payment_date: date
    created_at: datetime
    reviewed: bool
    review_notes: Optional[str] = None
    review_status: str
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, title="ApplicationSummary")


class ApplicationResponse(ApplicationSummary):
    guardian_name: Optional[str] = None
    pronouns: Optional[str] = None
    occupation: Optional[str] = None
    website: Optional[str] = None
    has_collaborators: str
    collaborator_names: Optional[str] = None
    account_holder_name: str
    agreed_to_terms: bool
    signature: str

    model_config = ConfigDict(from_attributes=True, title="ApplicationResponse")


class ApplicationReviewUpdate(BaseModel):
    reviewed: Optional[bool] = None
    review_status: Optional[str] = None
    review_notes: Optional[str] = None
    reviewed_by: str = "admin"

    model_config = ConfigDict(title="ApplicationReviewUpdate")

    def has_valid_status(self) -> bool:
        return not self.review_status or self.review_status in REVIEW_STATUSES

    def has_updates(self) -> bool:
        return self.reviewed is not None or bool(self.review_status) or self.review_notes is not None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ApplicationListData(BaseModel):
    applications: List[ApplicationSummary]
    pagination: Pagination


class ApplicationListResponse(BaseModel):
    success: bool = True
    data: ApplicationListData


class SubmissionResponse(BaseModel):
    success: bool = True
    id: int
    productImageUrl: str
    paymentReceiptUrl: str
    createdAt: datetime
    message: str = "Application submitted successfully"


class StepValidationResponse(BaseModel):
    success: bool
    step: int
    errors: dict


class RegionCount(BaseModel):
    region: str
    count: int


class DailyCount(BaseModel):
    date: str
    count: int


class StatusCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    shortlisted: int = 0


class Statistics(BaseModel):
    total: int
    today: int
    byRegion: List[RegionCount]
    byStatus: StatusCounts
    recent: List[DailyCount]


class StatisticsResponse(BaseModel):
    success: bool = True
    data: Statistics


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Any] = None
