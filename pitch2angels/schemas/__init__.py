# pitch2angels/schemas/__init__.py
from .application import (
    ApplicationSubmission,
    ApplicationSummary,
    ApplicationResponse,
    ApplicationReviewUpdate,
    ApplicationListResponse,
    Pagination,
    SubmissionResponse,
    StepValidationResponse,
    Statistics,
    StatisticsResponse,
    MessageResponse
)

__all__ = [
    "ApplicationSubmission",
    "ApplicationSummary",
    "ApplicationResponse",
    "ApplicationReviewUpdate",
    "ApplicationListResponse",
    "Pagination",
    "SubmissionResponse",
    "StepValidationResponse",
    "Statistics",
    "StatisticsResponse",
    "MessageResponse"
]
