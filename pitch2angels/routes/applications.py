# pitch2angels/routes/applications.py
from fastapi import APIRouter, Body, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from pitch2angels.database import get_db
from pitch2angels.schemas.application import (
    ApplicationResponse,
    ApplicationSubmission,
    StepValidationResponse,
    SubmissionResponse
)
from pitch2angels.services.application_service import ApplicationService
from pitch2angels.utils.form_options import all_options
from pitch2angels.utils.upload import LocalBlobStore, get_blob_store, read_upload
from pitch2angels.wizard import STEP_COUNT, validate_step

router = APIRouter(
    prefix="/api/applications",
    tags=["Applications"]
)


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    # SECTION A: Applicant
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    guardian_name: Optional[str] = Form(None, alias="guardianName"),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    region: Optional[str] = Form(None),
    pronouns: Optional[str] = Form(None),
    occupation: Optional[str] = Form(None),

    # SECTION B: Business
    business_name: Optional[str] = Form(None, alias="businessName"),
    website: Optional[str] = Form(None),
    categories: Optional[str] = Form(None),
    phase: Optional[str] = Form(None),
    has_collaborators: Optional[str] = Form(None, alias="hasCollaborators"),
    collaborator_names: Optional[str] = Form(None, alias="collaboratorNames"),
    description: Optional[str] = Form(None),

    # SECTION C: Files
    product_image: Optional[UploadFile] = File(None, alias="productImage"),
    payment_receipt: Optional[UploadFile] = File(None, alias="paymentReceipt"),

    # SECTION D: Payment & consent
    bank_name: Optional[str] = Form(None, alias="bankName"),
    account_holder_name: Optional[str] = Form(None, alias="accountHolderName"),
    transaction_reference: Optional[str] = Form(None, alias="transactionReference"),
    amount_paid: Optional[str] = Form(None, alias="amountPaid"),
    payment_date: Optional[str] = Form(None, alias="paymentDate"),
    agreed_to_terms: Optional[str] = Form(None, alias="agreedToTerms"),
    signature: Optional[str] = Form(None),

    db: Session = Depends(get_db),
    store: LocalBlobStore = Depends(get_blob_store)
):
    """Receive the completed application form with its two files."""
    submission = ApplicationSubmission(
        first_name=first_name,
        last_name=last_name,
        guardian_name=guardian_name,
        phone=phone,
        email=email,
        city=city,
        region=region,
        pronouns=pronouns,
        occupation=occupation,
        business_name=business_name,
        website=website,
        categories=categories,
        phase=phase,
        has_collaborators=has_collaborators,
        collaborator_names=collaborator_names,
        description=description,
        bank_name=bank_name,
        account_holder_name=account_holder_name,
        transaction_reference=transaction_reference,
        amount_paid=amount_paid,
        payment_date=payment_date,
        agreed_to_terms=agreed_to_terms,
        signature=signature
    )

    application = ApplicationService.submit(
        db,
        store,
        submission,
        product_image=await read_upload(product_image),
        payment_receipt=await read_upload(payment_receipt)
    )

    return SubmissionResponse(
        id=application.id,
        productImageUrl=application.product_image,
        paymentReceiptUrl=application.payment_receipt,
        createdAt=application.created_at
    )


@router.get("/options")
async def get_form_options():
    """Option catalogues used by the form's select fields"""
    return {"success": True, "data": all_options()}


@router.post("/validate/{step}", response_model=StepValidationResponse)
async def validate_form_step(
    step: int = Path(..., ge=1, le=STEP_COUNT),
    data: Dict[str, Any] = Body(...)
):
    """
    Run one wizard step's validators against a JSON copy of the form.

    File fields are described as {"filename": ..., "size": ...} objects.
    """
    errors = validate_step(step, data)
    return {"success": not errors, "step": step, "errors": errors}


@router.get("/{application_id}")
async def get_application(application_id: int, db: Session = Depends(get_db)):
    application = ApplicationService.get_application(db, application_id)
    return {
        "success": True,
        "data": ApplicationResponse.model_validate(application)
    }
