from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Text, Numeric, JSON, CheckConstraint
from sqlalchemy.sql import func
from pitch2angels.database import Base

REVIEW_STATUSES = ("pending", "approved", "rejected", "shortlisted")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint(
            "review_status IN ('pending', 'approved', 'rejected', 'shortlisted')",
            name="ck_applications_review_status"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    # SECTION A: Applicant
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    guardian_name = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    city = Column(String(100), nullable=False)
    region = Column(String(100), nullable=False, index=True)
    pronouns = Column(String(50), nullable=True)
    occupation = Column(String(200), nullable=True)

    # SECTION B: Business
    business_name = Column(String(255), nullable=False)
    website = Column(String(500), nullable=True)
    categories = Column(JSON, nullable=False, default=list)
    phase = Column(String(50), nullable=True)
    has_collaborators = Column(String(10), nullable=False, default="no")
    collaborator_names = Column(Text, nullable=True)
    description = Column(Text, nullable=False)

    # SECTION C: Files
    product_image = Column(String(1000), nullable=False)
    payment_receipt = Column(String(1000), nullable=False)

    # SECTION D: Payment attestation
    bank_name = Column(String(200), nullable=False)
    account_holder_name = Column(String(200), nullable=False)
    transaction_reference = Column(String(200), nullable=False)
    amount_paid = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    payment_date = Column(Date, nullable=False)

    # SECTION E: Consent
    agreed_to_terms = Column(Boolean, nullable=False, default=False)
    signature = Column(String(255), nullable=False)

    # SECTION F: Review metadata (the only fields mutated after creation)
    reviewed = Column(Boolean, nullable=False, default=False, index=True)
    review_status = Column(String(20), nullable=False, default="pending")
    review_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(100), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Application {self.id} {self.business_name!r} ({self.review_status})>"
