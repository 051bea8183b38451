"""Create applications table

Revision ID: 3b1f6c2a9d10
Revises:
Create Date: 2025-11-02 14:12:37.204113
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b1f6c2a9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),

        # Applicant
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('guardian_name', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('region', sa.String(length=100), nullable=False),
        sa.Column('pronouns', sa.String(length=50), nullable=True),
        sa.Column('occupation', sa.String(length=200), nullable=True),

        # Business
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('categories', sa.JSON(), nullable=False),
        sa.Column('phase', sa.String(length=50), nullable=True),
        sa.Column('has_collaborators', sa.String(length=10), nullable=False, server_default='no'),
        sa.Column('collaborator_names', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),

        # Files
        sa.Column('product_image', sa.String(length=1000), nullable=False),
        sa.Column('payment_receipt', sa.String(length=1000), nullable=False),

        # Payment attestation
        sa.Column('bank_name', sa.String(length=200), nullable=False),
        sa.Column('account_holder_name', sa.String(length=200), nullable=False),
        sa.Column('transaction_reference', sa.String(length=200), nullable=False),
        sa.Column('amount_paid', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('payment_date', sa.Date(), nullable=False),

        # Consent
        sa.Column('agreed_to_terms', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('signature', sa.String(length=255), nullable=False),

        # Review metadata
        sa.Column('reviewed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('review_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=100), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),

        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.CheckConstraint(
            "review_status IN ('pending', 'approved', 'rejected', 'shortlisted')",
            name='ck_applications_review_status'
        ),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_email', 'applications', ['email'], unique=True)
    op.create_index('ix_applications_region', 'applications', ['region'])
    op.create_index('ix_applications_reviewed', 'applications', ['reviewed'])
    op.create_index('ix_applications_created_at', 'applications', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_applications_created_at', table_name='applications')
    op.drop_index('ix_applications_reviewed', table_name='applications')
    op.drop_index('ix_applications_region', table_name='applications')
    op.drop_index('ix_applications_email', table_name='applications')
    op.drop_index('ix_applications_id', table_name='applications')
    op.drop_table('applications')
