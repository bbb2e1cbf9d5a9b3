"""Initial schema: users, applications, form fields, payments, submissions, documents

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1c2a9b7d10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('profile_image', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('email_verification_token', sa.String(64), nullable=True),
        sa.Column('password_reset_token', sa.String(64), nullable=True),
        sa.Column('password_reset_expires', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_email_verification_token', 'users', ['email_verification_token'])
    op.create_index('ix_users_password_reset_token', 'users', ['password_reset_token'])

    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('tutorial_url', sa.String(500), nullable=True),
        sa.Column('redirect_url', sa.String(500), nullable=False),
        sa.Column('allow_document_upload', sa.Boolean(), nullable=False),
        sa.Column('processing_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('estimated_time', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_applications_category', 'applications', ['category'])
    op.create_index('ix_applications_is_active', 'applications', ['is_active'])
    op.create_index('ix_applications_priority', 'applications', ['priority'])
    op.create_index('ix_applications_created_at', 'applications', ['created_at'])

    op.create_table(
        'form_fields',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36),
                  sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('label', sa.String(200), nullable=False),
        sa.Column('field_type', sa.String(20), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=True),
        sa.Column('placeholder', sa.String(255), nullable=True),
        sa.Column('validation_pattern', sa.String(255), nullable=True),
        sa.Column('help_text', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('min_length', sa.Integer(), nullable=True),
        sa.Column('max_length', sa.Integer(), nullable=True),
        sa.Column('min_value', sa.Numeric(), nullable=True),
        sa.Column('max_value', sa.Numeric(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_form_fields_application_id', 'form_fields', ['application_id'])
    op.create_index('ix_form_fields_order', 'form_fields', ['order'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('payment_gateway', sa.String(20), nullable=False),
        sa.Column('gateway_order_id', sa.String(100), nullable=True),
        sa.Column('gateway_payment_id', sa.String(100), nullable=True),
        sa.Column('gateway_signature', sa.String(255), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('payment_metadata', sa.JSON(), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('refunded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('refund_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('refund_reason', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_status', 'payments', ['status'])
    op.create_index('ix_payments_payment_gateway', 'payments', ['payment_gateway'])
    op.create_index('ix_payments_gateway_order_id', 'payments', ['gateway_order_id'])
    op.create_index('ix_payments_gateway_payment_id', 'payments', ['gateway_payment_id'])

    op.create_table(
        'user_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('submission_type', sa.String(20), nullable=False),
        sa.Column('form_data', sa.JSON(), nullable=True),
        sa.Column('payment_id', sa.String(36), sa.ForeignKey('payments.id'), nullable=True),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=True),
        sa.Column('tracking_number', sa.String(40), nullable=False),
        sa.Column('external_application_id', sa.String(100), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'application_id', name='uq_user_application'),
    )
    op.create_index('ix_user_applications_user_id', 'user_applications', ['user_id'])
    op.create_index('ix_user_applications_application_id', 'user_applications', ['application_id'])
    op.create_index('ix_user_applications_status', 'user_applications', ['status'])
    op.create_index('ix_user_applications_tracking_number', 'user_applications', ['tracking_number'], unique=True)
    op.create_index('ix_user_applications_submitted_at', 'user_applications', ['submitted_at'])

    op.create_table(
        'documents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_application_id', sa.String(36),
                  sa.ForeignKey('user_applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('original_name', sa.String(255), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('file_url', sa.String(500), nullable=False),
        sa.Column('document_type', sa.String(50), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verified_by', sa.String(36), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_documents_user_application_id', 'documents', ['user_application_id'])
    op.create_index('ix_documents_is_verified', 'documents', ['is_verified'])


def downgrade():
    op.drop_table('documents')
    op.drop_table('user_applications')
    op.drop_table('payments')
    op.drop_table('form_fields')
    op.drop_table('applications')
    op.drop_table('users')
