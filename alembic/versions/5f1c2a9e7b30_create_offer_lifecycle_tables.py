"""Create offer lifecycle tables.

Revision ID: 5f1c2a9e7b30
Revises:
Create Date: 2026-10-19

Creates users, customers, agents, insurance_types, offers, policies,
payments and documents. Policies are unique per offer; payments are
unique per policy.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '5f1c2a9e7b30'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create all offer lifecycle tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('id_no', sa.String(50), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
    )
    op.create_index('ix_customers_user_id', 'customers', ['user_id'])

    op.create_table(
        'agents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('agent_code', sa.String(20), nullable=False, unique=True),
        sa.Column('department', sa.String(100), nullable=False, server_default=''),
        sa.Column('phone', sa.String(20), nullable=True),
    )
    op.create_index('ix_agents_user_id', 'agents', ['user_id'])

    op.create_table(
        'insurance_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('base_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        'offers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('agent_id', sa.Integer(), sa.ForeignKey('agents.id'), nullable=True),
        sa.Column('insurance_type_id', sa.Integer(), sa.ForeignKey('insurance_types.id'), nullable=False),
        sa.Column('department', sa.String(100), nullable=False, server_default=''),
        sa.Column('base_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('discount_rate', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('final_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('coverage_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending'),
        sa.Column('valid_until', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('requested_start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('customer_additional_info', postgresql.JSONB(), nullable=True),
        sa.Column('is_customer_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('customer_approved_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('admin_notes', sa.String(1000), nullable=True),
        sa.Column('rejection_reason', sa.String(1000), nullable=True),
        sa.Column('policy_pdf_url', sa.String(500), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1',
                  comment='Optimistic concurrency counter'),
        sa.CheckConstraint('discount_rate >= 0 AND discount_rate <= 100', name='ck_offers_discount_rate'),
    )
    op.create_index('ix_offers_customer_id', 'offers', ['customer_id'])
    op.create_index('ix_offers_agent_id', 'offers', ['agent_id'])
    op.create_index('ix_offers_department', 'offers', ['department'])
    op.create_index('ix_offers_status', 'offers', ['status'])

    op.create_table(
        'policies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('offer_id', sa.Integer(),
                  sa.ForeignKey('offers.id', ondelete='SET NULL'), nullable=True, unique=True,
                  comment='At most one policy per offer'),
        sa.Column('policy_number', sa.String(50), nullable=False, unique=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('total_premium', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='active'),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('insurance_type_id', sa.Integer(), sa.ForeignKey('insurance_types.id'), nullable=True),
        sa.Column('agent_id', sa.Integer(), sa.ForeignKey('agents.id'), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('policy_id', sa.Integer(),
                  sa.ForeignKey('policies.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('method', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('transaction_id', sa.String(100), nullable=True, unique=True),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('paid_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_url', sa.String(500), nullable=False),
        sa.Column('file_type', sa.String(100), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='active'),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('offer_id', sa.Integer(),
                  sa.ForeignKey('offers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('policy_id', sa.Integer(), sa.ForeignKey('policies.id'), nullable=True),
        sa.Column('claim_id', sa.Integer(), nullable=True),
        sa.Column('uploaded_by_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('uploaded_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index('ix_documents_customer_id', 'documents', ['customer_id'])
    op.create_index('ix_documents_offer_id', 'documents', ['offer_id'])
    op.create_index('ix_documents_policy_id', 'documents', ['policy_id'])


def downgrade() -> None:
    """Drop all offer lifecycle tables."""
    op.drop_table('documents')
    op.drop_table('payments')
    op.drop_table('policies')
    op.drop_table('offers')
    op.drop_table('insurance_types')
    op.drop_table('agents')
    op.drop_table('customers')
    op.drop_table('users')
