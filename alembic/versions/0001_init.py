"""create orders table

Revision ID: 0001_init
Revises:
Create Date: 2025-11-02

"""
from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'orders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('social_media_handle', sa.String(200), nullable=True),
        sa.Column('address', sa.Text, nullable=False),
        sa.Column('items', sa.JSON, nullable=False),
        sa.Column('quantity_total', sa.Integer, nullable=False, server_default='0'),
        sa.Column('courier_service', sa.String(100), nullable=False, server_default=''),
        sa.Column('courier_receipt', sa.String(100), nullable=True),
        sa.Column('sent_date', sa.Date, nullable=True),
        sa.Column('shipping_charges', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('payment_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('notes', sa.Text, nullable=True),
    )
    op.create_index('idx_orders_created_at', 'orders', ['created_at'])
    op.create_index('idx_orders_status', 'orders', ['status'])

def downgrade():
    op.drop_index('idx_orders_status')
    op.drop_index('idx_orders_created_at')
    op.drop_table('orders')
