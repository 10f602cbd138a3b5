"""initial schema

Revision ID: 3c1e7a9b2d40
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1e7a9b2d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'inventory_items',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('display_id', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.Date(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('current_stock', sa.Float(), nullable=False),
        sa.Column('min_stock', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(), nullable=False),
        sa.Column('supplier', sa.String(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('last_restocked', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inventory_items_supplier'), 'inventory_items', ['supplier'], unique=False)

    op.create_table(
        'inventory_activity',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('item_id', sa.String(length=32), nullable=False),
        sa.Column('item_name', sa.String(), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(), nullable=False),
        sa.Column('reason', sa.String(), nullable=False),
        sa.Column('previous_stock', sa.Float(), nullable=False),
        sa.Column('new_stock', sa.Float(), nullable=False),
        sa.Column('performed_by', sa.String(), nullable=False),
        sa.Column('performed_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inventory_activity_item_id'), 'inventory_activity', ['item_id'], unique=False)
    op.create_index(op.f('ix_inventory_activity_performed_at'), 'inventory_activity', ['performed_at'], unique=False)

    op.create_table(
        'inventory_meta',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('total_items', sa.Integer(), nullable=False),
        sa.Column('low_stock_alerts', sa.Integer(), nullable=False),
        sa.Column('critical_items', sa.Integer(), nullable=False),
        sa.Column('monthly_spend', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'roosters',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('breed_id', sa.String(), nullable=False),
        sa.Column('breed', sa.String(), nullable=False),
        sa.Column('age', sa.String(), nullable=False),
        sa.Column('weight', sa.String(), nullable=False),
        sa.Column('price', sa.String(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('health', sa.String(length=16), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('date_added', sa.Date(), nullable=False),
        sa.Column('owner', sa.String(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_roosters_breed'), 'roosters', ['breed'], unique=False)
    op.create_index(op.f('ix_roosters_status'), 'roosters', ['status'], unique=False)

    op.create_table(
        'rooster_breeds',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('characteristics', sa.JSON(), nullable=False),
        sa.Column('origin', sa.String(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'sales',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('transaction_id', sa.String(length=16), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('rooster_id', sa.String(), nullable=False),
        sa.Column('breed', sa.String(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_contact', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=32), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('commission', sa.Float(), nullable=True),
        sa.Column('agent_name', sa.String(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_sales_date'), 'sales', ['date'], unique=False)

    op.create_table(
        'suppliers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_person', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('items_supplied', sa.Integer(), nullable=False),
        sa.Column('total_orders', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_suppliers_name'), 'suppliers', ['name'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('customer', sa.String(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('rooster', sa.String(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('customer_id', sa.String(), nullable=True),
        sa.Column('transaction_id', sa.String(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reviews_date'), 'reviews', ['date'], unique=False)
    op.create_index(op.f('ix_reviews_status'), 'reviews', ['status'], unique=False)


def downgrade() -> None:
    op.drop_table('reviews')
    op.drop_table('suppliers')
    op.drop_table('sales')
    op.drop_table('rooster_breeds')
    op.drop_table('roosters')
    op.drop_table('inventory_meta')
    op.drop_table('inventory_activity')
    op.drop_table('inventory_items')
    op.drop_table('users')
