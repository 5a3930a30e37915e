"""initial vending schema

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the two tables behind the SQL repositories:
- product: one row per vending column, keyed by the supplier-assigned column_id
- sale: append-only ledger, product name resolved through product_id on read
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2d7e10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # product: column_id is the upsert key, never autoincremented
    # ============================================================================
    op.create_table(
        'product',
        sa.Column('column_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('column_id'),
    )
    op.create_index('ix_product_name', 'product', ['name'])

    # ============================================================================
    # sale: price is the total charged (unit price x quantity)
    # ============================================================================
    op.create_table(
        'sale',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['product.column_id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_sale_date', 'sale', ['date'])
    op.create_index('ix_sale_product_id', 'sale', ['product_id'])


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_index('ix_sale_product_id', table_name='sale')
    op.drop_index('ix_sale_date', table_name='sale')
    op.drop_table('sale')
    op.drop_index('ix_product_name', table_name='product')
    op.drop_table('product')
