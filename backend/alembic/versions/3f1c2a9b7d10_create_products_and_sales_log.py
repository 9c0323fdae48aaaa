"""Create products and sales_log tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_code', sa.String(), nullable=True),
        sa.Column('barcode_value', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('subcategory', sa.String(), nullable=True),
        sa.Column('original_quantity', sa.Integer(), nullable=True),
        sa.Column('current_quantity', sa.Integer(), nullable=False),
        sa.Column('wholesale_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('retail_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('wholesale_total_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('retail_total_price', sa.Numeric(12, 2), nullable=True),
        sa.CheckConstraint('original_quantity >= 0'),
        sa.CheckConstraint('current_quantity >= 0'),
        sa.CheckConstraint('wholesale_price >= 0'),
        sa.CheckConstraint('retail_price >= 0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
    op.create_index(op.f('ix_products_product_code'), 'products', ['product_code'], unique=True)
    op.create_index(op.f('ix_products_category'), 'products', ['category'], unique=False)
    op.create_index(op.f('ix_products_subcategory'), 'products', ['subcategory'], unique=False)

    # No foreign key on product_id: sales outlive deleted products
    op.create_table(
        'sales_log',
        sa.Column('log_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('quantity_sold', sa.Integer(), nullable=False),
        sa.Column('sale_price_per_item', sa.Numeric(12, 2), nullable=False),
        sa.Column('wholesale_price_per_item_at_sale', sa.Numeric(12, 2), nullable=False),
        sa.Column('sale_timestamp', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('quantity_sold > 0'),
        sa.PrimaryKeyConstraint('log_id'),
    )
    op.create_index(op.f('ix_sales_log_log_id'), 'sales_log', ['log_id'], unique=False)
    op.create_index(op.f('ix_sales_log_product_id'), 'sales_log', ['product_id'], unique=False)
    op.create_index(op.f('ix_sales_log_sale_timestamp'), 'sales_log', ['sale_timestamp'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_sales_log_sale_timestamp'), table_name='sales_log')
    op.drop_index(op.f('ix_sales_log_product_id'), table_name='sales_log')
    op.drop_index(op.f('ix_sales_log_log_id'), table_name='sales_log')
    op.drop_table('sales_log')
    op.drop_index(op.f('ix_products_subcategory'), table_name='products')
    op.drop_index(op.f('ix_products_category'), table_name='products')
    op.drop_index(op.f('ix_products_product_code'), table_name='products')
    op.drop_index(op.f('ix_products_id'), table_name='products')
    op.drop_table('products')
