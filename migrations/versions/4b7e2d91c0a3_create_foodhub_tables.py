"""create_foodhub_tables

Revision ID: 4b7e2d91c0a3
Revises:
Create Date: 2026-10-19 09:14:22.418305

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e2d91c0a3'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing_tables = inspector.get_table_names()

    if 'vendors' not in existing_tables:
        op.create_table(
            'vendors',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_vendors_name'), 'vendors', ['name'], unique=False)

    if 'merchants' not in existing_tables:
        op.create_table(
            'merchants',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('vendor_id', sa.String(length=36), nullable=False),
            sa.Column('outlet_name', sa.String(length=255), nullable=False),
            sa.Column('street_address', sa.String(length=500), nullable=True),
            sa.Column('city', sa.String(length=100), nullable=True),
            sa.Column('latitude', sa.Float(), nullable=True),
            sa.Column('longitude', sa.Float(), nullable=True),
            sa.Column('delivery_radius_meters', sa.Integer(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('is_accepting_orders', sa.Boolean(), nullable=False),
            sa.Column('operational_status', sa.String(length=50), nullable=False),
            sa.Column('average_rating', sa.Numeric(precision=3, scale=2), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_merchants_vendor_id'), 'merchants', ['vendor_id'], unique=False)
        op.create_index(op.f('ix_merchants_outlet_name'), 'merchants', ['outlet_name'], unique=False)
        op.create_index(op.f('ix_merchants_is_active'), 'merchants', ['is_active'], unique=False)

    if 'products' not in existing_tables:
        op.create_table(
            'products',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('created_by_vendor_id', sa.String(length=36), nullable=True),
            sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(['created_by_vendor_id'], ['vendors.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_products_name'), 'products', ['name'], unique=False)
        op.create_index(op.f('ix_products_created_by_vendor_id'), 'products', ['created_by_vendor_id'], unique=False)

    if 'merchant_products' not in existing_tables:
        op.create_table(
            'merchant_products',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('merchant_id', sa.String(length=36), nullable=False),
            sa.Column('product_id', sa.String(length=36), nullable=False),
            sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('is_available', sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_merchant_products_merchant_id'), 'merchant_products', ['merchant_id'], unique=False)
        op.create_index(op.f('ix_merchant_products_product_id'), 'merchant_products', ['product_id'], unique=False)

    if 'customers' not in existing_tables:
        op.create_table(
            'customers',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=True)

    if 'accounts' not in existing_tables:
        op.create_table(
            'accounts',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('role', sa.Enum('ADMIN', 'SERVICE', name='accountrole'), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('last_login', sa.DateTime(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_accounts_email'), 'accounts', ['email'], unique=True)

    if 'cart_items' not in existing_tables:
        op.create_table(
            'cart_items',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('customer_id', sa.String(length=36), nullable=False),
            sa.Column('merchant_id', sa.String(length=36), nullable=False),
            sa.Column('product_id', sa.String(length=36), nullable=False),
            sa.Column('merchant_product_id', sa.String(length=36), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('price_at_add', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('compare_at_price', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('subtotal', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('product_size', sa.String(length=20), nullable=True),
            sa.Column('selected_variation_id', sa.String(length=36), nullable=True),
            sa.Column('selected_modifiers', sa.JSON(), nullable=True),
            sa.Column('selected_addons', sa.JSON(), nullable=True),
            sa.Column('special_instructions', sa.Text(), nullable=True),
            sa.Column('notes_for_rider', sa.Text(), nullable=True),
            sa.Column('item_hash', sa.String(length=32), nullable=False),
            sa.Column('is_available', sa.Boolean(), nullable=False),
            sa.Column('unavailable_reason', sa.String(length=255), nullable=True),
            sa.Column('expires_at', sa.DateTime(), nullable=True),
            sa.Column('session_id', sa.String(length=255), nullable=True),
            *_timestamps(),
            sa.CheckConstraint('quantity >= 1 AND quantity <= 999', name='check_cart_item_quantity_range'),
            sa.CheckConstraint('price_at_add >= 0', name='check_cart_item_price_non_negative'),
            sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['merchant_product_id'], ['merchant_products.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['selected_variation_id'], ['products.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('customer_id', 'merchant_id', 'item_hash', name='uq_cart_items_customer_merchant_hash')
        )
        op.create_index('ix_cart_items_customer_merchant', 'cart_items', ['customer_id', 'merchant_id'], unique=False)
        op.create_index('ix_cart_items_customer_hash', 'cart_items', ['customer_id', 'item_hash'], unique=False)
        op.create_index('ix_cart_items_item_hash', 'cart_items', ['item_hash'], unique=False)
        op.create_index('ix_cart_items_updated_at', 'cart_items', ['updated_at'], unique=False)
        op.create_index('ix_cart_items_expires_at', 'cart_items', ['expires_at'], unique=False)


def downgrade() -> None:
    op.drop_table('cart_items')
    op.drop_index(op.f('ix_accounts_email'), table_name='accounts')
    op.drop_table('accounts')
    op.drop_index(op.f('ix_customers_email'), table_name='customers')
    op.drop_table('customers')
    op.drop_table('merchant_products')
    op.drop_table('products')
    op.drop_table('merchants')
    op.drop_table('vendors')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        sa.Enum(name='accountrole').drop(bind, checkfirst=True)
