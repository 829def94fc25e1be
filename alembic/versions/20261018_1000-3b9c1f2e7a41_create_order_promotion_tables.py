"""create_order_promotion_tables

Revision ID: 3b9c1f2e7a41
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b9c1f2e7a41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'promotions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, comment='促销名称'),
        sa.Column('description', sa.Text(), nullable=True, comment='展示文案'),
        sa.Column('min_quantity', sa.Integer(), nullable=False, comment='最小购买数量'),
        sa.Column('discount_type', sa.String(length=20), nullable=False, comment='折扣类型: PERCENTAGE/FIXED'),
        sa.Column('discount_value', sa.Numeric(precision=12, scale=2), nullable=False, comment='折扣值'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true(), comment='是否启用'),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='0', comment='优先级（越大越靠前）'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True, comment='生效时间'),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True, comment='失效时间'),
        sa.Column('metadata', sa.JSON(), nullable=True, comment='扩展信息'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='更新时间'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_promotions_active_priority', 'promotions', ['active', 'priority'], unique=False)

    op.create_table(
        'discount_codes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False, comment='折扣码（大写）'),
        sa.Column('type', sa.String(length=10), nullable=False, comment='折扣类型: PERCENT/FIXED'),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False, comment='折扣值'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true(), comment='是否启用'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True, comment='过期时间'),
        sa.Column('max_redemptions', sa.Integer(), nullable=True, comment='最大使用次数'),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0', comment='已使用次数'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='更新时间'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_discount_codes_code', 'discount_codes', ['code'], unique=True)

    op.create_table(
        'discount_redemptions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('discount_code_id', sa.String(length=36), nullable=False, comment='折扣码ID'),
        sa.Column('user_id', sa.String(length=64), nullable=False, comment='兑换用户ID'),
        sa.Column('redeemed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='兑换时间'),
        sa.ForeignKeyConstraint(['discount_code_id'], ['discount_codes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_discount_redemptions_discount_code_id', 'discount_redemptions', ['discount_code_id'], unique=False)
    op.create_index('ix_discount_redemptions_user_id', 'discount_redemptions', ['user_id'], unique=False)

    op.create_table(
        'orders',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=64), nullable=True, comment='下单用户ID'),
        sa.Column('name_on_sticker', sa.String(length=100), nullable=True, comment='贴纸上印的名字'),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1', comment='贴纸数量'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ORDERED', comment='订单状态: ORDERED/PAID/PRINTING/SHIPPED/ACTIVE/LOST'),
        sa.Column('promotion_id', sa.String(length=36), nullable=True, comment='下单时应用的促销'),
        sa.Column('discount_code_id', sa.String(length=36), nullable=True, comment='下单时使用的折扣码'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['promotion_id'], ['promotions.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['discount_code_id'], ['discount_codes.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_owner_id', 'orders', ['owner_id'], unique=False)
    op.create_index('ix_orders_status', 'orders', ['status'], unique=False)
    op.create_index('ix_orders_status_created', 'orders', ['status', 'created_at'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=False, comment='订单ID'),
        sa.Column('user_id', sa.String(length=64), nullable=True, comment='付款用户ID'),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1', comment='支付覆盖的贴纸数量'),
        sa.Column('amount', sa.Integer(), nullable=False, comment='支付金额（最小货币单位）'),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='CLP', comment='货币代码 ISO-4217'),
        sa.Column('reference', sa.String(length=200), nullable=True, comment='支付渠道/转账参考号'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING', comment='支付状态'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='更新时间'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_order_id', 'payments', ['order_id'], unique=False)
    op.create_index('ix_payments_user_id', 'payments', ['user_id'], unique=False)
    op.create_index('ix_payments_status', 'payments', ['status'], unique=False)
    op.create_index('ix_payments_created_at', 'payments', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_payments_created_at', table_name='payments')
    op.drop_index('ix_payments_status', table_name='payments')
    op.drop_index('ix_payments_user_id', table_name='payments')
    op.drop_index('ix_payments_order_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_orders_status_created', table_name='orders')
    op.drop_index('ix_orders_status', table_name='orders')
    op.drop_index('ix_orders_owner_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_discount_redemptions_user_id', table_name='discount_redemptions')
    op.drop_index('ix_discount_redemptions_discount_code_id', table_name='discount_redemptions')
    op.drop_table('discount_redemptions')
    op.drop_index('ix_discount_codes_code', table_name='discount_codes')
    op.drop_table('discount_codes')
    op.drop_index('ix_promotions_active_priority', table_name='promotions')
    op.drop_table('promotions')
