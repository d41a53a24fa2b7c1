"""Initial schema - channels, customers, orders, payments

Revision ID: 001
Revises:
Create Date: 2026-10-19

WHY: Creates the tables the Xendit payment flow needs: channels (tenants),
customers, orders, configured payment methods, recorded payments and the
ledger of processed Xendit callbacks.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ORDER_STATES = (
    'Created', 'AddingItems', 'ArrangingPayment', 'PaymentAuthorized',
    'PaymentSettled', 'PartiallyShipped', 'Shipped', 'PartiallyDelivered',
    'Delivered', 'Modifying', 'ArrangingAdditionalPayment', 'Cancelled',
)
PAYMENT_STATES = ('Created', 'Authorized', 'Settled', 'Declined', 'Error', 'Cancelled')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade() -> None:
    """
    Create payment tables.

    WHY: States are stored as strings checked by constraint (non-native
    enums) so the schema is identical on PostgreSQL and SQLite.
    """
    op.create_table(
        'channels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('token', sa.String(length=100), nullable=False),
        sa.Column('currency_code', sa.String(length=3), nullable=False, server_default='IDR'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )
    op.create_index('ix_channels_id', 'channels', ['id'])
    op.create_index('ix_channels_token', 'channels', ['token'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email_address', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_id', 'customers', ['id'])
    op.create_index('ix_customers_email_address', 'customers', ['email_address'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('state', sa.Enum(*ORDER_STATES, name='orderstate', native_enum=False, length=40), nullable=False, server_default='AddingItems'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('channel_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('total_with_tax', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('currency_code', sa.String(length=3), nullable=False, server_default='IDR'),
        sa.Column('order_placed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['channel_id'], ['channels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_code', 'orders', ['code'], unique=True)
    op.create_index('ix_orders_state', 'orders', ['state'])
    op.create_index('ix_orders_channel_id', 'orders', ['channel_id'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])

    op.create_table(
        'payment_methods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('handler_code', sa.String(length=100), nullable=False),
        sa.Column('channel_id', sa.Integer(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['channel_id'], ['channels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('channel_id', 'code', name='uq_payment_methods_channel_code'),
    )
    op.create_index('ix_payment_methods_id', 'payment_methods', ['id'])
    op.create_index('ix_payment_methods_handler_code', 'payment_methods', ['handler_code'])
    op.create_index('ix_payment_methods_channel_id', 'payment_methods', ['channel_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('method', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('state', sa.Enum(*PAYMENT_STATES, name='paymentstate', native_enum=False, length=20), nullable=False, server_default='Created'),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('method', 'transaction_id', name='uq_payments_method_transaction'),
    )
    op.create_index('ix_payments_id', 'payments', ['id'])
    op.create_index('ix_payments_order_id', 'payments', ['order_id'])
    op.create_index('ix_payments_transaction_id', 'payments', ['transaction_id'])

    # WHY: The unique notification_id is what makes replayed callbacks
    # detectable
    op.create_table(
        'processed_notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('notification_id', sa.String(length=255), nullable=False),
        sa.Column('order_code', sa.String(length=50), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_processed_notifications_id', 'processed_notifications', ['id'])
    op.create_index(
        'ix_processed_notifications_notification_id',
        'processed_notifications',
        ['notification_id'],
        unique=True,
    )


def downgrade() -> None:
    """Drop payment tables in reverse dependency order."""
    op.drop_table('processed_notifications')
    op.drop_table('payments')
    op.drop_table('payment_methods')
    op.drop_table('orders')
    op.drop_table('customers')
    op.drop_table('channels')
