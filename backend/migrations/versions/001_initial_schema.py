"""
Alembic migration: Initial GarmentSync schema.

Creates the orders table and the order-scoped collaboration tables
(order_updates, order_comments, stakeholders, media_files) plus the
notification inbox. Child tables reference orders logically through an
indexed order_id column without a foreign key constraint.

Revision ID: 001
Revises:
Create Date: 2025-02-03 10:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        'created_at',
        sa.DateTime(timezone=True),
        nullable=False,
        comment='Timestamp when record was created',
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        'updated_at',
        sa.DateTime(timezone=True),
        nullable=False,
        comment='Timestamp when record was last updated',
    )


def _entry_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_id', sa.String(100), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('author_name', sa.String(255), nullable=False),
        sa.Column('author_role', sa.String(20), nullable=False),
        _created_at(),
    )
    op.create_index(f'ix_{name}_order_id', name, ['order_id'])
    op.create_index(f'ix_{name}_created_at', name, ['created_at'])


def upgrade() -> None:
    """
    Upgrade database schema to the initial GarmentSync tables.
    """
    op.create_table(
        'orders',
        sa.Column('id', sa.String(100), primary_key=True),
        sa.Column('buyer_name', sa.String(255), nullable=False),
        sa.Column('style_number', sa.String(100), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True), nullable=False),
        sa.Column('buyer_email', sa.String(255), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    _entry_table('order_updates')
    _entry_table('order_comments')

    op.create_table(
        'stakeholders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('permissions', sa.String(16), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_stakeholders_order_id', 'stakeholders', ['order_id'])
    op.create_index('ix_stakeholders_created_at', 'stakeholders', ['created_at'])
    op.create_index(
        'ix_stakeholders_order_id_email', 'stakeholders', ['order_id', 'email']
    )

    op.create_table(
        'media_files',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_id', sa.String(100), nullable=False),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('original_name', sa.String(255), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uploaded_by', sa.String(255), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_media_files_order_id', 'media_files', ['order_id'])

    op.create_table(
        'inbox_notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('sender', sa.String(255), nullable=False),
        sa.Column('recipient', sa.String(255), nullable=False),
        sa.Column('order_id', sa.String(100), nullable=True),
        sa.Column('email_id', sa.String(255), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index(
        'ix_inbox_notifications_created_at', 'inbox_notifications', ['created_at']
    )


def downgrade() -> None:
    """
    Drop every GarmentSync table.
    """
    op.drop_table('inbox_notifications')
    op.drop_table('media_files')
    op.drop_table('stakeholders')
    op.drop_table('order_comments')
    op.drop_table('order_updates')
    op.drop_table('orders')
