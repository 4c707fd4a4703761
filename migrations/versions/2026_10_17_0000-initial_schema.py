"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the redirects table:
    - slug: unique, indexed (lookup path and collision detection)
    - created_at: indexed for time-based queries
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'redirects' in existing_tables:
        return

    op.create_table(
        'redirects',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('slug', sa.String(length=16), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('secret', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_redirects_slug',
        'redirects',
        ['slug'],
        unique=True
    )

    op.create_index(
        'ix_redirects_created_at',
        'redirects',
        ['created_at']
    )


def downgrade() -> None:
    """
    Drop the redirects table and its indexes.
    """
    op.drop_index('ix_redirects_created_at', table_name='redirects')
    op.drop_index('ix_redirects_slug', table_name='redirects')
    op.drop_table('redirects')
