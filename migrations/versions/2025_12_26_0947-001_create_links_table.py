"""Create links table

Revision ID: 001_links
Revises:
Create Date: 2025-12-26 09:47:37.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def upgrade() -> None:
    """
    Create the links table:
    - short_name is unique; the service relies on this constraint to
      detect taken short names
    """
    op.create_table(
        'links',
        sa.Column('id', BigIntId, nullable=False, autoincrement=True),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('short_name', sa.String(length=32), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_links_short_name',
        'links',
        ['short_name'],
        unique=True
    )


def downgrade() -> None:
    op.drop_index('ix_links_short_name', table_name='links')
    op.drop_table('links')
