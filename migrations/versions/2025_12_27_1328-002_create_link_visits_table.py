"""Create link_visits table

Revision ID: 002_link_visits
Revises: 001_links
Create Date: 2025-12-27 13:28:03.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_link_visits'
down_revision: Union[str, None] = '001_links'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def upgrade() -> None:
    """
    Create the link_visits table.

    The foreign key is declared inline so SQLite gets it too (SQLite can't
    add constraints to an existing table). Deleting a link deletes its visits.
    """
    op.create_table(
        'link_visits',
        sa.Column('id', BigIntId, nullable=False, autoincrement=True),
        sa.Column('link_id', BigIntId, nullable=False),
        sa.Column('ip', sa.Text(), nullable=False, server_default=''),
        sa.Column('user_agent', sa.Text(), nullable=False, server_default=''),
        sa.Column('referer', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.Integer(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['link_id'],
            ['links.id'],
            name='fk_link_visits_link_id',
            ondelete='CASCADE'
        )
    )

    op.create_index('ix_link_visits_link_id', 'link_visits', ['link_id'])
    op.create_index('ix_link_visits_created_at', 'link_visits', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_link_visits_created_at', table_name='link_visits')
    op.drop_index('ix_link_visits_link_id', table_name='link_visits')
    op.drop_table('link_visits')
