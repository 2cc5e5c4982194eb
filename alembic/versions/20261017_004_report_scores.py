"""Report scores: overall score, dimension score blocks, norm groups, benchmarks

Revision ID: 004_report_scores
Revises: 003_report_data
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from snowflake.sqlalchemy import VARIANT

revision: str = '004_report_scores'
down_revision: Union[str, None] = '003_report_data'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'groups',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('client_id', sa.String(36), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('target_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['target_id'], ['profiles.id']),
    )

    op.create_table(
        'group_members',
        sa.Column('group_id', sa.String(36), nullable=False),
        sa.Column('profile_id', sa.String(36), nullable=False),
        sa.Column('role', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('group_id', 'profile_id'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id']),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id']),
    )

    op.create_table(
        'benchmarks',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('dimension_id', sa.String(36), nullable=False),
        sa.Column('industry_id', sa.String(36), nullable=True),
        sa.Column('value', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['dimension_id'], ['dimensions.id']),
    )

    # Existing reports keep NULL scores until regenerated
    op.add_column('report_data', sa.Column('overall_score', sa.Float(), nullable=True))
    op.add_column('report_data', sa.Column('dimension_scores', VARIANT, nullable=True))


def downgrade() -> None:
    op.drop_column('report_data', 'dimension_scores')
    op.drop_column('report_data', 'overall_score')
    op.drop_table('benchmarks')
    op.drop_table('group_members')
    op.drop_table('groups')
