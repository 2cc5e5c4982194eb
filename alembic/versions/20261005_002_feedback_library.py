"""Feedback library with score-eligibility windows

Revision ID: 002_feedback_library
Revises: 001_core_tables
Create Date: 2026-10-05 09:30:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '002_feedback_library'
down_revision: Union[str, None] = '001_core_tables'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # NULL min_score / max_score = unbounded on that side
    op.create_table(
        'feedback_library',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assessment_id', sa.String(36), nullable=False),
        sa.Column('dimension_id', sa.String(36), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('feedback', sa.Text(), nullable=False),
        sa.Column('min_score', sa.Float(), nullable=True),
        sa.Column('max_score', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.ForeignKeyConstraint(['dimension_id'], ['dimensions.id']),
    )


def downgrade() -> None:
    op.drop_table('feedback_library')
