"""Report data table holding assigned feedback per assignment

Revision ID: 003_report_data
Revises: 002_feedback_library
Create Date: 2026-10-05 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from snowflake.sqlalchemy import VARIANT

revision: str = '003_report_data'
down_revision: Union[str, None] = '002_feedback_library'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'report_data',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assignment_id', sa.String(36), nullable=False, unique=True),
        sa.Column('feedback_assigned', VARIANT, nullable=True),
        sa.Column('calculated_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id']),
    )


def downgrade() -> None:
    op.drop_table('report_data')
