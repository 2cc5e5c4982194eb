"""Initial core tables - v1.0

Revision ID: 001_core_tables
Revises:
Create Date: 2026-10-05 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_core_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the assessment, assignment and answer tables read by report computation."""

    # ===== 1. ASSESSMENTS =====
    op.create_table(
        'assessments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('is_360', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # ===== 2. PROFILES =====
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('client_id', sa.String(36), nullable=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
    )

    # ===== 3. DIMENSIONS =====
    op.create_table(
        'dimensions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assessment_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
    )

    # ===== 4. FIELDS =====
    op.create_table(
        'fields',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assessment_id', sa.String(36), nullable=False),
        sa.Column('dimension_id', sa.String(36), nullable=True),
        sa.Column('type', sa.String(30), nullable=False),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.ForeignKeyConstraint(['dimension_id'], ['dimensions.id']),
    )

    # ===== 5. ASSIGNMENTS =====
    op.create_table(
        'assignments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('assessment_id', sa.String(36), nullable=False),
        sa.Column('survey_id', sa.String(36), nullable=True),
        sa.Column('target_id', sa.String(36), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['target_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
    )

    # ===== 6. ANSWERS =====
    op.create_table(
        'answers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assignment_id', sa.String(36), nullable=False),
        sa.Column('field_id', sa.String(36), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id']),
        sa.ForeignKeyConstraint(['field_id'], ['fields.id']),
    )

    # ===== 7. ASSIGNMENT DIMENSION SCORES =====
    op.create_table(
        'assignment_dimension_scores',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assignment_id', sa.String(36), nullable=False),
        sa.Column('dimension_id', sa.String(36), nullable=True),
        sa.Column('avg_score', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id']),
        sa.ForeignKeyConstraint(['dimension_id'], ['dimensions.id']),
    )


def downgrade() -> None:
    """Drop tables in reverse dependency order."""
    op.drop_table('assignment_dimension_scores')
    op.drop_table('answers')
    op.drop_table('assignments')
    op.drop_table('fields')
    op.drop_table('dimensions')
    op.drop_table('profiles')
    op.drop_table('assessments')
