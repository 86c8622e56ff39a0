"""create question bank, assessments and submissions

Revision ID: 3c1f9a2e7b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2e7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "question_bank",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="mcq"),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column(
            "difficulty", sa.String(length=16), nullable=False, server_default="medium"
        ),
        sa.Column(
            "options",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("correct_answer", postgresql.JSONB(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "tags",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_question_bank_category", "question_bank", ["category"])

    op.create_table(
        "assessments",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="auto"),
        sa.Column(
            "categories",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "difficulty",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("question_count", sa.Integer(), nullable=False, server_default="20"),
        sa.Column(
            "randomize_questions", sa.Boolean(), nullable=False, server_default="true"
        ),
        sa.Column(
            "shuffle_options", sa.Boolean(), nullable=False, server_default="true"
        ),
        sa.Column(
            "questions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("time_limit", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("passing_score", sa.Integer(), nullable=False, server_default="70"),
        sa.Column("allow_review", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("show_results", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "prevent_cheating", sa.Boolean(), nullable=False, server_default="true"
        ),
        sa.Column("job_id", sa.String(length=64), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "assessment_submissions",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "assessment_id",
            sa.String(length=64),
            sa.ForeignKey("assessments.id"),
            nullable=False,
        ),
        sa.Column("candidate_id", sa.String(length=64), nullable=False),
        sa.Column("application_id", sa.String(length=64), nullable=False),
        sa.Column(
            "selected_questions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "answers",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("max_score", sa.Integer(), nullable=True),
        sa.Column("percentage", sa.Integer(), nullable=True),
        sa.Column(
            "category_scores",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("time_spent", sa.Integer(), nullable=True),
        sa.Column("flagged", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("passed", sa.Boolean(), nullable=True),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="pending"
        ),
        sa.Column("started_at", sa.Integer(), nullable=True),
        sa.Column("submitted_at", sa.Integer(), nullable=True),
        sa.Column("graded_at", sa.Integer(), nullable=True),
        sa.Column("idempotency_key", sa.String(length=255), nullable=True),
        sa.UniqueConstraint(
            "idempotency_key", name="uq_assessment_submissions_idempotency_key"
        ),
    )
    op.create_index(
        "ix_assessment_submissions_assessment_id",
        "assessment_submissions",
        ["assessment_id"],
    )
    op.create_index(
        "ix_assessment_submissions_candidate_id",
        "assessment_submissions",
        ["candidate_id"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_assessment_submissions_candidate_id", table_name="assessment_submissions"
    )
    op.drop_index(
        "ix_assessment_submissions_assessment_id", table_name="assessment_submissions"
    )
    op.drop_table("assessment_submissions")
    op.drop_table("assessments")
    op.drop_index("ix_question_bank_category", table_name="question_bank")
    op.drop_table("question_bank")
