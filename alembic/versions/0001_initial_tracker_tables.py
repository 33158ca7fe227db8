"""create tracker tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _student_fk() -> sa.Column:
    return sa.Column(
        "student_id", sa.String(length=36), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("handle", sa.String(length=255), nullable=False),
        sa.Column("profile_link", sa.String(length=500), nullable=False),
        sa.Column("batch", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_students_handle", "students", ["handle"], unique=True)
    op.create_index("ix_students_batch", "students", ["batch"])

    op.create_table(
        "daily_progress",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        _student_fk(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("total_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("easy_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("medium_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hard_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("daily_increment", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("student_id", "date", name="uq_daily_progress_student_date"),
    )
    op.create_index("ix_daily_progress_student_id", "daily_progress", ["student_id"])

    op.create_table(
        "weekly_trends",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        _student_fk(),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("week_end", sa.Date(), nullable=False),
        sa.Column("total_problems", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("weekly_increment", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("student_id", "week_start", name="uq_weekly_trends_student_week"),
    )
    op.create_index("ix_weekly_trends_student_id", "weekly_trends", ["student_id"])

    op.create_table(
        "badges",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        _student_fk(),
        sa.Column("badge_type", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(length=64), nullable=False),
        sa.Column("earned_on", sa.Date(), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_badges_student_type", "badges", ["student_id", "badge_type"])

    op.create_table(
        "weekly_progress_data",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        _student_fk(),
        sa.Column("week1_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("week2_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("week3_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("week4_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_week_score", sa.Integer(), nullable=True),
        sa.Column("week2_progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("week3_progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("week4_progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_week_to_current_increment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_weekly_growth", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_weekly_progress_data_student_id", "weekly_progress_data", ["student_id"], unique=True)

    op.create_table(
        "app_settings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("last_sync_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_auto_sync_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_index("ix_weekly_progress_data_student_id", table_name="weekly_progress_data")
    op.drop_table("weekly_progress_data")
    op.drop_index("ix_badges_student_type", table_name="badges")
    op.drop_table("badges")
    op.drop_index("ix_weekly_trends_student_id", table_name="weekly_trends")
    op.drop_table("weekly_trends")
    op.drop_index("ix_daily_progress_student_id", table_name="daily_progress")
    op.drop_table("daily_progress")
    op.drop_index("ix_students_batch", table_name="students")
    op.drop_index("ix_students_handle", table_name="students")
    op.drop_table("students")
