"""Initial schema: courses, user courses, daily plans, tasks, quizzes, resources, AI logs.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("recommended_duration_days", sa.Integer(), nullable=True),
        sa.Column("created_by_ai", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("title", name="uq_courses_title"),
    )

    op.create_table(
        "user_courses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("custom_duration_days", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="in_progress"),
        sa.Column("progress_percent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("days_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_days", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_user_courses_user_id", "user_courses", ["user_id"])

    op.create_table(
        "daily_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_course_id",
            sa.Integer(),
            sa.ForeignKey("user_courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("study_hours", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("plan_type", sa.String(20), nullable=False, server_default="regular"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "uq_daily_plans_user_course_day", "daily_plans", ["user_course_id", "day_number"], unique=True
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("daily_plan_id", sa.Integer(), sa.ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimated_time", sa.Integer(), nullable=True),
        sa.Column("task_order", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resource_url", sa.String(1000), nullable=True),
    )
    op.create_index("ix_tasks_daily_plan_id", "tasks", ["daily_plan_id"])

    op.create_table(
        "quizzes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("daily_plan_id", sa.Integer(), sa.ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("covers_days_start", sa.Integer(), nullable=False),
        sa.Column("covers_days_end", sa.Integer(), nullable=False),
        sa.UniqueConstraint("daily_plan_id", name="uq_quizzes_daily_plan_id"),
    )

    op.create_table(
        "quiz_questions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("quiz_id", sa.Integer(), sa.ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_order", sa.Integer(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
    )

    op.create_table(
        "quiz_options",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("quiz_questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("option_text", sa.Text(), nullable=False),
        sa.Column("option_order", sa.Integer(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("daily_plan_id", sa.Integer(), sa.ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("url", sa.String(2000), nullable=True),
        sa.Column("resource_type", sa.String(50), nullable=False, server_default="link"),
    )
    op.create_index("ix_resources_daily_plan_id", "resources", ["daily_plan_id"])

    op.create_table(
        "ai_recommendation_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("course_title", sa.String(255), nullable=False),
        sa.Column("user_input_duration", sa.Integer(), nullable=True),
        sa.Column("ai_output", sa.Text(), nullable=True),
        sa.Column("used_fallback", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_ai_recommendation_logs_user_id", "ai_recommendation_logs", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_ai_recommendation_logs_user_id", table_name="ai_recommendation_logs")
    op.drop_table("ai_recommendation_logs")
    op.drop_index("ix_resources_daily_plan_id", table_name="resources")
    op.drop_table("resources")
    op.drop_table("quiz_options")
    op.drop_table("quiz_questions")
    op.drop_table("quizzes")
    op.drop_index("ix_tasks_daily_plan_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("uq_daily_plans_user_course_day", table_name="daily_plans")
    op.drop_table("daily_plans")
    op.drop_index("ix_user_courses_user_id", table_name="user_courses")
    op.drop_table("user_courses")
    op.drop_table("courses")
