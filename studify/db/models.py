from datetime import datetime, timezone
from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    recommended_duration_days = Column(Integer, nullable=True)
    created_by_ai = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user_courses = relationship("UserCourse", back_populates="course")


class UserCourse(Base):
    """One user's instantiation of a course: owns start date, status and progress."""
    __tablename__ = "user_courses"

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Identity comes from the external auth gateway; no users table here.
    user_id = Column(String(255), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    custom_duration_days = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, default=IN_PROGRESS)
    progress_percent = Column(Integer, nullable=False, default=0)
    days_completed = Column(Integer, nullable=False, default=0)
    total_days = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(timezone.utc))

    course = relationship("Course", back_populates="user_courses")
    daily_plans = relationship(
        "DailyPlan",
        back_populates="user_course",
        cascade="all, delete-orphan",
        order_by="DailyPlan.day_number",
    )


class DailyPlan(Base):
    __tablename__ = "daily_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_course_id = Column(Integer, ForeignKey("user_courses.id", ondelete="CASCADE"), nullable=False)
    day_number = Column(Integer, nullable=False)
    study_hours = Column(Integer, nullable=False, default=2)
    plan_type = Column(String(20), nullable=False, default="regular")  # regular, quiz, final_exam
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    user_course = relationship("UserCourse", back_populates="daily_plans")
    tasks = relationship(
        "Task", back_populates="daily_plan", cascade="all, delete-orphan", order_by="Task.task_order"
    )
    quiz = relationship("Quiz", back_populates="daily_plan", uselist=False, cascade="all, delete-orphan")
    resources = relationship("Resource", back_populates="daily_plan", cascade="all, delete-orphan")

    __table_args__ = (
        Index("uq_daily_plans_user_course_day", "user_course_id", "day_number", unique=True),
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    daily_plan_id = Column(Integer, ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    estimated_time = Column(Integer, nullable=True)  # minutes
    task_order = Column(Integer, nullable=False, default=1)
    is_completed = Column(Boolean, default=False, nullable=False)
    resource_url = Column(String(1000), nullable=True)

    daily_plan = relationship("DailyPlan", back_populates="tasks")

    __table_args__ = (Index("ix_tasks_daily_plan_id", "daily_plan_id"),)


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    daily_plan_id = Column(Integer, ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False, unique=True)
    title = Column(Text, nullable=False)
    covers_days_start = Column(Integer, nullable=False)
    covers_days_end = Column(Integer, nullable=False)

    daily_plan = relationship("DailyPlan", back_populates="quiz")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.question_order",
    )


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    question_text = Column(Text, nullable=False)
    question_order = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=True)

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuizOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizOption.option_order",
    )


class QuizOption(Base):
    __tablename__ = "quiz_options"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("quiz_questions.id", ondelete="CASCADE"), nullable=False)
    option_text = Column(Text, nullable=False)
    option_order = Column(Integer, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)

    question = relationship("QuizQuestion", back_populates="options")


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    daily_plan_id = Column(Integer, ForeignKey("daily_plans.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    url = Column(String(2000), nullable=True)
    resource_type = Column(String(50), nullable=False, default="link")

    daily_plan = relationship("DailyPlan", back_populates="resources")

    __table_args__ = (Index("ix_resources_daily_plan_id", "daily_plan_id"),)


class AIRecommendationLog(Base):
    """Audit row: the raw generation-service output for one roadmap request."""
    __tablename__ = "ai_recommendation_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False)
    course_title = Column(String(255), nullable=False)
    user_input_duration = Column(Integer, nullable=True)
    ai_output = Column(Text, nullable=True)  # opaque; stored exactly as serialized
    used_fallback = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("ix_ai_recommendation_logs_user_id", "user_id"),)
