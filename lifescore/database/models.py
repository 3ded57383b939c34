"""SQLAlchemy database models for lifescore.

Set/map fields (task custom days, daily pillar scores) are JSON here and
native Python collections everywhere else; conversion happens only in the
`to_pydantic` / `from_pydantic` helpers.
"""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, Date, DateTime, JSON, ForeignKey, UniqueConstraint

from typing import Union, TypeVar, Type
from lifescore.database.database import Base
from lifescore.models.task import CompletionType, Importance, FlexibilityRule, Frequency
from lifescore.models.outcome import Direction, GoalType, MetricType
from lifescore.models.cycle import WeekScore

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


def _new_id() -> str:
    return str(uuid.uuid4())


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from lifescore.models.user import User
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class PillarDB(Base):
    """Database model for Pillar."""

    __tablename__ = "pillars"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    emoji = Column(String, nullable=False, default="📌")
    color = Column(String, nullable=True)
    weight = Column(Float, nullable=False, default=10)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        from lifescore.models.task import Pillar
        return Pillar(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            emoji=self.emoji,
            color=self.color,
            weight=self.weight,
            is_archived=self.is_archived,
        )

    @classmethod
    def from_pydantic(cls, pillar):
        return cls(
            id=pillar.id,
            user_id=pillar.user_id,
            name=pillar.name,
            emoji=pillar.emoji,
            color=pillar.color,
            weight=pillar.weight,
            is_archived=pillar.is_archived,
        )


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pillar_id = Column(String, ForeignKey("pillars.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String, nullable=False)

    # Scoring configuration
    completion_type = Column(String, nullable=False, default=CompletionType.CHECKBOX.value)
    target = Column(Float, nullable=True)
    importance = Column(String, nullable=False, default=Importance.MEDIUM.value)
    base_points = Column(Float, nullable=False, default=10)
    flexibility_rule = Column(String, nullable=True, default=FlexibilityRule.MUST_TODAY.value)
    limit_value = Column(Float, nullable=True)

    # Scheduling
    frequency = Column(String, nullable=False, default=Frequency.DAILY.value)
    custom_days = Column(JSON, nullable=True)
    is_weekend_task = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from lifescore.models.task import Task

        flexibility_rule = None
        if self.flexibility_rule:
            flexibility_rule = value_to_enum(self.flexibility_rule, FlexibilityRule, FlexibilityRule.MUST_TODAY)

        return Task(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            pillar_id=self.pillar_id,
            completion_type=value_to_enum(self.completion_type, CompletionType, CompletionType.CHECKBOX),
            target=self.target,
            importance=value_to_enum(self.importance, Importance, Importance.MEDIUM),
            base_points=self.base_points,
            flexibility_rule=flexibility_rule,
            limit_value=self.limit_value,
            frequency=value_to_enum(self.frequency, Frequency, Frequency.DAILY),
            custom_days=set(self.custom_days) if self.custom_days is not None else None,
            is_weekend_task=self.is_weekend_task,
            is_active=self.is_active,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            user_id=task.user_id,
            name=task.name,
            pillar_id=task.pillar_id,
            completion_type=enum_to_value(task.completion_type),
            target=task.target,
            importance=enum_to_value(task.importance),
            base_points=task.base_points,
            flexibility_rule=enum_to_value(task.flexibility_rule) if task.flexibility_rule else None,
            limit_value=task.limit_value,
            frequency=enum_to_value(task.frequency),
            custom_days=sorted(task.custom_days) if task.custom_days is not None else None,
            is_weekend_task=task.is_weekend_task,
            is_active=task.is_active,
        )


class TaskCompletionDB(Base):
    """Database model for a task completion (one per task per date)."""

    __tablename__ = "task_completions"
    __table_args__ = (
        UniqueConstraint("task_id", "date", name="uq_task_completion_date"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    completed = Column(Boolean, nullable=False, default=False)
    value = Column(Float, nullable=True)
    points_earned = Column(Float, nullable=False, default=0)
    completed_at = Column(DateTime, nullable=True)

    def to_pydantic(self):
        from lifescore.models.task import Completion
        return Completion(
            task_id=self.task_id,
            date=self.date,
            completed=self.completed,
            value=self.value,
            points_earned=self.points_earned,
        )


class DailyScoreDB(Base):
    """Database model for a derived daily score."""

    __tablename__ = "daily_scores"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_score_user_date"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    action_score = Column(Integer, nullable=False, default=0)
    pillar_scores = Column(JSON, nullable=False, default=dict)
    is_passing = Column(Boolean, nullable=False, default=False)
    xp_earned = Column(Integer, nullable=False, default=0)

    def to_pydantic(self):
        from lifescore.models.score import DailyScore
        return DailyScore(
            user_id=self.user_id,
            date=self.date,
            action_score=self.action_score,
            pillar_scores=dict(self.pillar_scores or {}),
            is_passing=self.is_passing,
            xp_earned=self.xp_earned,
        )


class UserStatsDB(Base):
    """Database model for derived user stats (one row per user)."""

    __tablename__ = "user_stats"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    total_xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    level_title = Column(String, nullable=False, default="Beginner")
    current_streak = Column(Integer, nullable=False, default=0)
    best_streak = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        from lifescore.models.score import UserStats
        return UserStats(
            user_id=self.user_id,
            total_xp=self.total_xp,
            level=self.level,
            level_title=self.level_title,
            current_streak=self.current_streak,
            best_streak=self.best_streak,
        )


class UserPreferencesDB(Base):
    """Database model for per-user scoring preferences."""

    __tablename__ = "user_preferences"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    weekday_pass_threshold = Column(Integer, nullable=False, default=70)
    weekend_pass_threshold = Column(Integer, nullable=False, default=70)

    def to_pydantic(self):
        from lifescore.models.score import UserPreferences
        return UserPreferences(
            user_id=self.user_id,
            weekday_pass_threshold=self.weekday_pass_threshold,
            weekend_pass_threshold=self.weekend_pass_threshold,
        )


class OutcomeDB(Base):
    """Database model for Outcome."""

    __tablename__ = "outcomes"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pillar_id = Column(String, ForeignKey("pillars.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    start_value = Column(Float, nullable=False)
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, nullable=False)
    direction = Column(String, nullable=False, default=Direction.INCREASE.value)
    target_date = Column(Date, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)

    def to_pydantic(self):
        from lifescore.models.outcome import Outcome
        return Outcome(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            unit=self.unit,
            start_value=self.start_value,
            target_value=self.target_value,
            current_value=self.current_value,
            direction=value_to_enum(self.direction, Direction, Direction.INCREASE),
            pillar_id=self.pillar_id,
            target_date=self.target_date,
            is_archived=self.is_archived,
        )

    @classmethod
    def from_pydantic(cls, outcome):
        return cls(
            id=outcome.id,
            user_id=outcome.user_id,
            pillar_id=outcome.pillar_id,
            name=outcome.name,
            unit=outcome.unit,
            start_value=outcome.start_value,
            target_value=outcome.target_value,
            current_value=outcome.current_value,
            direction=enum_to_value(outcome.direction),
            target_date=outcome.target_date,
            is_archived=outcome.is_archived,
        )


class OutcomeLogDB(Base):
    """Database model for a logged outcome value."""

    __tablename__ = "outcome_logs"

    id = Column(String, primary_key=True, default=_new_id)
    outcome_id = Column(String, ForeignKey("outcomes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Float, nullable=False)
    note = Column(String, nullable=True)
    logged_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def to_pydantic(self):
        from lifescore.models.outcome import OutcomeLog
        return OutcomeLog(
            id=self.id,
            outcome_id=self.outcome_id,
            value=self.value,
            logged_at=self.logged_at,
            note=self.note,
        )


class GoalDB(Base):
    """Database model for a windowed time/count Goal."""

    __tablename__ = "goals"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    goal_type = Column(String, nullable=False, default=GoalType.ACHIEVEMENT.value)
    metric_type = Column(String, nullable=False, default=MetricType.COUNT.value)
    target_value = Column(Float, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def to_pydantic(self):
        from lifescore.models.outcome import Goal
        return Goal(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            goal_type=value_to_enum(self.goal_type, GoalType, GoalType.ACHIEVEMENT),
            metric_type=value_to_enum(self.metric_type, MetricType, MetricType.COUNT),
            target_value=self.target_value,
            start_date=self.start_date,
            end_date=self.end_date,
            is_active=self.is_active,
        )

    @classmethod
    def from_pydantic(cls, goal):
        return cls(
            id=goal.id,
            user_id=goal.user_id,
            title=goal.title,
            goal_type=enum_to_value(goal.goal_type),
            metric_type=enum_to_value(goal.metric_type),
            target_value=goal.target_value,
            start_date=goal.start_date,
            end_date=goal.end_date,
            is_active=goal.is_active,
        )


class GoalLogDB(Base):
    """Database model for an activity log counted toward a goal."""

    __tablename__ = "goal_logs"

    id = Column(String, primary_key=True, default=_new_id)
    goal_id = Column(String, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    goal_count = Column(Float, nullable=True)

    def to_pydantic(self):
        from lifescore.models.outcome import GoalLog
        return GoalLog(
            id=self.id,
            goal_id=self.goal_id,
            start_time=self.start_time,
            end_time=self.end_time,
            goal_count=self.goal_count,
        )


class CycleDB(Base):
    """Database model for a twelve-week cycle."""

    __tablename__ = "cycles"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def to_pydantic(self):
        from lifescore.models.cycle import Cycle
        return Cycle(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            is_active=self.is_active,
        )


class CycleGoalDB(Base):
    """Database model for a goal pursued during a cycle."""

    __tablename__ = "cycle_goals"

    id = Column(String, primary_key=True, default=_new_id)
    cycle_id = Column(String, ForeignKey("cycles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False, default="")
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, nullable=False, default=0)
    linked_outcome_id = Column(String, ForeignKey("outcomes.id", ondelete="SET NULL"), nullable=True)

    def to_pydantic(self):
        from lifescore.models.cycle import CycleGoal
        return CycleGoal(
            id=self.id,
            cycle_id=self.cycle_id,
            user_id=self.user_id,
            name=self.name,
            unit=self.unit,
            target_value=self.target_value,
            current_value=self.current_value,
            linked_outcome_id=self.linked_outcome_id,
        )


class WeeklyTargetDB(Base):
    """Database model for a per-goal, per-week target."""

    __tablename__ = "weekly_targets"
    __table_args__ = (
        UniqueConstraint("goal_id", "week_number", name="uq_weekly_target_goal_week"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    goal_id = Column(String, ForeignKey("cycle_goals.id", ondelete="CASCADE"), nullable=False, index=True)
    cycle_id = Column(String, ForeignKey("cycles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    target_value = Column(Float, nullable=False, default=0)
    actual_value = Column(Float, nullable=False, default=0)
    is_overridden = Column(Boolean, nullable=False, default=False)
    score = Column(String, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    def to_pydantic(self):
        from lifescore.models.cycle import WeeklyTarget
        return WeeklyTarget(
            goal_id=self.goal_id,
            week_number=self.week_number,
            target_value=self.target_value,
            actual_value=self.actual_value,
            is_overridden=self.is_overridden,
            score=value_to_enum(self.score, WeekScore, None),
            reviewed_at=self.reviewed_at,
        )

    @classmethod
    def from_pydantic(cls, target, cycle_id: str, user_id: str):
        return cls(
            goal_id=target.goal_id,
            cycle_id=cycle_id,
            user_id=user_id,
            week_number=target.week_number,
            target_value=target.target_value,
            actual_value=target.actual_value,
            is_overridden=target.is_overridden,
            score=enum_to_value(target.score) if target.score else None,
            reviewed_at=target.reviewed_at,
        )
