"""
Goal Progress Calculator

Converts a stored goal into a progress view. Education goals, and any goal
measured in hours, additionally get a study-plan view read opportunistically
from the goal's metadata:

    metadata = {
        "examDate": "2025-05-01",
        "studyPlan": {
            "totalHours": 120,
            "completedHours": 36,
            "weeklyTargetHours": 10,
            "upcomingFocusAreas": ["Security", "Architecting"],
        },
        "nextAction": "Book the exam",          # optional
        "nextActionDueDate": "2025-04-10",      # optional
        "milestones": [{"title": "...", "dueDate": "2025-04-15"}, ...],
    }

Every key is optional. Missing or malformed entries fall back to the goal's
own target/current amounts or to None.
"""

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from finplan.calculations.numeric import (
    as_utc,
    days_until,
    parse_moment,
    percentage,
    round_currency,
    start_of_day,
    to_number,
)
from finplan.models.finance import FinancialGoal, GoalMetricUnit, GoalType
from finplan.models.results import EducationProgress, GoalComputed, GoalProgress


def _mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _non_blank(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _due_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def find_upcoming_milestone(
    metadata: Optional[Mapping[str, Any]],
    now: datetime,
) -> tuple[Optional[str], Optional[str]]:
    """
    Pick the next milestone as (title, due_date).

    An explicit nextAction wins. Otherwise the first milestone, in list
    order, whose dueDate is today or later is taken; list order is trusted
    and never re-sorted.
    """
    if not metadata:
        return None, None

    next_action = _non_blank(metadata.get("nextAction"))
    if next_action:
        return next_action, _due_text(metadata.get("nextActionDueDate"))

    milestones = metadata.get("milestones")
    if not isinstance(milestones, list):
        return None, None

    today = as_utc(now).date()
    for milestone in milestones:
        milestone = _mapping(milestone)
        if milestone is None:
            continue
        due = parse_moment(milestone.get("dueDate"))
        if due is None or due.date() < today:
            continue
        title = _non_blank(milestone.get("title"))
        if title is None:
            return None, None
        return title, _due_text(milestone.get("dueDate"))

    return None, None


def is_time_based_goal(goal: FinancialGoal) -> bool:
    return goal.goal_type == GoalType.EDUCATION or goal.metric_unit == GoalMetricUnit.HOURS


def build_education_progress(
    goal: FinancialGoal,
    now: datetime,
) -> Optional[EducationProgress]:
    """Study-plan view for time/skill-based goals; None for other goals."""
    if not is_time_based_goal(goal):
        return None

    metadata = _mapping(goal.metadata) or {}
    study_plan = _mapping(metadata.get("studyPlan")) or {}

    total_hours = to_number(study_plan.get("totalHours", goal.target_amount))
    completed_hours = to_number(study_plan.get("completedHours", goal.current_amount))
    hours_remaining = max(total_hours - completed_hours, 0.0)

    exam_at = parse_moment(metadata.get("examDate"))
    weekly_hours_needed = None
    if exam_at is not None:
        days_to_exam = days_until(exam_at, now)
        if days_to_exam > 0:
            weeks = max(math.ceil(days_to_exam / 7), 1)
            weekly_hours_needed = round(hours_remaining / weeks, 1)

    weekly_target = study_plan.get("weeklyTargetHours")
    weekly_target_hours = (
        round(to_number(weekly_target), 1) if weekly_target is not None else None
    )

    title, due_date = find_upcoming_milestone(metadata, now)
    if due_date is not None:
        upcoming_deadline = due_date
    elif exam_at is not None:
        upcoming_deadline = exam_at.isoformat()
    else:
        upcoming_deadline = None

    focus_source = study_plan.get("upcomingFocusAreas")
    focus_areas = (
        [item for item in focus_source if isinstance(item, str)]
        if isinstance(focus_source, list)
        else []
    )

    return EducationProgress(
        hours_remaining=round(hours_remaining, 1),
        weekly_hours_needed=weekly_hours_needed,
        weekly_target_hours=weekly_target_hours,
        next_milestone=title,
        focus_areas=focus_areas,
        upcoming_deadline=upcoming_deadline,
    )


def build_goal_progress(
    goal: FinancialGoal,
    as_of: Optional[datetime] = None,
) -> GoalProgress:
    """
    Build the progress view of a goal.

    Args:
        goal: Stored goal record
        as_of: Reference instant for deadline countdowns (defaults to now, UTC)
    """
    now = as_of or datetime.now(timezone.utc)
    target = to_number(goal.target_amount)
    current = to_number(goal.current_amount)

    time_remaining_days = None
    if goal.deadline is not None:
        time_remaining_days = days_until(start_of_day(goal.deadline), now)

    return GoalProgress(
        id=goal.id,
        name=goal.name,
        goal_type=goal.goal_type,
        target_amount=round_currency(target),
        current_amount=round_currency(current),
        completion_percentage=round_currency(percentage(current, target)),
        status=goal.status,
        deadline=goal.deadline,
        metric_unit=goal.metric_unit,
        metadata=goal.metadata,
        computed=GoalComputed(
            remaining_amount=round_currency(max(target - current, 0.0)),
            time_remaining_days=time_remaining_days,
            education=build_education_progress(goal, now),
        ),
    )


class GoalProgressCalculator:
    """Batch helper over build_goal_progress."""

    def calculate(
        self,
        goals: list[FinancialGoal],
        as_of: Optional[datetime] = None,
    ) -> list[GoalProgress]:
        now = as_of or datetime.now(timezone.utc)
        return [build_goal_progress(goal, now) for goal in goals]
