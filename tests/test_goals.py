"""
Tests for the goal progress calculator.
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from finplan.calculations import GoalProgressCalculator, build_goal_progress
from finplan.calculations.goals import find_upcoming_milestone
from finplan.models.finance import FinancialGoal, GoalMetricUnit, GoalType

NOW = datetime(2025, 4, 1, tzinfo=timezone.utc)


@pytest.fixture
def certification_goal() -> FinancialGoal:
    return FinancialGoal(
        id="aws",
        name="AWS Solutions Architect",
        goal_type=GoalType.EDUCATION,
        target_amount=Decimal("120"),
        current_amount=Decimal("36"),
        deadline=date(2025, 5, 1),
        metric_unit=GoalMetricUnit.HOURS,
        metadata={
            "examDate": "2025-05-01",
            "studyPlan": {
                "totalHours": 120,
                "completedHours": 36,
                "weeklyTargetHours": 10,
                "upcomingFocusAreas": ["Networking", "Security", 42],
            },
            "milestones": [
                {"title": "Set up study environment", "dueDate": "2025-03-01"},
                {"title": "Finish networking module", "dueDate": "2025-04-15"},
                {"title": "Practice exam", "dueDate": "2025-04-10"},
            ],
        },
    )


class TestCurrencyGoals:

    def test_progress_figures(self):
        goal = FinancialGoal(
            id="g1",
            name="New laptop",
            goal_type=GoalType.SAVINGS,
            target_amount=Decimal("1000"),
            current_amount=Decimal("250"),
        )
        progress = build_goal_progress(goal, NOW)

        assert progress.completion_percentage == 25
        assert progress.computed.remaining_amount == 750
        assert progress.computed.time_remaining_days is None
        assert progress.computed.education is None
        assert progress.metric_unit == GoalMetricUnit.CURRENCY

    def test_zero_target_is_zero_percent(self):
        goal = FinancialGoal(id="g1", goal_type=GoalType.OTHER, target_amount=Decimal("0"))
        progress = build_goal_progress(goal, NOW)
        assert progress.completion_percentage == 0
        assert progress.computed.remaining_amount == 0

    def test_overfunded_goal(self):
        goal = FinancialGoal(
            id="g1",
            goal_type=GoalType.OTHER,
            target_amount=Decimal("100"),
            current_amount=Decimal("150"),
        )
        progress = build_goal_progress(goal, NOW)
        assert progress.completion_percentage == 150
        assert progress.computed.remaining_amount == 0

    def test_deadline_countdown_rounds_up(self):
        goal = FinancialGoal(
            id="g1",
            goal_type=GoalType.VACATION,
            target_amount=Decimal("100"),
            deadline=date(2025, 4, 11),
        )
        afternoon = datetime(2025, 4, 1, 15, 0, tzinfo=timezone.utc)
        assert build_goal_progress(goal, afternoon).computed.time_remaining_days == 10

    def test_past_deadline_is_negative(self):
        goal = FinancialGoal(
            id="g1",
            goal_type=GoalType.VACATION,
            target_amount=Decimal("100"),
            deadline=date(2025, 3, 30),
        )
        assert build_goal_progress(goal, NOW).computed.time_remaining_days == -2


class TestEducationGoals:

    def test_study_plan_view(self, certification_goal):
        progress = build_goal_progress(certification_goal, NOW)
        education = progress.computed.education

        assert education.hours_remaining == 84
        assert education.weekly_hours_needed == 16.8
        assert education.weekly_target_hours == 10
        assert education.focus_areas == ["Networking", "Security"]
        assert progress.computed.time_remaining_days == 30

    def test_first_upcoming_milestone_in_list_order(self, certification_goal):
        education = build_goal_progress(certification_goal, NOW).computed.education
        assert education.next_milestone == "Finish networking module"
        assert education.upcoming_deadline == "2025-04-15"

    def test_next_action_wins(self, certification_goal):
        metadata = dict(certification_goal.metadata)
        metadata["nextAction"] = "Book the exam"
        metadata["nextActionDueDate"] = "2025-04-05"
        goal = certification_goal.model_copy(update={"metadata": metadata})

        education = build_goal_progress(goal, NOW).computed.education
        assert education.next_milestone == "Book the exam"
        assert education.upcoming_deadline == "2025-04-05"

    def test_exam_date_is_fallback_deadline(self, certification_goal):
        metadata = dict(certification_goal.metadata)
        del metadata["milestones"]
        goal = certification_goal.model_copy(update={"metadata": metadata})

        education = build_goal_progress(goal, NOW).computed.education
        assert education.next_milestone is None
        assert education.upcoming_deadline == "2025-05-01T00:00:00+00:00"

    def test_past_exam_date_gives_no_weekly_need(self, certification_goal):
        metadata = dict(certification_goal.metadata)
        metadata["examDate"] = "2025-03-01"
        goal = certification_goal.model_copy(update={"metadata": metadata})

        education = build_goal_progress(goal, NOW).computed.education
        assert education.weekly_hours_needed is None

    def test_hours_goal_without_study_plan_uses_amounts(self):
        goal = FinancialGoal(
            id="g1",
            goal_type=GoalType.OTHER,
            target_amount=Decimal("40"),
            current_amount=Decimal("10"),
            metric_unit=GoalMetricUnit.HOURS,
        )
        education = build_goal_progress(goal, NOW).computed.education
        assert education is not None
        assert education.hours_remaining == 30
        assert education.weekly_hours_needed is None
        assert education.upcoming_deadline is None
        assert education.focus_areas == []

    def test_malformed_metadata_is_tolerated(self):
        goal = FinancialGoal(
            id="g1",
            goal_type=GoalType.EDUCATION,
            target_amount=Decimal("10"),
            metadata={"studyPlan": "soon", "examDate": "not a date", "milestones": {"a": 1}},
        )
        education = build_goal_progress(goal, NOW).computed.education
        assert education.hours_remaining == 10
        assert education.weekly_hours_needed is None
        assert education.next_milestone is None


class TestMilestones:

    def test_due_today_counts_as_upcoming(self):
        metadata = {"milestones": [{"title": "Today", "dueDate": "2025-04-01"}]}
        afternoon = datetime(2025, 4, 1, 18, 0, tzinfo=timezone.utc)
        assert find_upcoming_milestone(metadata, afternoon) == ("Today", "2025-04-01")

    def test_untitled_milestone_yields_nothing(self):
        metadata = {"milestones": [{"dueDate": "2025-04-20"}, {"title": "Later", "dueDate": "2025-05-01"}]}
        assert find_upcoming_milestone(metadata, NOW) == (None, None)

    def test_blank_next_action_ignored(self):
        metadata = {
            "nextAction": "   ",
            "milestones": [{"title": "Review", "dueDate": "2025-04-02T09:00:00Z"}],
        }
        assert find_upcoming_milestone(metadata, NOW) == ("Review", "2025-04-02T09:00:00Z")

    def test_no_metadata(self):
        assert find_upcoming_milestone(None, NOW) == (None, None)


class TestGoalProgressCalculator:

    def test_batch_preserves_order(self, certification_goal):
        other = FinancialGoal(id="g2", goal_type=GoalType.INVESTMENT, target_amount=Decimal("5"))
        results = GoalProgressCalculator().calculate([certification_goal, other], NOW)
        assert [p.id for p in results] == ["aws", "g2"]
