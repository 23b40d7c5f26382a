"""
Feedback-driven weight recalibration.

A grade scales the weight of the graded goal by a fixed factor: goals that
turned out easier lose relative importance, goals that need more attention
gain it. The table below is the whole policy.
"""
from typing import Dict, Union

from praxis.core.exceptions import UnknownGradeError
from praxis.feedback.models import FeedbackGrade
from praxis.goals.schemas import GoalNodeResponse

WEIGHT_FACTORS: Dict[FeedbackGrade, float] = {
    FeedbackGrade.SUCCEEDED: 0.8,
    FeedbackGrade.DISTRACTED: 1.2,
    FeedbackGrade.LEARNED: 0.9,
    FeedbackGrade.ADAPTED: 1.05,
    FeedbackGrade.NOT_APPLICABLE: 1.0,
}


def parse_grade(value: Union[FeedbackGrade, str]) -> FeedbackGrade:
    """Accepts a grade member, its wire value ("Succeeded") or its name ("SUCCEEDED")."""
    if isinstance(value, FeedbackGrade):
        return value
    try:
        return FeedbackGrade(value)
    except ValueError:
        pass
    if isinstance(value, str) and value in FeedbackGrade.__members__:
        return FeedbackGrade[value]
    raise UnknownGradeError(value)


def adjusted_weight(weight: float, grade: Union[FeedbackGrade, str]) -> float:
    return weight * WEIGHT_FACTORS[parse_grade(grade)]


def apply_feedback(node: GoalNodeResponse, grade: Union[FeedbackGrade, str]) -> GoalNodeResponse:
    """Returns a copy of ``node`` with its weight scaled for ``grade``; nothing else changes."""
    try:
        new_weight = adjusted_weight(node.weight, grade)
    except UnknownGradeError as exc:
        exc.node_id = node.id
        raise
    return node.model_copy(update={"weight": new_weight})
