import logging
from typing import List, Tuple
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from praxis.core.exceptions import NotFoundError
from praxis.feedback.models import Feedback
from praxis.feedback.schemas import FeedbackCreate
from praxis.feedback.weights import apply_feedback, parse_grade
from praxis.goals.models import GoalNode
from praxis.goals.schemas import GoalNodeResponse
from praxis.goals.service import get_node_any_owner, refresh_ancestors
from praxis.users.service import require_user

logger = logging.getLogger(__name__)


def submit_feedback(db: Session, feedback_in: FeedbackCreate, giver_id: UUID) -> Tuple[Feedback, GoalNode]:
    """
    Records a feedback grade on a goal and recalibrates the goal's weight.

    The goal may belong to anyone; its owner is the receiver. The parent's
    derived progress is recomputed because sibling ratios changed.

    Raises:
        NotFoundError: If the giver has no profile or the goal does not exist.
        UnknownGradeError: If the grade is not one of the known grades.
    """
    require_user(db, giver_id)
    node = get_node_any_owner(db, feedback_in.goal_node_id)
    if node is None:
        raise NotFoundError("Goal", feedback_in.goal_node_id)

    grade = parse_grade(feedback_in.grade)
    recalibrated = apply_feedback(GoalNodeResponse.model_validate(node), grade)
    weight_before = node.weight

    try:
        node.weight = recalibrated.weight
        feedback = Feedback(
            id=uuid4(),
            giver_id=giver_id,
            receiver_id=node.user_id,
            goal_node_id=node.id,
            grade=grade,
            comment=feedback_in.comment,
            weight_before=weight_before,
            weight_after=recalibrated.weight,
        )
        db.add(feedback)
        refresh_ancestors(db, node)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(feedback)
    db.refresh(node)
    logger.info(
        "Feedback %s on goal %s by %s: weight %.4f -> %.4f",
        grade.value, node.id, giver_id, weight_before, node.weight,
    )
    return feedback, node


def get_received_feedback(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.receiver_id == user_id)
        .order_by(Feedback.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_goal_feedback(db: Session, node_id: UUID, user_id: UUID) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.goal_node_id == node_id, Feedback.receiver_id == user_id)
        .order_by(Feedback.created_at)
        .all()
    )
