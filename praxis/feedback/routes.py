from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from praxis.auth.service import get_current_user_id
from praxis.core.database import get_db
from praxis.core.exceptions import PraxisError
from praxis.feedback.schemas import FeedbackCreate, FeedbackResponse, FeedbackResult
from praxis.feedback.service import get_goal_feedback, get_received_feedback, submit_feedback
from praxis.goals.schemas import GoalNodeResponse
from praxis.goals.service import require_node

router = APIRouter(prefix="/feedback", tags=["Feedback"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=FeedbackResult,
    status_code=201,
    summary="Give feedback on a goal",
    description=(
        "Grade progress on a goal (Succeeded, Distracted, Learned, Adapted, Not Applicable). "
        "The grade rescales the goal's weight among its siblings."
    ),
    responses={
        201: {"description": "Feedback recorded and weight recalibrated."},
        400: {"description": "Unknown grade."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal or profile not found."},
        500: {"description": "Failed to record feedback."},
    },
)
def submit_feedback_route(
    feedback: FeedbackCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> FeedbackResult:
    try:
        record, node = submit_feedback(db, feedback, user_id)
        return FeedbackResult(
            feedback=FeedbackResponse.model_validate(record),
            node=GoalNodeResponse.model_validate(node),
        )
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to record feedback from {user_id} on goal {feedback.goal_node_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record feedback")


@router.get(
    "/received",
    response_model=List[FeedbackResponse],
    summary="Feedback received",
    description="List feedback other users (or the user) gave on the authenticated user's goals.",
    responses={
        200: {"description": "Feedback retrieved successfully."},
        401: {"description": "Unauthorized."},
    },
)
def read_received_feedback_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[FeedbackResponse]:
    return get_received_feedback(db, user_id, skip, limit)


@router.get(
    "/goals/{goal_id}",
    response_model=List[FeedbackResponse],
    summary="Feedback history of a goal",
    description="Weight recalibration history of one of the authenticated user's goals, oldest first.",
    responses={
        200: {"description": "Feedback retrieved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
    },
)
def read_goal_feedback_route(
    goal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[FeedbackResponse]:
    require_node(db, goal_id, user_id)
    return get_goal_feedback(db, goal_id, user_id)
