from uuid import UUID
from typing import List, Dict
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from praxis.auth.service import get_current_user_id
from praxis.core.database import get_db
from praxis.core.exceptions import PraxisError
from praxis.goals.schemas import (
    DeletedNodesResponse,
    GoalNodeCreate,
    GoalNodeUpdate,
    GoalNodeResponse,
    GoalTreeResponse,
)
from praxis.goals.service import (
    create_node,
    delete_all_nodes,
    delete_node,
    get_tree,
    get_user_nodes,
    recompute_user_tree,
    require_node,
    update_node,
)

router = APIRouter(prefix="/goals", tags=["Goals"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[GoalNodeResponse],
    summary="Get all user goals",
    description="Retrieve the goal nodes of the authenticated user. Supports pagination.",
    responses={
        200: {"description": "Goals retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve goals."},
    },
)
def read_user_goals_route(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[GoalNodeResponse]:
    try:
        return get_user_nodes(db, user_id, skip, limit)
    except Exception as e:
        logger.error(f"Failed to fetch goals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve goals")


@router.get(
    "/tree",
    response_model=GoalTreeResponse,
    summary="Get the goal tree",
    description="Retrieve every goal node of the authenticated user together with the root goals.",
    responses={
        200: {"description": "Tree retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve the goal tree."},
    },
)
def read_goal_tree_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalTreeResponse:
    try:
        return GoalTreeResponse.model_validate(get_tree(db, user_id))
    except Exception as e:
        logger.error(f"Failed to fetch goal tree for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve goal tree")


@router.post(
    "/tree/recompute",
    response_model=GoalTreeResponse,
    summary="Recompute the whole goal tree",
    description="Recompute the derived progress of every goal with sub-goals, bottom-up.",
    responses={
        200: {"description": "Tree recomputed."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to recompute the goal tree."},
    },
)
def recompute_goal_tree_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalTreeResponse:
    try:
        return GoalTreeResponse.model_validate(recompute_user_tree(db, user_id))
    except Exception as e:
        logger.error(f"Failed to recompute goal tree for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to recompute goal tree")


@router.get(
    "/{goal_id}",
    response_model=GoalNodeResponse,
    summary="Get a specific goal",
    description="Retrieve a specific goal node by its unique ID.",
    responses={
        200: {"description": "Goal retrieved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
    },
)
def read_goal_route(
    goal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalNodeResponse:
    return require_node(db, goal_id, user_id)


@router.post(
    "",
    response_model=GoalNodeResponse,
    status_code=201,
    summary="Create a new goal",
    description="Create a root goal, or a sub-goal when parent_id is given. New goals start at zero progress.",
    responses={
        201: {"description": "Goal created successfully."},
        400: {"description": "Invalid parent or weight."},
        401: {"description": "Unauthorized."},
        404: {"description": "User profile not found."},
        500: {"description": "Goal creation failed."},
    },
)
def create_goal_route(
    goal: GoalNodeCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalNodeResponse:
    try:
        return create_node(db, goal, user_id)
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to create goal for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create goal")


@router.patch(
    "/{goal_id}",
    response_model=GoalNodeResponse,
    summary="Update an existing goal",
    description=(
        "Update fields of a goal. Setting parent_id moves the goal; progress can only be "
        "written on goals without sub-goals."
    ),
    responses={
        200: {"description": "Goal updated successfully."},
        400: {"description": "Invalid parent, weight or progress."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
        409: {"description": "Progress of a goal with sub-goals is derived."},
        500: {"description": "Failed to update goal."},
    },
)
def update_goal_route(
    goal_id: UUID,
    goal: GoalNodeUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalNodeResponse:
    try:
        return update_node(db, goal_id, goal, user_id)
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to update goal {goal_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update goal")


@router.delete(
    "/{goal_id}",
    response_model=DeletedNodesResponse,
    summary="Delete a goal",
    description="Delete a goal together with all of its sub-goals.",
    responses={
        200: {"description": "Goal deleted successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to delete goal."},
    },
)
def delete_goal_route(
    goal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> DeletedNodesResponse:
    try:
        deleted_ids = delete_node(db, goal_id, user_id)
        return DeletedNodesResponse(deleted_ids=deleted_ids, count=len(deleted_ids))
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete goal {goal_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete goal")


@router.delete(
    "",
    response_model=Dict[str, str],
    summary="Delete all user goals",
    description="Permanently delete every goal of the authenticated user.",
    responses={
        200: {"description": "All goals deleted successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "No goals found."},
        500: {"description": "Failed to delete goals."},
    },
)
def delete_all_goals_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Dict[str, str]:
    try:
        deleted = delete_all_nodes(db, user_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete all goals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete goals")
    if not deleted:
        raise HTTPException(status_code=404, detail="No goals found to delete")
    return {"detail": f"Deleted {deleted} goals."}
