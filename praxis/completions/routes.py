from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from praxis.auth.service import get_current_user_id
from praxis.completions.schemas import (
    CompletionDecision,
    CompletionDecisionResponse,
    CompletionRequestCreate,
    CompletionRequestResponse,
)
from praxis.completions.service import create_request, get_pending_requests, respond_to_request
from praxis.core.database import get_db
from praxis.core.exceptions import PraxisError
from praxis.goals.schemas import GoalNodeResponse

router = APIRouter(prefix="/completions", tags=["Completions"])
logger = logging.getLogger(__name__)


@router.get(
    "/pending",
    response_model=List[CompletionRequestResponse],
    summary="Pending verification requests",
    description="Requests waiting for the authenticated user to verify, newest first.",
    responses={
        200: {"description": "Pending requests retrieved."},
        401: {"description": "Unauthorized."},
    },
)
def read_pending_requests_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[CompletionRequestResponse]:
    return get_pending_requests(db, user_id)


@router.post(
    "",
    response_model=CompletionRequestResponse,
    status_code=201,
    summary="Request verification of a completed goal",
    responses={
        201: {"description": "Request created."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal or verifier not found."},
        409: {"description": "Goal has sub-goals."},
        500: {"description": "Failed to create request."},
    },
)
def create_request_route(
    request: CompletionRequestCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> CompletionRequestResponse:
    try:
        return create_request(db, request, user_id)
    except PraxisError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create completion request for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create completion request")


@router.patch(
    "/{request_id}/respond",
    response_model=CompletionDecisionResponse,
    summary="Approve or reject a verification request",
    description="Approval marks the requester's goal complete and rolls the progress up its tree.",
    responses={
        200: {"description": "Request resolved."},
        401: {"description": "Unauthorized."},
        403: {"description": "Not the verifier of this request."},
        404: {"description": "Request not found."},
        409: {"description": "Request already resolved."},
        500: {"description": "Failed to resolve request."},
    },
)
def respond_to_request_route(
    request_id: UUID,
    decision: CompletionDecision,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> CompletionDecisionResponse:
    try:
        request, node = respond_to_request(db, request_id, user_id, decision.approved)
        return CompletionDecisionResponse(
            request=CompletionRequestResponse.model_validate(request),
            node=GoalNodeResponse.model_validate(node) if node is not None else None,
        )
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to resolve completion request {request_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to resolve completion request")
