import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from praxis.completions.models import CompletionRequest
from praxis.completions.schemas import CompletionRequestCreate
from praxis.core.exceptions import (
    DerivedFieldConflictError,
    NotFoundError,
    NotVerifierError,
    RequestAlreadyResolvedError,
)
from praxis.goals.models import GoalNode
from praxis.goals.service import get_node, require_node, set_leaf_progress
from praxis.users.service import require_user

logger = logging.getLogger(__name__)


def create_request(db: Session, request_in: CompletionRequestCreate, requester_id: UUID) -> CompletionRequest:
    """
    Asks another user to verify that one of the requester's goals is done.

    Only goals without sub-goals can be verified, since approval writes the
    goal's progress directly.
    """
    require_user(db, requester_id)
    require_user(db, request_in.verifier_id)
    node = require_node(db, request_in.goal_node_id, requester_id)
    if node.children:
        raise DerivedFieldConflictError(node.id)

    request = CompletionRequest(
        id=uuid4(),
        requester_id=requester_id,
        verifier_id=request_in.verifier_id,
        goal_node_id=node.id,
        status="pending",
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Completion request %s: %s asks %s to verify goal %s", request.id, requester_id, request_in.verifier_id, node.id)
    return request


def respond_to_request(
    db: Session, request_id: UUID, verifier_id: UUID, approved: bool
) -> Tuple[CompletionRequest, Optional[GoalNode]]:
    """
    Approves or rejects a pending request.

    On approval the requester's goal is marked complete (progress 1.0) and
    its ancestors are recomputed in the same transaction as the status change.
    """
    request = db.query(CompletionRequest).filter(CompletionRequest.id == request_id).first()
    if request is None:
        raise NotFoundError("Completion request", request_id)
    if request.verifier_id != verifier_id:
        raise NotVerifierError()
    if request.status != "pending":
        raise RequestAlreadyResolvedError(request.status)

    node = get_node(db, request.goal_node_id, request.requester_id)
    if approved and node is None:
        raise NotFoundError("Goal", request.goal_node_id)

    try:
        request.status = "approved" if approved else "rejected"
        request.responded_at = datetime.now(timezone.utc)
        if approved:
            set_leaf_progress(db, node, 1.0)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(request)
    if node is not None:
        db.refresh(node)
    logger.info("Completion request %s %s by %s", request_id, request.status, verifier_id)
    return request, node


def get_pending_requests(db: Session, verifier_id: UUID) -> List[CompletionRequest]:
    return (
        db.query(CompletionRequest)
        .filter(CompletionRequest.verifier_id == verifier_id, CompletionRequest.status == "pending")
        .order_by(CompletionRequest.created_at.desc())
        .all()
    )
