from uuid import UUID
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security
from sqlalchemy.orm import Session

from praxis.auth.service import get_current_user_id
from praxis.core.config import MATCH_RESULT_LIMIT
from praxis.core.database import get_db
from praxis.core.dependency import get_compatibility_scorer
from praxis.core.exceptions import PraxisError
from praxis.matching.schemas import CompatibilityResponse, MatchResponse
from praxis.matching.scorer import CompatibilityScorer
from praxis.matching.service import compare_users, rank_matches

router = APIRouter(prefix="/matches", tags=["Matching"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[MatchResponse],
    summary="Get ranked matches",
    description="Compatibility of the authenticated user's goal tree with every other user, best first.",
    responses={
        200: {"description": "Matches computed."},
        401: {"description": "Unauthorized."},
        404: {"description": "Profile not found."},
        500: {"description": "Failed to compute matches."},
    },
)
def read_matches_route(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    scorer: CompatibilityScorer = Depends(get_compatibility_scorer),
) -> List[MatchResponse]:
    try:
        return rank_matches(db, user_id, scorer, limit or MATCH_RESULT_LIMIT)
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to compute matches for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute matches")


@router.get(
    "/{other_user_id}",
    response_model=CompatibilityResponse,
    summary="Compatibility with one user",
    description="Score, score components and shared goals between the authenticated user and another user.",
    responses={
        200: {"description": "Compatibility computed."},
        401: {"description": "Unauthorized."},
        404: {"description": "User not found."},
        500: {"description": "Failed to compute compatibility."},
    },
)
def read_compatibility_route(
    other_user_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    scorer: CompatibilityScorer = Depends(get_compatibility_scorer),
) -> CompatibilityResponse:
    try:
        return compare_users(db, user_id, other_user_id, scorer)
    except PraxisError:
        raise
    except Exception as e:
        logger.error(f"Failed to compare user {user_id} with {other_user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute compatibility")
