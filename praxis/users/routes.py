from uuid import UUID
from typing import Dict
import logging

from fastapi import APIRouter, Depends, HTTPException, Security
from sqlalchemy.orm import Session

from praxis.auth.service import get_current_user_id
from praxis.core.database import get_db
from praxis.core.exceptions import PraxisError
from praxis.users.schemas import UserOut, UserUpsert
from praxis.users.service import require_user, upsert_profile, delete_user

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current user profile",
    responses={
        200: {"description": "User profile returned."},
        401: {"description": "Unauthorized."},
        404: {"description": "Profile not created yet."},
    },
)
def read_profile_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> UserOut:
    return require_user(db, user_id)


@router.put(
    "/me",
    response_model=UserOut,
    summary="Create or update the current user profile",
    description="Registers the authenticated subject as a Praxis user, or updates the profile.",
    responses={
        200: {"description": "Profile saved."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to save profile."},
    },
)
def upsert_profile_route(
    profile: UserUpsert,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> UserOut:
    try:
        return upsert_profile(db, user_id, profile)
    except PraxisError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to save profile for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save profile")


@router.delete(
    "/me",
    response_model=Dict[str, str],
    summary="Delete the current user account",
    description="Deletes the profile together with the user's goal forest.",
    responses={
        200: {"description": "Account deleted."},
        401: {"description": "Unauthorized."},
        404: {"description": "Profile not found."},
        500: {"description": "Failed to delete account."},
    },
)
def delete_profile_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Dict[str, str]:
    try:
        delete_user(db, user_id)
        return {"detail": "Account deleted successfully."}
    except PraxisError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete account {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete account")
