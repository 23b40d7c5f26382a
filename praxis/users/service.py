import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from praxis.core.exceptions import NotFoundError
from praxis.users.models import User
from praxis.users.schemas import UserUpsert

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def require_user(db: Session, user_id: UUID) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def upsert_profile(db: Session, user_id: UUID, profile: UserUpsert) -> User:
    """
    Creates the profile row for an authenticated user, or updates it.

    The id is the auth provider's subject, so the first call after sign-up
    creates the row the goal forest hangs off.
    """
    user = get_user(db, user_id)
    created = user is None
    if created:
        user = User(id=user_id, name=profile.name, email=profile.email)
        db.add(user)
    else:
        for field, value in profile.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("Profile upserted for user %s (new=%s)", user_id, created)
    return user


def delete_user(db: Session, user_id: UUID) -> None:
    """Deletes the profile and, through the cascade, the user's whole goal forest."""
    user = require_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s and their goal forest", user_id)
