import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from praxis.auth.service import create_token
from praxis.core.config import DEV_USER_EMAIL, ENVIRONMENT
from praxis.core.database import get_db
from praxis.system.schemas import DevLoginResponse, HealthResponse
from praxis.users.models import User
from praxis.users.schemas import UserOut

router = APIRouter(prefix="/system", tags=["System"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
def health_route(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"Health check database probe failed: {e}")
        database = "unavailable"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        environment=ENVIRONMENT,
        database=database,
    )


@router.post("/dev-login", response_model=DevLoginResponse)
def dev_login_route(db: Session = Depends(get_db)):
    if ENVIRONMENT == "production":
        raise HTTPException(status_code=404, detail="Not found")

    user = db.query(User).filter(User.email == DEV_USER_EMAIL).first()
    if not user:
        raise HTTPException(status_code=404, detail="Test user not found")

    token = create_token(user.id)
    logger.info("Issued dev token for %s", user.id)
    return DevLoginResponse(token=token, user=UserOut.model_validate(user))
