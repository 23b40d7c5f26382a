from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship
from praxis.core.database import Base


class User(Base):
    __tablename__ = "users"

    # Subject id issued by the auth provider
    id = Column(Uuid, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    goals = relationship("GoalNode", back_populates="user", cascade="all, delete-orphan")
