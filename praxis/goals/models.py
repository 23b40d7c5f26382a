import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship
from praxis.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Domain(str, enum.Enum):
    """The nine life domains every goal is tagged with."""

    CAREER = "Career"
    INVESTING = "Investing"
    FITNESS = "Fitness"
    ACADEMICS = "Academics"
    MENTAL_HEALTH = "Mental Health"
    PHILOSOPHICAL_DEVELOPMENT = "Philosophical Development"
    CULTURE_HOBBIES_CREATIVE_PURSUITS = "Culture, Hobbies & Creative Pursuits"
    INTIMACY_ROMANTIC_EXPLORATION = "Intimacy & Romantic Exploration"
    FRIENDSHIP_SOCIAL_ENGAGEMENT = "Friendship & Social Engagement"


class GoalNode(Base):
    __tablename__ = "goal_nodes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    parent_id = Column(Uuid, ForeignKey("goal_nodes.id", ondelete="CASCADE"), index=True, nullable=True)

    name = Column(String, nullable=False)
    domain = Column(Enum(Domain, name="goal_domain"), nullable=False)
    weight = Column(Float, nullable=False, default=1.0)
    # Stored for leaves, derived from children otherwise
    progress = Column(Float, nullable=False, default=0.0)
    category = Column(String, nullable=True)
    custom_details = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="goals")
    parent = relationship("GoalNode", remote_side=[id], back_populates="children")
    children = relationship("GoalNode", back_populates="parent", cascade="all, delete")

    def __repr__(self):
        return f"<GoalNode name={self.name!r} weight={self.weight} progress={self.progress} user_id={self.user_id}>"
