import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Float, Uuid
from praxis.core.database import Base


class FeedbackGrade(str, enum.Enum):
    SUCCEEDED = "Succeeded"
    DISTRACTED = "Distracted"
    LEARNED = "Learned"
    ADAPTED = "Adapted"
    NOT_APPLICABLE = "Not Applicable"


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    giver_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    receiver_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    goal_node_id = Column(Uuid, ForeignKey("goal_nodes.id", ondelete="CASCADE"), index=True, nullable=False)

    grade = Column(Enum(FeedbackGrade, name="feedback_grade"), nullable=False)
    comment = Column(String, nullable=True)
    weight_before = Column(Float, nullable=False)
    weight_after = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
