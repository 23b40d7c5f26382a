import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from praxis.core.database import Base


class CompletionRequest(Base):
    __tablename__ = "completion_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    requester_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    verifier_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    goal_node_id = Column(Uuid, ForeignKey("goal_nodes.id", ondelete="CASCADE"), nullable=False)

    status = Column(String, nullable=False, default="pending")  # pending, approved, rejected
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    responded_at = Column(DateTime, nullable=True)
