from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from praxis.feedback.models import FeedbackGrade
from praxis.goals.schemas import GoalNodeResponse


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class FeedbackCreate(BaseSchema):
    goal_node_id: UUID
    # Validated against FeedbackGrade by the service so bad values map to UnknownGradeError
    grade: str
    comment: Optional[str] = None


class FeedbackResponse(BaseSchema):
    id: UUID
    giver_id: UUID
    receiver_id: UUID
    goal_node_id: UUID
    grade: FeedbackGrade
    comment: Optional[str] = None
    weight_before: float
    weight_after: float
    created_at: datetime


class FeedbackResult(BaseSchema):
    feedback: FeedbackResponse
    node: GoalNodeResponse
