from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from praxis.goals.schemas import GoalNodeResponse


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CompletionRequestCreate(BaseSchema):
    verifier_id: UUID
    goal_node_id: UUID


class CompletionDecision(BaseSchema):
    approved: bool


class CompletionRequestResponse(BaseSchema):
    id: UUID
    requester_id: UUID
    verifier_id: UUID
    goal_node_id: UUID
    status: str
    created_at: datetime
    responded_at: Optional[datetime] = None


class CompletionDecisionResponse(BaseSchema):
    request: CompletionRequestResponse
    node: Optional[GoalNodeResponse] = None
