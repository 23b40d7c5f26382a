from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from praxis.goals.models import Domain


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class GoalNodeBase(BaseSchema):
    id: UUID
    user_id: UUID
    parent_id: Optional[UUID] = None
    name: str
    domain: Domain
    weight: float
    progress: float
    category: Optional[str] = None
    custom_details: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class GoalNodeCreate(BaseSchema):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    domain: Domain
    parent_id: Optional[UUID] = None
    weight: float = 1.0
    category: Optional[str] = None
    custom_details: Optional[str] = None


class GoalNodeUpdate(BaseSchema):
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    domain: Optional[Domain] = None
    parent_id: Optional[UUID] = None
    weight: Optional[float] = None
    progress: Optional[float] = None
    category: Optional[str] = None
    custom_details: Optional[str] = None


class GoalNodeResponse(GoalNodeBase):
    pass


class GoalTreeResponse(BaseSchema):
    user_id: UUID
    nodes: List[GoalNodeResponse]
    root_nodes: List[GoalNodeResponse]


class DeletedNodesResponse(BaseSchema):
    deleted_ids: List[UUID]
    count: int
