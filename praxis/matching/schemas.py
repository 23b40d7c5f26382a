from typing import List
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from praxis.goals.models import Domain


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CompatibilityResponse(BaseSchema):
    user_id: UUID
    score: float
    domain_overlap: float
    name_similarity: float
    shared_domains: List[Domain]
    shared_goal_names: List[str]


class MatchResponse(BaseSchema):
    user_id: UUID
    name: str
    score: float
    shared_domains: List[Domain]
    shared_goal_names: List[str]
