from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserUpsert(BaseSchema):
    name: str
    email: Optional[str] = None


class UserOut(BaseSchema):
    id: UUID
    name: str
    email: Optional[str] = None
    created_at: datetime
