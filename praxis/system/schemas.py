from praxis.users.schemas import UserOut
from pydantic import BaseModel


class DevLoginResponse(BaseModel):
    token: str
    user: UserOut


class HealthResponse(BaseModel):
    status: str
    environment: str
    database: str
