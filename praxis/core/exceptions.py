"""
Domain errors for the goal tree service.

Services raise these; routes let them through and the handler registered in
``register_exception_handlers`` renders them with the status code they carry.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PraxisError(Exception):
    status_code = 400

    def __init__(self, message: str, node_id: Optional[UUID] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.node_id = node_id
        self.field = field

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "error": type(self).__name__,
            "node_id": str(self.node_id) if self.node_id else None,
            "field": self.field,
        }


class NotFoundError(PraxisError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[UUID] = None):
        super().__init__(f"{resource} not found", node_id=resource_id)
        self.resource = resource


class InvalidParentError(PraxisError):
    def __init__(self, message: str, node_id: Optional[UUID] = None):
        super().__init__(message, node_id=node_id, field="parent_id")


class DerivedFieldConflictError(PraxisError):
    status_code = 409

    def __init__(self, node_id: Optional[UUID] = None):
        super().__init__(
            "Progress of a goal with sub-goals is derived from its children and cannot be set directly",
            node_id=node_id,
            field="progress",
        )


class InvalidWeightError(PraxisError):
    def __init__(self, weight, node_id: Optional[UUID] = None):
        super().__init__(f"Weight must be a positive number, got {weight!r}", node_id=node_id, field="weight")


class InvalidProgressError(PraxisError):
    def __init__(self, progress, node_id: Optional[UUID] = None):
        super().__init__(f"Progress must be between 0 and 1, got {progress!r}", node_id=node_id, field="progress")


class UnknownGradeError(PraxisError):
    def __init__(self, grade, node_id: Optional[UUID] = None):
        super().__init__(f"Unknown feedback grade {grade!r}", node_id=node_id, field="grade")


class NotVerifierError(PraxisError):
    status_code = 403

    def __init__(self):
        super().__init__("You are not the verifier for this request")


class RequestAlreadyResolvedError(PraxisError):
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"This request has already been {status}")


async def praxis_error_handler(request: Request, exc: PraxisError) -> JSONResponse:
    logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PraxisError, praxis_error_handler)
