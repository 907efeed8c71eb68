"""Task server API client."""

from .client import TaskflowClient, extract_parsed_tasks
from .errors import (
    AuthError,
    ForbiddenError,
    NotFoundError,
    RequestValidationError,
    ServerError,
    TaskflowApiError,
)
from .protocol import TaskApiProtocol, TaskPage
from .session import Session

__all__ = [
    "AuthError",
    "ForbiddenError",
    "NotFoundError",
    "RequestValidationError",
    "ServerError",
    "Session",
    "TaskApiProtocol",
    "TaskPage",
    "TaskflowApiError",
    "TaskflowClient",
    "extract_parsed_tasks",
]
