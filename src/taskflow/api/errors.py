"""Exceptions raised by the task API client."""


class TaskflowApiError(Exception):
    """Base exception for task API errors.

    ``server_message`` holds the ``message`` field of the error body when the
    server sent one; callers surface it in preference to a generic fallback.
    """

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.server_message = server_message

    def user_message(self, fallback: str) -> str:
        """Message to show the user: the server's, else ``fallback``."""
        return self.server_message or fallback


class AuthError(TaskflowApiError):
    """Authentication failed or the session expired (401)."""

    pass


class ForbiddenError(TaskflowApiError):
    """Permission denied (403)."""

    pass


class NotFoundError(TaskflowApiError):
    """Resource not found (404)."""

    pass


class RequestValidationError(TaskflowApiError):
    """The server rejected the request body or parameters (400/422)."""

    pass


class ServerError(TaskflowApiError):
    """The server failed to handle the request (5xx)."""

    pass
