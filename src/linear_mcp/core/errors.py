from __future__ import annotations

from typing import Any, Dict, Optional

from .client import (
    LinearClientError,
    LinearGraphQLError,
    LinearHTTPError,
    LinearParseError,
)


class LinearMCPError(Exception):
    """Base error for auth, operation and workflow failures."""


class ConfigError(LinearMCPError, ValueError):
    """Raised when a credential or setting is missing or invalid."""


class NotAuthenticatedError(LinearMCPError):
    """Raised when a token is required but none is held."""


class AuthError(LinearMCPError):
    """Token endpoint failure; carries the upstream status and body verbatim."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        detail = message
        if status_code is not None:
            detail = f"{message} (status {status_code})"
        if body:
            detail = f"{detail}: {body}"
        super().__init__(detail)
        self.status_code = status_code
        self.body = body


class AuthExchangeError(AuthError):
    pass


class AuthRefreshError(AuthError):
    pass


class OperationInputError(LinearMCPError, ValueError):
    """Raised when an operation input does not match its descriptor."""


class RemoteCallError(LinearMCPError):
    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class OperationRejectedError(LinearMCPError):
    """The call went through but the API reported success=false."""

    def __init__(self, operation: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(f"{operation}: operation rejected by Linear")
        self.operation = operation
        self.payload = payload or {}


class CompositeOperationError(LinearMCPError):
    """
    A step of a multi-step workflow failed.
    - failed_step names the step that raised
    - completed maps earlier step names to outputs that already exist remotely
    - parent_id is the id of a parent entity created before the failure
    - the original error is available as ``cause`` (and ``__cause__``)
    """

    def __init__(
        self,
        *,
        workflow: str,
        failed_step: str,
        completed: Dict[str, Any],
        cause: Exception,
        parent_id: Optional[str] = None,
    ):
        done = ", ".join(completed) or "none"
        super().__init__(
            f"{workflow} failed at step {failed_step} "
            f"(completed: {done}): {cause}"
        )
        self.workflow = workflow
        self.failed_step = failed_step
        self.completed = dict(completed)
        self.cause = cause
        self.parent_id = parent_id

    def output(self, step: str) -> Any:
        return self.completed.get(step)


__all__ = [
    "LinearMCPError",
    "ConfigError",
    "NotAuthenticatedError",
    "AuthError",
    "AuthExchangeError",
    "AuthRefreshError",
    "OperationInputError",
    "RemoteCallError",
    "OperationRejectedError",
    "CompositeOperationError",
    "LinearClientError",
    "LinearHTTPError",
    "LinearParseError",
    "LinearGraphQLError",
]
