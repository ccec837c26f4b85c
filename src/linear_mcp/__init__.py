"""linear_mcp package exports."""

from .core import (
    CompositeOperationError,
    CompositeOperationOrchestrator,
    LinearClient,
    LinearSession,
    OAuthAuth,
    OperationExecutor,
    StaticTokenAuth,
    create_auth_strategy,
    register_tools,
)

__all__ = [
    "LinearClient",
    "LinearSession",
    "StaticTokenAuth",
    "OAuthAuth",
    "create_auth_strategy",
    "OperationExecutor",
    "CompositeOperationOrchestrator",
    "CompositeOperationError",
    "register_tools",
]
