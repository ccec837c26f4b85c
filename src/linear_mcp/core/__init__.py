"""Core domain surface for linear-mcp (transport-agnostic)."""

from .auth import (
    AuthorizationRequest,
    AuthStrategy,
    Credential,
    OAuthAuth,
    OAuthCredential,
    StaticCredential,
    StaticTokenAuth,
    TokenState,
    create_auth_strategy,
    parse_credential,
)
from .client import LinearClient
from .config import LinearConfig, credential_from_env, load_env_config
from .errors import (
    AuthError,
    AuthExchangeError,
    AuthRefreshError,
    CompositeOperationError,
    ConfigError,
    LinearClientError,
    LinearGraphQLError,
    LinearHTTPError,
    LinearMCPError,
    LinearParseError,
    NotAuthenticatedError,
    OperationInputError,
    OperationRejectedError,
    RemoteCallError,
)
from .executor import OperationExecutor
from .operations import OPERATIONS, OperationDescriptor, get_operation
from .orchestrator import CompositeOperationOrchestrator, CompositeResult
from .registry import bind_session, exported_tools, register_tools
from .session import LinearSession

__all__ = [
    # Client
    "LinearClient",
    # Auth
    "AuthStrategy",
    "StaticTokenAuth",
    "OAuthAuth",
    "Credential",
    "StaticCredential",
    "OAuthCredential",
    "TokenState",
    "AuthorizationRequest",
    "create_auth_strategy",
    "parse_credential",
    # Operations
    "OperationDescriptor",
    "OPERATIONS",
    "get_operation",
    "OperationExecutor",
    "CompositeOperationOrchestrator",
    "CompositeResult",
    "LinearSession",
    # Exceptions
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
    # Config helpers
    "LinearConfig",
    "credential_from_env",
    "load_env_config",
    # Registry helpers
    "exported_tools",
    "bind_session",
    "register_tools",
]
