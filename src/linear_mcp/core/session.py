"""Explicitly constructed auth/executor bundle handed to tool functions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .auth import AuthStrategy, Credential, OAuthAuth, create_auth_strategy
from .client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS, LinearClient
from .config import LinearConfig
from .errors import NotAuthenticatedError
from .executor import OperationExecutor
from .orchestrator import CompositeOperationOrchestrator

log = logging.getLogger("linear_mcp.core.session")


class LinearSession:
    """
    Owns the current AuthStrategy and exposes the executor and orchestrator
    bound to it. Tools call ensure_authenticated() before touching the
    executor; nothing here is process-global.
    """

    def __init__(
        self,
        auth: Optional[AuthStrategy] = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._auth = auth
        self._strategy_kwargs: Dict[str, Any] = {
            "api_url": api_url,
            "timeout_seconds": timeout_seconds,
            "http": http,
        }
        self.executor = OperationExecutor(self._client)
        self.orchestrator = CompositeOperationOrchestrator(self.executor)

    @classmethod
    def from_config(cls, config: LinearConfig, **kwargs: Any) -> "LinearSession":
        session = cls(
            api_url=config.api_url, timeout_seconds=config.timeout_seconds, **kwargs
        )
        if config.credential is not None:
            session._auth = create_auth_strategy(
                config.credential, **session._strategy_kwargs
            )
            log.info("Configured %s authentication from environment", session._auth.kind)
        return session

    @property
    def auth(self) -> AuthStrategy:
        if self._auth is None:
            raise NotAuthenticatedError("Not authenticated. Call linear_auth first.")
        return self._auth

    @property
    def has_auth(self) -> bool:
        return self._auth is not None

    async def configure(self, credential: Credential) -> AuthStrategy:
        """Replace the auth strategy; the previous one (and its tokens) is dropped."""
        strategy = create_auth_strategy(credential, **self._strategy_kwargs)
        previous, self._auth = self._auth, strategy
        if previous is not None:
            await previous.aclose()
        log.info("Configured %s authentication", strategy.kind)
        return strategy

    async def ensure_authenticated(self) -> AuthStrategy:
        """Check authentication and refresh the token when it is about to expire."""
        auth = self.auth
        if not auth.is_authenticated():
            raise NotAuthenticatedError("Not authenticated. Call linear_auth first.")
        if isinstance(auth, OAuthAuth) and auth.needs_refresh():
            await auth.refresh()
        return auth

    def _client(self) -> LinearClient:
        return self.auth.client()

    async def aclose(self) -> None:
        if self._auth is not None:
            await self._auth.aclose()

    async def __aenter__(self) -> "LinearSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["LinearSession"]
