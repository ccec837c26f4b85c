from __future__ import annotations

import math
from typing import Any, Dict

from linear_mcp.core.auth import OAuthAuth, OAuthCredential
from linear_mcp.core.errors import ConfigError
from linear_mcp.core.session import LinearSession


async def linear_auth(
    session: LinearSession,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
) -> Dict[str, Any]:
    """
    Start the Linear OAuth flow.

    Replaces any configured authentication and returns the URL the user must
    visit, plus the anti-forgery ``state`` the callback should echo back.
    """
    strategy = await session.configure(
        OAuthCredential(
            client_id=client_id, client_secret=client_secret, redirect_uri=redirect_uri
        )
    )
    if not isinstance(strategy, OAuthAuth):  # pragma: no cover - factory contract
        raise ConfigError("OAuth credential did not produce an OAuth strategy")

    request = strategy.authorization_request()
    return {"authorization_url": request.url, "state": request.state}


async def linear_auth_callback(session: LinearSession, code: str) -> Dict[str, Any]:
    """Exchange the authorization code from the OAuth callback for tokens."""
    auth = session.auth
    if not isinstance(auth, OAuthAuth):
        raise ConfigError("OAuth flow not started. Call linear_auth first.")

    state = await auth.exchange_code(code)
    return {
        "authenticated": auth.is_authenticated(),
        "expires_at": None if math.isinf(state.expires_at) else state.expires_at,
        "can_refresh": bool(state.refresh_token),
    }
