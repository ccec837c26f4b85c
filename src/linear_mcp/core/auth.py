"""Authentication strategies (static API key, OAuth2 authorization code) and token state."""

from __future__ import annotations

import asyncio
import logging
import math
import secrets
import time
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Literal,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Type,
    Union,
    runtime_checkable,
)
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS, LinearClient
from .errors import (
    AuthError,
    AuthExchangeError,
    AuthRefreshError,
    ConfigError,
    NotAuthenticatedError,
)
from .observability import timed_event

log = logging.getLogger("linear_mcp.core.auth")

AUTHORIZE_URL = "https://linear.app/oauth/authorize"
TOKEN_URL = "https://api.linear.app/oauth/token"
OAUTH_SCOPE = "read,write,issues:create"
REFRESH_MARGIN_SECONDS = 300.0


# --- Credentials ----------------------------------------------------------- #


class StaticCredential(BaseModel):
    """Personal API key, sent as a bearer token and never expiring."""

    type: Literal["pat", "static"] = "pat"
    token: str = Field(default="", alias="accessToken", repr=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class OAuthCredential(BaseModel):
    type: Literal["oauth"] = "oauth"
    client_id: str = Field(default="", alias="clientId")
    client_secret: str = Field(default="", alias="clientSecret", repr=False)
    redirect_uri: str = Field(default="", alias="redirectUri")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


Credential = Union[StaticCredential, OAuthCredential]

_credential_adapter: TypeAdapter[Credential] = TypeAdapter(
    Annotated[Credential, Field(discriminator="type")]
)


def parse_credential(data: Mapping[str, Any]) -> Credential:
    """Build a credential from a tagged mapping ({"type": "oauth", "clientId": ...})."""
    try:
        return _credential_adapter.validate_python(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid credential: {exc}") from exc


# --- Token state ----------------------------------------------------------- #


@dataclass(frozen=True)
class TokenState:
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: float = math.inf  # epoch seconds

    @property
    def never_expires(self) -> bool:
        return math.isinf(self.expires_at)


class TokenStore:
    """Holds the current TokenState; replaced wholesale, never patched."""

    def __init__(self) -> None:
        self._state: Optional[TokenState] = None

    @property
    def state(self) -> Optional[TokenState]:
        return self._state

    def replace(self, state: TokenState) -> None:
        self._state = state

    def clear(self) -> None:
        self._state = None


class TokenResponse(BaseModel):
    access_token: str = Field(min_length=1)
    refresh_token: Optional[str] = None
    expires_in: Optional[float] = None
    token_type: Optional[str] = None
    scope: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class AuthorizationRequest:
    url: str
    state: str


# --- Strategy contract ----------------------------------------------------- #


@runtime_checkable
class AuthStrategy(Protocol):
    kind: str

    def initialize(self, credential: Credential) -> None: ...

    def is_authenticated(self) -> bool: ...

    def needs_refresh(self) -> bool: ...

    def client(self) -> LinearClient: ...

    @property
    def token_state(self) -> Optional[TokenState]: ...

    async def aclose(self) -> None: ...


class _ClientBinder:
    """Hands out one LinearClient per TokenState over a shared httpx client."""

    def __init__(
        self,
        *,
        api_url: str,
        timeout_seconds: float,
        http: Optional[httpx.AsyncClient],
    ):
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._owns_http = http is None
        self._http = http
        self._bound: Optional[Tuple[TokenState, LinearClient]] = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._http

    def bind(self, state: TokenState) -> LinearClient:
        if self._bound is None or self._bound[0] is not state:
            client = LinearClient(
                access_token=state.access_token, api_url=self.api_url, http=self.http
            )
            self._bound = (state, client)
        return self._bound[1]

    async def aclose(self) -> None:
        self._bound = None
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None


# --- Static token ---------------------------------------------------------- #


class StaticTokenAuth:
    kind = "static"

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._binder = _ClientBinder(
            api_url=api_url, timeout_seconds=timeout_seconds, http=http
        )
        self._store = TokenStore()

    def initialize(self, credential: Credential) -> None:
        if not isinstance(credential, StaticCredential):
            raise ConfigError("Static token auth requires a personal API key credential.")
        token = (credential.token or "").strip()
        if not token:
            raise ConfigError("Missing required parameter: token")
        self._store.replace(TokenState(access_token=token))

    def is_authenticated(self) -> bool:
        state = self._store.state
        return state is not None and bool(state.access_token)

    def needs_refresh(self) -> bool:
        return False

    @property
    def token_state(self) -> Optional[TokenState]:
        return self._store.state

    def client(self) -> LinearClient:
        state = self._store.state
        if state is None:
            raise NotAuthenticatedError("Not authenticated. Provide a Linear API key first.")
        return self._binder.bind(state)

    async def aclose(self) -> None:
        await self._binder.aclose()

    async def __aenter__(self) -> "StaticTokenAuth":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


# --- OAuth ----------------------------------------------------------------- #


class OAuthAuth:
    """
    OAuth2 authorization-code flow with refresh.
    - exchange_code/refresh share one token-endpoint helper (_grant)
    - every TokenState mutation happens under one asyncio.Lock
    - refresh() is single-flight: callers queued behind a running refresh
      share its outcome instead of sending a second request
    - a failed, cancelled or superseded request leaves TokenState untouched
    """

    kind = "oauth"

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        authorize_url: str = AUTHORIZE_URL,
        token_url: str = TOKEN_URL,
        scope: str = OAUTH_SCOPE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        refresh_margin_seconds: float = REFRESH_MARGIN_SECONDS,
        http: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.scope = scope
        self.refresh_margin_seconds = refresh_margin_seconds
        self._clock = clock
        self._binder = _ClientBinder(
            api_url=api_url, timeout_seconds=timeout_seconds, http=http
        )
        self._store = TokenStore()
        self._credential: Optional[OAuthCredential] = None
        self._lock = asyncio.Lock()
        # bumped by initialize(); results of requests started under an older
        # configuration are discarded
        self._epoch = 0
        # number of refresh attempts that reached a result, and the last failure
        self._refresh_generation = 0
        self._last_refresh_error: Optional[AuthRefreshError] = None

    def initialize(self, credential: Credential) -> None:
        if not isinstance(credential, OAuthCredential):
            raise ConfigError("OAuth auth requires clientId, clientSecret and redirectUri.")
        missing = [
            alias
            for name, alias in (
                ("client_id", "clientId"),
                ("client_secret", "clientSecret"),
                ("redirect_uri", "redirectUri"),
            )
            if not (getattr(credential, name) or "").strip()
        ]
        if missing:
            raise ConfigError(f"Missing required parameters: {', '.join(missing)}")

        self._credential = credential
        self._epoch += 1
        self._store.clear()
        self._last_refresh_error = None

    def is_authenticated(self) -> bool:
        state = self._store.state
        return state is not None and bool(state.access_token)

    def needs_refresh(self) -> bool:
        state = self._store.state
        if state is None or not state.refresh_token:
            return False
        return self._clock() >= state.expires_at - self.refresh_margin_seconds

    @property
    def token_state(self) -> Optional[TokenState]:
        return self._store.state

    def client(self) -> LinearClient:
        state = self._store.state
        if state is None:
            raise NotAuthenticatedError("Not authenticated. Call linear_auth first.")
        return self._binder.bind(state)

    def authorization_request(self) -> AuthorizationRequest:
        credential = self._require_credential()
        state = secrets.token_urlsafe(16)
        params = {
            "client_id": credential.client_id,
            "redirect_uri": credential.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
            "actor": "application",
            "access_type": "offline",
        }
        return AuthorizationRequest(
            url=f"{self.authorize_url}?{urlencode(params)}", state=state
        )

    def authorization_url(self) -> str:
        return self.authorization_request().url

    async def exchange_code(self, code: str) -> TokenState:
        credential = self._require_credential()
        if not (code or "").strip():
            raise AuthExchangeError("Authorization code must be provided")

        async with self._lock:
            epoch = self._epoch
            state = await self._grant(
                AuthExchangeError,
                {
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": credential.redirect_uri,
                },
                previous=None,
            )
            self._commit(state, epoch, AuthExchangeError)
        log.info("Linear OAuth code exchanged")
        return state

    async def refresh(self) -> TokenState:
        self._require_credential()
        ticket = self._refresh_generation

        async with self._lock:
            if self._refresh_generation != ticket:
                # a refresh reached its result while this caller waited
                if self._last_refresh_error is not None:
                    raise self._last_refresh_error
                return self._require_state()

            current = self._store.state
            if current is None or not current.refresh_token:
                raise NotAuthenticatedError(
                    "No refresh token available. Restart the authorization flow."
                )

            epoch = self._epoch
            try:
                state = await self._grant(
                    AuthRefreshError,
                    {"grant_type": "refresh_token", "refresh_token": current.refresh_token},
                    previous=current,
                )
                self._commit(state, epoch, AuthRefreshError)
            except AuthRefreshError as exc:
                self._settle_refresh(exc)
                raise
            self._settle_refresh(None)
        log.info("Linear OAuth token refreshed")
        return state

    async def restore(self, state: TokenState) -> None:
        """Load a TokenState persisted by a collaborator (e.g. across restarts)."""
        self._require_credential()
        if not state.access_token:
            raise ConfigError("Restored token state has no access token.")
        async with self._lock:
            self._store.replace(state)

    async def aclose(self) -> None:
        await self._binder.aclose()

    async def __aenter__(self) -> "OAuthAuth":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- internals --------------------------------------------------------- #

    def _require_credential(self) -> OAuthCredential:
        if self._credential is None:
            raise ConfigError("Auth config not initialized")
        return self._credential

    def _require_state(self) -> TokenState:
        state = self._store.state
        if state is None:
            raise NotAuthenticatedError("Not authenticated. Call linear_auth first.")
        return state

    def _settle_refresh(self, error: Optional[AuthRefreshError]) -> None:
        self._last_refresh_error = error
        self._refresh_generation += 1

    def _commit(self, state: TokenState, epoch: int, error_cls: Type[AuthError]) -> None:
        if epoch != self._epoch:
            raise error_cls(
                "Credentials were re-initialized while the token request was in flight"
            )
        self._store.replace(state)

    async def _grant(
        self,
        error_cls: Type[AuthError],
        params: Dict[str, str],
        *,
        previous: Optional[TokenState],
    ) -> TokenState:
        credential = self._require_credential()
        grant_type = params["grant_type"]
        form = {
            "client_id": credential.client_id,
            "client_secret": credential.client_secret,
            **params,
        }

        with timed_event("token_grant", grant_type=grant_type):
            try:
                resp = await self._binder.http.post(
                    self.token_url,
                    data=form,
                    headers={"Accept": "application/json"},
                )
            except httpx.HTTPError as exc:
                raise error_cls(
                    f"Token endpoint unreachable ({grant_type}): {exc}"
                ) from exc

            if resp.status_code < 200 or resp.status_code >= 300:
                raise error_cls(
                    f"Token request failed ({grant_type})",
                    status_code=resp.status_code,
                    body=resp.text,
                )

            try:
                token = TokenResponse.model_validate(resp.json())
            except (ValueError, ValidationError) as exc:
                raise error_cls(
                    f"Malformed token response ({grant_type})",
                    status_code=resp.status_code,
                    body=resp.text,
                ) from exc

        expires_at = (
            self._clock() + token.expires_in if token.expires_in is not None else math.inf
        )
        refresh_token = token.refresh_token or (previous.refresh_token if previous else None)
        return TokenState(
            access_token=token.access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )


def create_auth_strategy(credential: Credential, **kwargs: Any) -> AuthStrategy:
    """Pick the strategy variant for ``credential`` and initialize it."""
    strategy: AuthStrategy
    if isinstance(credential, StaticCredential):
        strategy = StaticTokenAuth(**kwargs)
    elif isinstance(credential, OAuthCredential):
        strategy = OAuthAuth(**kwargs)
    else:
        raise ConfigError(f"Unsupported credential type: {type(credential).__name__}")
    strategy.initialize(credential)
    return strategy


__all__ = [
    "AUTHORIZE_URL",
    "TOKEN_URL",
    "OAUTH_SCOPE",
    "REFRESH_MARGIN_SECONDS",
    "StaticCredential",
    "OAuthCredential",
    "Credential",
    "parse_credential",
    "TokenState",
    "TokenStore",
    "TokenResponse",
    "AuthorizationRequest",
    "AuthStrategy",
    "StaticTokenAuth",
    "OAuthAuth",
    "create_auth_strategy",
]
