import httpx
import pytest
import respx
from httpx import Response
from linear_mcp.core.auth import OAuthAuth, OAuthCredential, StaticCredential, TokenState
from linear_mcp.core.config import LinearConfig
from linear_mcp.core.errors import NotAuthenticatedError
from linear_mcp.core.session import LinearSession

API = "https://mock-linear.test/graphql"
TOKEN_URL = "https://api.linear.app/oauth/token"


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def test_session_without_auth_raises():
    session = LinearSession(api_url=API)

    assert not session.has_auth
    with pytest.raises(NotAuthenticatedError):
        session.auth


@pytest.mark.asyncio
async def test_ensure_authenticated_without_auth_raises():
    with pytest.raises(NotAuthenticatedError):
        await LinearSession(api_url=API).ensure_authenticated()


def test_from_config_builds_strategy():
    config = LinearConfig(api_url=API, credential=StaticCredential(token="t"))
    session = LinearSession.from_config(config)

    assert session.auth.kind == "static"
    assert session.auth.client().api_url == API


@pytest.mark.asyncio
async def test_configure_replaces_strategy():
    async with LinearSession(api_url=API) as session:
        await session.configure(StaticCredential(token="t"))
        assert session.auth.kind == "static"

        await session.configure(
            OAuthCredential(client_id="c", client_secret="s", redirect_uri="r")
        )
        assert session.auth.kind == "oauth"
        # a fresh OAuth strategy holds no token yet
        with pytest.raises(NotAuthenticatedError):
            await session.ensure_authenticated()


@pytest.mark.asyncio
async def test_executor_uses_current_strategy():
    async with respx.mock:
        route = respx.post(API).mock(
            return_value=Response(200, json={"data": {"teams": {"nodes": []}}})
        )
        async with LinearSession(api_url=API) as session:
            await session.configure(StaticCredential(token="first"))
            await session.executor.run("getTeams")
            await session.configure(StaticCredential(token="second"))
            await session.executor.run("getTeams")

    tokens = [c.request.headers["Authorization"] for c in route.calls]
    assert tokens == ["Bearer first", "Bearer second"]


@pytest.mark.asyncio
async def test_ensure_authenticated_refreshes_expiring_token():
    async with respx.mock:
        route = respx.post(TOKEN_URL).mock(
            return_value=Response(
                200, json={"access_token": "A2", "refresh_token": "R2", "expires_in": 3600}
            )
        )
        http = httpx.AsyncClient()
        auth = OAuthAuth(api_url=API, http=http, clock=FakeClock(1_000.0))
        auth.initialize(OAuthCredential(client_id="c", client_secret="s", redirect_uri="r"))
        await auth.restore(TokenState("A1", "R1", expires_at=1_100.0))

        session = LinearSession(auth, api_url=API)
        try:
            await session.ensure_authenticated()
        finally:
            await session.aclose()
            await http.aclose()

    assert route.call_count == 1
    assert auth.token_state.access_token == "A2"


@pytest.mark.asyncio
async def test_ensure_authenticated_skips_refresh_for_fresh_token():
    async with respx.mock:
        route = respx.post(TOKEN_URL).mock(return_value=Response(500))
        auth = OAuthAuth(api_url=API, clock=FakeClock(0.0))
        auth.initialize(OAuthCredential(client_id="c", client_secret="s", redirect_uri="r"))
        await auth.restore(TokenState("A1", "R1", expires_at=3_600.0))

        async with LinearSession(auth, api_url=API) as session:
            await session.ensure_authenticated()

    assert not route.called
