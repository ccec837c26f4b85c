import asyncio
import math
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
import respx
from httpx import Response
from linear_mcp.core.auth import (
    AUTHORIZE_URL,
    OAuthAuth,
    OAuthCredential,
    StaticCredential,
    TokenState,
)
from linear_mcp.core.errors import (
    AuthExchangeError,
    AuthRefreshError,
    ConfigError,
    NotAuthenticatedError,
)

TOKEN_URL = "https://mock-linear.test/oauth/token"
API = "https://mock-linear.test/graphql"


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _credential(**overrides):
    values = {"client_id": "c", "client_secret": "s", "redirect_uri": "http://x/cb"}
    values.update(overrides)
    return OAuthCredential(**values)


def _auth(clock=None, http=None) -> OAuthAuth:
    auth = OAuthAuth(
        api_url=API, token_url=TOKEN_URL, clock=clock or FakeClock(), http=http
    )
    auth.initialize(_credential())
    return auth


def _form(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


# --- initialize / authorization URL ---------------------------------------- #


def test_initialize_reports_missing_fields():
    auth = OAuthAuth(api_url=API)
    with pytest.raises(ConfigError) as exc:
        auth.initialize(_credential(client_secret="", redirect_uri=""))

    assert "clientSecret" in str(exc.value)
    assert "redirectUri" in str(exc.value)
    assert "clientId" not in str(exc.value)


def test_initialize_rejects_static_credential():
    with pytest.raises(ConfigError):
        OAuthAuth(api_url=API).initialize(StaticCredential(token="t"))


def test_authorization_url_requires_initialize():
    with pytest.raises(ConfigError, match="not initialized"):
        OAuthAuth(api_url=API).authorization_url()


def test_authorization_url_contains_client_and_redirect():
    url = _auth().authorization_url()

    assert url.startswith(AUTHORIZE_URL + "?")
    assert "client_id=c" in url
    assert "redirect_uri=http%3A%2F%2Fx%2Fcb" in url

    params = parse_qs(urlparse(url).query)
    assert params["response_type"] == ["code"]
    assert params["scope"] == ["read,write,issues:create"]
    assert params["actor"] == ["application"]
    assert params["state"][0]


def test_authorization_state_is_fresh_per_request():
    auth = _auth()
    assert auth.authorization_request().state != auth.authorization_request().state


def test_not_authenticated_after_initialize():
    auth = _auth()
    assert not auth.is_authenticated()
    assert not auth.needs_refresh()
    with pytest.raises(NotAuthenticatedError):
        auth.client()


# --- code exchange --------------------------------------------------------- #


@pytest.mark.asyncio
async def test_exchange_code_stores_tokens():
    clock = FakeClock(1_000.0)
    async with respx.mock:
        route = respx.post(TOKEN_URL).mock(
            return_value=Response(
                200,
                json={"access_token": "A1", "refresh_token": "R1", "expires_in": 3600},
            )
        )
        async with _auth(clock) as auth:
            state = await auth.exchange_code("the-code")

            assert auth.is_authenticated()
            assert not auth.needs_refresh()
            assert auth.client().access_token == "A1"
            assert state == TokenState("A1", "R1", 4_600.0)
            assert auth.token_state == state

    form = _form(route.calls[0].request)
    assert form == {
        "client_id": "c",
        "client_secret": "s",
        "grant_type": "authorization_code",
        "code": "the-code",
        "redirect_uri": "http://x/cb",
    }


@pytest.mark.asyncio
async def test_exchange_without_expiry_never_expires():
    async with respx.mock:
        respx.post(TOKEN_URL).mock(
            return_value=Response(200, json={"access_token": "A1"})
        )
        async with _auth() as auth:
            state = await auth.exchange_code("code")

    assert math.isinf(state.expires_at)
    assert state.refresh_token is None


@pytest.mark.asyncio
async def test_exchange_failure_carries_status_and_body():
    async with respx.mock:
        respx.post(TOKEN_URL).mock(
            return_value=Response(400, text='{"error":"invalid_grant"}')
        )
        async with _auth() as auth:
            with pytest.raises(AuthExchangeError) as exc:
                await auth.exchange_code("bad")

            assert not auth.is_authenticated()

    assert exc.value.status_code == 400
    assert "invalid_grant" in str(exc.value)


@pytest.mark.asyncio
async def test_exchange_requires_code():
    async with _auth() as auth:
        with pytest.raises(AuthExchangeError):
            await auth.exchange_code("")


@pytest.mark.asyncio
async def test_malformed_token_response_is_exchange_error():
    async with respx.mock:
        respx.post(TOKEN_URL).mock(return_value=Response(200, json={"token": "x"}))
        async with _auth() as auth:
            with pytest.raises(AuthExchangeError):
                await auth.exchange_code("code")


# --- refresh --------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_needs_refresh_within_margin():
    clock = FakeClock(0.0)
    auth = _auth(clock)
    await auth.restore(TokenState("A", "R", expires_at=1_000.0))

    clock.now = 699.0
    assert not auth.needs_refresh()
    clock.now = 700.0
    assert auth.needs_refresh()


@pytest.mark.asyncio
async def test_needs_refresh_false_without_refresh_token():
    clock = FakeClock(10_000.0)
    auth = _auth(clock)
    await auth.restore(TokenState("A", None, expires_at=0.0))
    assert not auth.needs_refresh()


@pytest.mark.asyncio
async def test_refresh_replaces_tokens_and_rotates():
    clock = FakeClock(0.0)
    async with respx.mock:
        route = respx.post(TOKEN_URL).mock(
            return_value=Response(
                200,
                json={"access_token": "A2", "refresh_token": "R2", "expires_in": 60},
            )
        )
        async with _auth(clock) as auth:
            await auth.restore(TokenState("A1", "R1", expires_at=10.0))
            old_client = auth.client()

            state = await auth.refresh()

            assert state == TokenState("A2", "R2", 60.0)
            assert auth.client() is not old_client
            assert auth.client().access_token == "A2"

    form = _form(route.calls[0].request)
    assert form["grant_type"] == "refresh_token"
    assert form["refresh_token"] == "R1"


@pytest.mark.asyncio
async def test_refresh_keeps_refresh_token_when_not_rotated():
    async with respx.mock:
        respx.post(TOKEN_URL).mock(
            return_value=Response(200, json={"access_token": "A2", "expires_in": 60})
        )
        async with _auth() as auth:
            await auth.restore(TokenState("A1", "R1", expires_at=0.0))
            state = await auth.refresh()

    assert state.refresh_token == "R1"


@pytest.mark.asyncio
async def test_failed_refresh_leaves_state_untouched():
    previous = TokenState("A1", "R1", expires_at=5.0)
    async with respx.mock:
        respx.post(TOKEN_URL).mock(
            return_value=Response(401, json={"error": "invalid_grant"})
        )
        async with _auth() as auth:
            await auth.restore(previous)
            with pytest.raises(AuthRefreshError) as exc:
                await auth.refresh()

            assert auth.token_state is previous
            assert auth.is_authenticated()
            assert auth.client().access_token == "A1"

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_refresh_without_refresh_token_raises():
    async with _auth() as auth:
        await auth.restore(TokenState("A1"))
        with pytest.raises(NotAuthenticatedError):
            await auth.refresh()


@pytest.mark.asyncio
async def test_concurrent_refresh_sends_one_request():
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(_form(request))
        await asyncio.sleep(0.05)
        return httpx.Response(
            200, json={"access_token": "A2", "refresh_token": "R2", "expires_in": 3600}
        )

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        auth = _auth(http=http)
        await auth.restore(TokenState("A1", "R1", expires_at=0.0))

        results = await asyncio.gather(*(auth.refresh() for _ in range(5)))
    finally:
        await http.aclose()

    assert len(calls) == 1
    assert all(r.access_token == "A2" for r in results)
    assert auth.token_state.refresh_token == "R2"


@pytest.mark.asyncio
async def test_concurrent_refresh_failure_is_shared():
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        await asyncio.sleep(0.05)
        return httpx.Response(400, json={"error": "invalid_grant"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        auth = _auth(http=http)
        previous = TokenState("A1", "R1", expires_at=0.0)
        await auth.restore(previous)

        results = await asyncio.gather(
            *(auth.refresh() for _ in range(3)), return_exceptions=True
        )
    finally:
        await http.aclose()

    assert len(calls) == 1
    assert all(isinstance(r, AuthRefreshError) for r in results)
    assert auth.token_state is previous


@pytest.mark.asyncio
async def test_refresh_after_settled_refresh_sends_again():
    async with respx.mock:
        route = respx.post(TOKEN_URL).mock(
            return_value=Response(
                200, json={"access_token": "A2", "refresh_token": "R2", "expires_in": 1}
            )
        )
        async with _auth() as auth:
            await auth.restore(TokenState("A1", "R1", expires_at=0.0))
            await auth.refresh()
            await auth.refresh()

    assert route.call_count == 2


@pytest.mark.asyncio
async def test_reinitialize_during_exchange_discards_result():
    started = asyncio.Event()
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await release.wait()
        return httpx.Response(200, json={"access_token": "stale"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        auth = _auth(http=http)
        task = asyncio.create_task(auth.exchange_code("code"))
        await started.wait()

        auth.initialize(_credential(client_id="other"))
        release.set()

        with pytest.raises(AuthExchangeError):
            await task
    finally:
        await http.aclose()

    assert not auth.is_authenticated()
