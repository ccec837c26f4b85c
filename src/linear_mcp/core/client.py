import logging
import time
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_API_URL = "https://api.linear.app/graphql"
DEFAULT_TIMEOUT_SECONDS = 30.0


class LinearClientError(Exception):
    """Base error for transport failures."""


class LinearHTTPError(LinearClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_json = response_json
        self.response_text = response_text


class LinearParseError(LinearClientError):
    pass


class LinearGraphQLError(LinearClientError):
    """HTTP 200 with a GraphQL ``errors`` array."""

    def __init__(self, errors: List[Dict[str, Any]], data: Optional[Dict[str, Any]] = None):
        messages = [str(e.get("message", e)) for e in errors if isinstance(e, dict)]
        super().__init__("GraphQL error: " + ("; ".join(messages) or "unknown error"))
        self.errors = errors
        self.data = data


class LinearClient:
    """
    GraphQL transport handle bound to a single access token.
    - The token cannot be changed after construction; a new token needs a new handle
    - Several handles may share one httpx.AsyncClient (owned by the auth strategy)
    - Single attempt per call, no retries
    """

    def __init__(
        self,
        *,
        access_token: str,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        access_token = access_token or ""
        api_url = (api_url or "").strip()

        if not access_token:
            raise ValueError("access_token must be provided.")
        if not api_url:
            raise ValueError("api_url must be provided.")

        self._access_token = access_token
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("linear_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "LinearClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        *,
        operation_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        POST one GraphQL document and return its ``data`` object.
        - Raises LinearHTTPError on non-2xx responses
        - Raises LinearClientError on network/timeout errors
        - Raises LinearParseError if the body is not a JSON object with ``data``
        - Raises LinearGraphQLError if the body carries ``errors``
        """
        body: Dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        if operation_name:
            body["operationName"] = operation_name

        start = time.perf_counter()
        try:
            resp = await self.http.post(self.api_url, json=body, headers=self.headers)
        except httpx.HTTPError as exc:
            raise LinearClientError(
                f"Network/timeout error calling POST {self.api_url}: {exc}"
            ) from exc

        duration_ms = int((time.perf_counter() - start) * 1000)
        self.log.debug(
            "graphql.request",
            extra={
                "operation": operation_name,
                "status": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp)

        payload = self._safe_json(resp)
        errors = payload.get("errors")
        if errors:
            raise LinearGraphQLError(
                errors if isinstance(errors, list) else [{"message": str(errors)}],
                data=payload.get("data") if isinstance(payload.get("data"), dict) else None,
            )

        data = payload.get("data")
        if not isinstance(data, dict):
            raise LinearParseError(
                f"Expected a 'data' object from POST {self.api_url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        if not resp.content:
            raise LinearParseError(f"Empty response body from POST {self.api_url}")

        try:
            data = resp.json()
        except Exception as exc:
            snippet = (resp.text or "")[:500]
            raise LinearParseError(
                f"Expected JSON from POST {self.api_url}, "
                f"got non-JSON body snippet: {snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise LinearParseError(
                f"Expected top-level JSON object from POST {self.api_url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(self, resp: httpx.Response) -> LinearHTTPError:
        response_json: Optional[Dict[str, Any]] = None
        response_text: Optional[str] = None
        message = "request failed"

        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                response_json = parsed
                errors = parsed.get("errors")
                if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                    message = errors[0].get("message") or message
                else:
                    message = parsed.get("message") or parsed.get("error") or message
        except Exception:
            response_text = (resp.text or "")[:500]

        return LinearHTTPError(
            status_code=resp.status_code,
            method="POST",
            url=self.api_url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )
