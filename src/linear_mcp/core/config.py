from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .auth import Credential, OAuthCredential, StaticCredential
from .client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS
from .errors import ConfigError

STATIC_TOKEN_ENV = ("LINEAR_PAT", "LINEAR_API_KEY")
OAUTH_ENV = {
    "client_id": "LINEAR_CLIENT_ID",
    "client_secret": "LINEAR_CLIENT_SECRET",
    "redirect_uri": "LINEAR_REDIRECT_URI",
}


@dataclass(frozen=True)
class LinearConfig:
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    credential: Optional[Credential] = None


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def credential_from_env() -> Optional[Credential]:
    """
    Build a credential from environment variables.
    - LINEAR_PAT (or LINEAR_API_KEY) -> static token, wins over OAuth settings
    - LINEAR_CLIENT_ID/SECRET/REDIRECT_URI -> OAuth, all three required once any is set
    - nothing set -> None (OAuth can still be started later through linear_auth)
    """
    for name in STATIC_TOKEN_ENV:
        token = _env(name)
        if token:
            return StaticCredential(token=token)

    values = {field: _env(env) for field, env in OAUTH_ENV.items()}
    if not any(values.values()):
        return None

    missing = [OAUTH_ENV[field] for field, value in values.items() if not value]
    if missing:
        raise ConfigError(f"Missing {', '.join(missing)} in environment.")
    return OAuthCredential(**values)


def load_env_config(*, use_dotenv: bool = True) -> LinearConfig:
    """Load Linear settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()

    raw_timeout = _env("LINEAR_TIMEOUT_SECONDS")
    try:
        timeout_seconds = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ConfigError(
            f"LINEAR_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}"
        ) from exc
    if timeout_seconds <= 0:
        raise ConfigError("LINEAR_TIMEOUT_SECONDS must be positive")

    return LinearConfig(
        api_url=_env("LINEAR_API_URL") or DEFAULT_API_URL,
        timeout_seconds=timeout_seconds,
        log_level=_env("LINEAR_LOG_LEVEL") or "INFO",
        credential=credential_from_env(),
    )


__all__ = ["LinearConfig", "credential_from_env", "load_env_config"]
