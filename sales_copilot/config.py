"""Centralized configuration for the Sales Copilot agent.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/sales-copilot/<VARIABLE_NAME>``.

Secrets are never read by the API clients at call time.  They are resolved
once into ``ApolloConfig`` / ``UnipileConfig`` (see ``get_settings``) and the
config objects are handed to the clients when they are constructed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/sales-copilot/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _require_env(name: str, *aliases: str) -> str:
    """Return a config value from env-var or SSM, or raise a clear error.

    ``aliases`` are older variable names that are still honoured.
    """
    # 1. Env var / .env (always checked first, allows local override)
    for candidate in (name, *aliases):
        value = os.getenv(candidate)
        if value and not value.startswith("your_"):
            return value

    # 2. SSM Parameter Store (only on AWS)
    if _ON_AWS:
        ssm_value = _get_ssm_parameter(name)
        if ssm_value:
            return ssm_value

    raise OSError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store /sales-copilot/{name} (AWS)."
    )


# ── External API configuration ───────────────────────────────────────

APOLLO_BASE_URL: str = "https://api.apollo.io"


@dataclass(frozen=True)
class ApolloConfig:
    """Credentials for the Apollo contact/company database."""

    api_key: str
    endpoint: str = APOLLO_BASE_URL

    @classmethod
    def from_env(cls) -> ApolloConfig:
        return cls(api_key=_require_env("APOLLO_API_KEY"))


@dataclass(frozen=True)
class UnipileConfig:
    """Credentials and account scoping for the Unipile LinkedIn API.

    ``dsn`` is the tenant host handed out by Unipile (``api8.unipile.com:13851``)
    and may or may not carry a scheme.
    """

    dsn: str
    api_key: str
    account_id: str | None = None

    @classmethod
    def from_env(cls) -> UnipileConfig:
        return cls(
            dsn=_require_env("UNIPILE_DSN", "UNIPILE_DNS"),
            api_key=_require_env("UNIPILE_API_KEY"),
            account_id=_require_env("UNIPILE_ACCOUNT_ID"),
        )

    @property
    def base_url(self) -> str:
        if not self.dsn:
            raise OSError("Missing required configuration: UNIPILE_DSN.")
        return self.dsn if self.dsn.startswith("http") else f"https://{self.dsn}"

    @property
    def headers(self) -> dict[str, str]:
        if not self.api_key:
            raise OSError("Missing required configuration: UNIPILE_API_KEY.")
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "X-API-KEY": self.api_key,
        }

    def resolve_account_id(self, account_id: str | None = None) -> str:
        """Return the explicit account id, else the configured default."""
        resolved = account_id or self.account_id
        if not resolved:
            raise ValueError("Account ID is required but not provided")
        return resolved


@dataclass(frozen=True)
class Settings:
    """Every secret the agent needs, validated together at startup."""

    anthropic_api_key: str
    apollo: ApolloConfig
    unipile: UnipileConfig

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            anthropic_api_key=_require_env("ANTHROPIC_API_KEY"),
            apollo=ApolloConfig.from_env(),
            unipile=UnipileConfig.from_env(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Resolve and validate configuration once per process."""
    settings = Settings.from_env()
    logger.debug("Configuration loaded (unipile host: %s)", settings.unipile.base_url)
    return settings


# ── LLM ─────────────────────────────────────────────────────────────
MODEL_NAME: str = os.getenv("MODEL_NAME", "claude-sonnet-4-5")
# Writer model used by the document tools
DOCUMENT_MODEL_NAME: str = os.getenv("DOCUMENT_MODEL_NAME", MODEL_NAME)

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
