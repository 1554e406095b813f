"""Client configuration for tripledger."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tripledger._constants import USER_AGENT
from tripledger.exceptions import LedgerConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class LedgerConfig:
    """Connection settings for the hosted record store.

    Parameters
    ----------
    base_url : str
        Record store API root, e.g. ``"https://records.example.com/api"``.
    project_id : str
        Project whose collections hold the ledger data.
    api_token : str or None
        Bearer token sent with every request.  ``None`` sends no
        ``Authorization`` header.
    request_timeout : float
        Total per-request timeout in seconds, enforced by aiohttp.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    user_agent : str
        ``User-Agent`` header value.
    """

    base_url: str
    project_id: str
    api_token: str | None = None
    request_timeout: float = 30.0
    api_trace_enabled: bool = False
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise LedgerConfigError("base_url must be non-empty")
        if not self.project_id or not self.project_id.strip():
            raise LedgerConfigError("project_id must be non-empty")
        if self.request_timeout <= 0:
            raise LedgerConfigError("request_timeout must be positive")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

    def collection_path(self, name: str, record_id: str | None = None) -> str:
        """Return the endpoint path for a collection or one of its records."""
        path = f"/projects/{self.project_id}/collections/{name}"
        if record_id is not None:
            path = f"{path}/{record_id}"
        return path

    @classmethod
    def from_env(cls, **overrides: Any) -> LedgerConfig:
        """Create configuration from environment variables.

        Reads ``TRIPLEDGER_BASE_URL``, ``TRIPLEDGER_PROJECT_ID`` and the
        optional ``TRIPLEDGER_*`` variables.  Explicit keyword arguments
        override environment values.

        Raises
        ------
        LedgerConfigError
            If the base URL or project id is missing or a numeric value
            cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TRIPLEDGER_BASE_URL": "base_url",
            "TRIPLEDGER_PROJECT_ID": "project_id",
            "TRIPLEDGER_API_TOKEN": "api_token",
            "TRIPLEDGER_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("TRIPLEDGER_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise LedgerConfigError(f"Invalid TRIPLEDGER_REQUEST_TIMEOUT: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("TRIPLEDGER_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        for required in ("base_url", "project_id"):
            if not config_kwargs.get(required):
                raise LedgerConfigError(f"Missing required setting {required!r} (TRIPLEDGER_{required.upper()})")

        return cls(**config_kwargs)
