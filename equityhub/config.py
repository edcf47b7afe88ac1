"""Runtime configuration read from the environment.

Variables:
    EQUITYHUB_API_URL: Backend base URL (default ``http://localhost:8000``).
    EQUITYHUB_CSRF_COOKIE: Name of the cookie holding the CSRF token
        (default ``csrftoken``).
    EQUITYHUB_TIMEOUT: Request timeout in seconds (default ``30``).
    EQUITYHUB_CURRENCY_SUFFIX: Label shown after amounts (default ``JPN``).

"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_CSRF_COOKIE = "csrftoken"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CURRENCY_SUFFIX = "JPN"


@dataclass(frozen=True)
class Settings:
    """Connection and display settings for a dashboard session."""

    api_url: str = DEFAULT_API_URL
    csrf_cookie: str = DEFAULT_CSRF_COOKIE
    timeout: float = DEFAULT_TIMEOUT
    currency_suffix: str = DEFAULT_CURRENCY_SUFFIX

    def __post_init__(self) -> None:
        """Validate field values."""
        if not self.api_url.startswith(("http://", "https://")):
            msg = f"api_url must be an http(s) URL, got {self.api_url!r}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ValueError(msg)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: str | float | None,
    ) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            **overrides: Field values that win over the environment.
                ``None`` values are ignored.

        Returns:
            Validated Settings.

        Raises:
            ValueError: If EQUITYHUB_TIMEOUT is not a number, or any
                value fails validation.

        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("EQUITYHUB_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as exc:
            msg = f"EQUITYHUB_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            raise ValueError(msg) from exc

        values: dict[str, str | float] = {
            "api_url": env.get("EQUITYHUB_API_URL", "").strip() or DEFAULT_API_URL,
            "csrf_cookie": env.get("EQUITYHUB_CSRF_COOKIE", "").strip()
            or DEFAULT_CSRF_COOKIE,
            "timeout": timeout,
            "currency_suffix": env.get(
                "EQUITYHUB_CURRENCY_SUFFIX", DEFAULT_CURRENCY_SUFFIX
            ).strip(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
