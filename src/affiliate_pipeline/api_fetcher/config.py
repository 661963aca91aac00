from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from .errors import ZanoxConfigError


DEFAULT_BASE_URL = "https://api.zanox.com/json/2011-03-01"
DEFAULT_TIMEOUT_SEC = 15.0


@dataclass(frozen=True)
class ZanoxConfig:
    """
    Credentials and connection settings for the Zanox publisher API.

    Environment variables (see from_env):

        ZANOX_CONNECT_ID    - publisher connect id (required)
        ZANOX_SECRET_KEY    - signing secret (required)
        ZANOX_AD_SPACE_ID   - ad space used for commission lookups (required)
        ZANOX_BASE_URL      - override the API root
        ZANOX_TIMEOUT_SEC   - request timeout (default: 15)
    """

    connect_id: str
    secret_key: str
    ad_space_id: str
    base_url: str = DEFAULT_BASE_URL
    timeout_sec: float = DEFAULT_TIMEOUT_SEC

    def __post_init__(self) -> None:
        for name in ("connect_id", "secret_key", "ad_space_id"):
            if not getattr(self, name):
                raise ZanoxConfigError(f"Zanox {name} must not be empty.")

        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ZanoxConfigError(f"Zanox base URL is not a valid URL: '{self.base_url}'")

    @classmethod
    def from_env(cls) -> "ZanoxConfig":
        missing = [
            var
            for var in ("ZANOX_CONNECT_ID", "ZANOX_SECRET_KEY", "ZANOX_AD_SPACE_ID")
            if not os.getenv(var)
        ]
        if missing:
            raise ZanoxConfigError(
                f"Missing required environment variables: {', '.join(missing)}."
            )

        timeout_raw = os.getenv("ZANOX_TIMEOUT_SEC", str(DEFAULT_TIMEOUT_SEC)).strip()
        try:
            timeout_sec = float(timeout_raw)
        except ValueError as e:
            raise ZanoxConfigError(
                f"ZANOX_TIMEOUT_SEC must be a number, got '{timeout_raw}'."
            ) from e

        return cls(
            connect_id=os.environ["ZANOX_CONNECT_ID"],
            secret_key=os.environ["ZANOX_SECRET_KEY"],
            ad_space_id=os.environ["ZANOX_AD_SPACE_ID"],
            base_url=os.getenv("ZANOX_BASE_URL") or DEFAULT_BASE_URL,
            timeout_sec=timeout_sec,
        )
