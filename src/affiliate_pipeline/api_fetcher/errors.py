from __future__ import annotations

from typing import Any, Optional


class ZanoxError(RuntimeError):
    """Base error for the Zanox adapter."""


class ZanoxConfigError(ZanoxError):
    """Raised when required configuration is missing or invalid."""


class UnexpectedStatusError(ZanoxError):
    """Raised when the provider answers with anything other than HTTP 200."""

    def __init__(self, status_code: int, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        message = f"Expected response status code 200. Got {status_code}."
        if url:
            message = f"{message} ({url})"
        super().__init__(message)


class MissingDataError(ZanoxError):
    """Raised when a payload lacks a field the mapper needs, or a lookup comes back empty."""

    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(f"{message}. Payload: {payload!r}")


class UnknownEnumValueError(ZanoxError):
    """Raised when a provider discriminator string has no domain mapping."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Unknown value for '{field}': {value!r}")
