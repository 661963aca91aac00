"""
Request signing for the Zanox publisher API.

Every request carries three headers:

    Authorization: ZXWS <connect_id>:<signature>
    Date:          Mon, 19 Oct 2026 10:00:00 GMT
    nonce:         <md5 hex>

where signature = base64(bytes(hmac_sha1_hex("GET" + path + date + nonce))).
The hex digest is decoded pair-by-pair before Base64; encoding the hex
string directly produces signatures the provider rejects.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import random
import time
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, Optional

from .errors import ZanoxConfigError


AUTH_SCHEME = "ZXWS"


def make_timestamp(now: Optional[datetime] = None) -> str:
    """Current time as 'Ddd, DD Mon YYYY HH:MM:SS GMT'."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def make_nonce() -> str:
    seed = f"{time.time():.6f}{random.randint(0, 2**31 - 1)}"
    return hashlib.md5(seed.encode("utf-8")).hexdigest()


def hex_to_base64(hex_digest: str) -> str:
    raw = bytes(int(hex_digest[i:i + 2], 16) for i in range(0, len(hex_digest), 2))
    return base64.b64encode(raw).decode("ascii")


def compute_signature(secret_key: str, path: str, timestamp: str, nonce: str) -> str:
    message = f"GET{path}{timestamp}{nonce}"
    hex_digest = hmac.new(
        secret_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha1,
    ).hexdigest()
    return hex_to_base64(hex_digest)


class RequestSigner:
    """Builds the signed header set for one request path."""

    def __init__(self, connect_id: str, secret_key: str) -> None:
        if not connect_id or not secret_key:
            raise ZanoxConfigError("Both connect_id and secret_key are required for signing.")
        self.connect_id = connect_id
        self._secret_key = secret_key

    def sign(
        self,
        path: str,
        base_headers: Optional[Dict[str, str]] = None,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
    ) -> Dict[str, str]:
        timestamp = timestamp or make_timestamp()
        nonce = nonce or make_nonce()
        signature = compute_signature(self._secret_key, path, timestamp, nonce)

        headers = dict(base_headers or {})
        headers.update(
            {
                "Authorization": f"{AUTH_SCHEME} {self.connect_id}:{signature}",
                "Date": timestamp,
                "nonce": nonce,
            }
        )
        return headers
