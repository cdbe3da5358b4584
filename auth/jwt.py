"""
JWT-style session token creation and verification.

Tokens are ``<payload>.<signature>``: the payload is URL-safe base64 (no
padding) of a JSON object ``{"user_id", "iat", "exp"}`` and the signature is
the hex HMAC-SHA256 of the encoded payload segment.

The secret comes from ``Settings.jwt_secret`` (env var: ``JWT_SECRET``).
With no secret configured the service rejects every token and refuses to
issue new ones.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import logging
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 86400 * 7


class TokenServiceUnavailable(RuntimeError):
    """Raised by ``issue`` when no signing secret is configured."""


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return urlsafe_b64decode(segment + padding)


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret.encode() if secret else b""
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def _sign(self, segment: str) -> str:
        return hmac.new(self._secret, segment.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self, user_id: int) -> str:
        """Create a signed token for ``user_id`` expiring in 7 days."""
        if not self.enabled:
            raise TokenServiceUnavailable("JWT_SECRET is not configured")

        issued_at = int(self._clock())
        payload = {
            "user_id": user_id,
            "iat": issued_at,
            "exp": issued_at + self._expiry_seconds,
        }
        segment = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
        return f"{segment}.{self._sign(segment)}"

    def verify(self, token: str) -> Optional[int]:
        """
        Return the ``user_id`` carried by a valid token, else ``None``.

        Expired, tampered and malformed tokens all give ``None``; only the
        log line tells them apart.
        """
        if not self.enabled:
            logger.debug("Token rejected: no signing secret configured")
            return None
        if not token:
            return None

        try:
            segment, signature = token.split(".")
        except ValueError:
            logger.debug("Token rejected: bad format")
            return None

        try:
            expected = self._sign(segment)
            if not hmac.compare_digest(signature.encode("ascii"), expected.encode("ascii")):
                logger.debug("Token rejected: bad signature")
                return None
            payload = json.loads(_b64decode(segment))
        except (UnicodeError, binascii.Error, ValueError) as exc:
            logger.debug("Token rejected: undecodable (%s)", type(exc).__name__)
            return None

        if not isinstance(payload, dict):
            logger.warning("Token rejected: payload is not an object")
            return None

        user_id = payload.get("user_id")
        expires_at = payload.get("exp")
        if not isinstance(user_id, int) or not isinstance(expires_at, (int, float)):
            logger.warning("Token rejected: missing claims")
            return None

        if self._clock() >= expires_at:
            logger.debug("Token rejected: expired for user %s", user_id)
            return None

        return user_id
