# volunteer_api/auth/firebase.py
"""
Firebase ID token verification.

Used by the request gate to turn a bearer token into verified claims.
Responsibilities:
- Lazy JWKS fetching from Google's securetoken endpoint (no network calls on import)
- In-memory cache of the issuer's public signing keys with configurable TTL
- Clear typed exceptions for verification failures

Every token is fully verified on every call; only the public keys are cached.
"""
from __future__ import annotations

import json
import logging
import ssl
import threading
import time
from typing import Any
from urllib.request import urlopen

import certifi

from jose import JWTError, jwk, jwt

from volunteer_api.core.config import settings


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FirebaseVerificationError(Exception):
    """Base exception for Firebase ID token verification failures."""


class FirebaseUnavailableError(FirebaseVerificationError):
    """Verification could not run: project not configured or keys unreachable."""


class FirebaseTokenExpiredError(FirebaseVerificationError):
    pass


class FirebaseInvalidTokenError(FirebaseVerificationError):
    """Bad signature, wrong issuer or audience, or malformed token."""


# ---------------------------------------------------------------------------
# JWKS Cache
# ---------------------------------------------------------------------------


class _JWKSCache:
    """
    Thread-safe in-memory cache for the issuer's public signing keys.

    Populated lazily on first verification attempt. TTL is controlled by
    FIREBASE_JWKS_CACHE_SECONDS.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: dict[str, Any] | None = None
        self._fetched_at: float = 0.0

    def get_signing_key(self, kid: str) -> Any:
        """
        Get the signing key for the given key ID.

        Fetches JWKS if not cached or cache has expired.
        Raises FirebaseUnavailableError if fetch fails.
        Raises FirebaseInvalidTokenError if kid not found.
        """
        with self._lock:
            now = time.time()
            ttl = settings.FIREBASE_JWKS_CACHE_SECONDS

            if self._keys is None or (now - self._fetched_at) > ttl:
                self._refresh_keys()

            if kid not in self._keys:
                # Google rotates keys; refresh once before giving up.
                self._refresh_keys()

            if kid not in self._keys:
                raise FirebaseInvalidTokenError(f"Signing key not found for kid: {kid}")

            return self._keys[kid]

    def _refresh_keys(self) -> None:
        jwks_url = settings.FIREBASE_JWKS_URL
        if not jwks_url:
            raise FirebaseUnavailableError("Firebase JWKS URL not configured")

        try:
            logger.info("Fetching Firebase JWKS from %s", jwks_url)
            context = ssl.create_default_context(cafile=certifi.where())
            with urlopen(jwks_url, timeout=10, context=context) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except Exception as e:
            logger.error("Failed to fetch Firebase JWKS: %s", e)
            raise FirebaseUnavailableError(f"Failed to fetch JWKS: {e}") from e

        keys_list = data.get("keys", [])
        if not keys_list:
            raise FirebaseUnavailableError("JWKS response contains no keys")

        self._keys = {}
        for key_data in keys_list:
            kid = key_data.get("kid")
            if kid:
                try:
                    self._keys[kid] = jwk.construct(key_data, algorithm="RS256")
                except Exception as e:
                    logger.warning("Failed to construct key for kid=%s: %s", kid, e)

        self._fetched_at = time.time()
        logger.info("Cached %d Firebase signing keys", len(self._keys))

    def clear(self) -> None:
        with self._lock:
            self._keys = None
            self._fetched_at = 0.0


_jwks_cache = _JWKSCache()


def clear_jwks_cache() -> None:
    """Clear the JWKS cache. Exposed for testing."""
    _jwks_cache.clear()


# ---------------------------------------------------------------------------
# Token Verification
# ---------------------------------------------------------------------------


def verify_firebase_token(token: str) -> dict[str, Any]:
    """
    Verify a Firebase ID token.

    Validates:
    - RS256 signature via the securetoken JWKS
    - exp / iat claims
    - iss == https://securetoken.google.com/<project id>
    - aud == <project id>
    - a non-empty sub claim

    Args:
        token: The JWT string to verify

    Returns:
        The decoded token claims as a dict

    Raises:
        FirebaseUnavailableError: project not configured or keys unreachable
        FirebaseTokenExpiredError: Token has expired
        FirebaseInvalidTokenError: signature, issuer, audience or other failures
    """
    issuer = settings.firebase_issuer
    project_id = settings.FIREBASE_PROJECT_ID

    if not issuer or not project_id:
        raise FirebaseUnavailableError("Firebase not configured (FIREBASE_PROJECT_ID required)")

    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise FirebaseInvalidTokenError(f"Invalid token header: {e}") from e

    if unverified_header.get("alg") != "RS256":
        raise FirebaseInvalidTokenError("Token must be signed with RS256")

    kid = unverified_header.get("kid")
    if not kid:
        raise FirebaseInvalidTokenError("Token header missing 'kid' claim")

    signing_key = _jwks_cache.get_signing_key(kid)

    try:
        claims = jwt.decode(
            token,
            signing_key,
            algorithms=["RS256"],
            audience=project_id,
            issuer=issuer,
        )
    except jwt.ExpiredSignatureError as e:
        raise FirebaseTokenExpiredError("Token has expired") from e
    except jwt.JWTClaimsError as e:
        error_msg = str(e).lower()
        if "issuer" in error_msg:
            raise FirebaseInvalidTokenError(f"Issuer mismatch: {e}") from e
        if "audience" in error_msg:
            raise FirebaseInvalidTokenError(f"Audience mismatch: {e}") from e
        raise FirebaseInvalidTokenError(f"Claims validation failed: {e}") from e
    except JWTError as e:
        raise FirebaseInvalidTokenError(f"Signature verification failed: {e}") from e

    if not claims.get("sub"):
        raise FirebaseInvalidTokenError("Token missing 'sub' claim")

    auth_time = claims.get("auth_time")
    if isinstance(auth_time, (int, float)) and auth_time > time.time() + 60:
        raise FirebaseInvalidTokenError("Token auth_time is in the future")

    return claims
