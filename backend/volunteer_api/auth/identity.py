# volunteer_api/auth/identity.py
"""
Canonical authenticated identity model.

Routes and services reason about "who is calling?" through this object
instead of raw token claims. Ownership checks compare ``Identity.email``
against the organizer/volunteer email on payloads and stored records.

The Identity object is INTERNAL ONLY and should not be returned directly
to clients.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class Identity:
    """
    Canonical representation of an authenticated (or unauthenticated) caller.

    Attributes:
        subject: The issuer's stable user id (Firebase ``sub`` / ``user_id``).
        email: Normalized email address from the verified token.
        auth_provider: Currently always ``"firebase"`` (or ``None`` if unauthenticated).
        is_authenticated: True if the token was successfully verified.
        raw_claims: Verified token claims, kept for audit/debugging only.
    """

    subject: str | None = None
    email: str | None = None
    auth_provider: str | None = None
    is_authenticated: bool = False
    raw_claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def unauthenticated(cls) -> Identity:
        return cls()

    @classmethod
    def from_firebase(cls, claims: dict[str, Any]) -> Identity:
        """Build an identity from verified Firebase ID token claims."""
        email = normalize_email(claims.get("email"))
        return cls(
            subject=claims.get("sub") or claims.get("user_id"),
            email=email or None,
            auth_provider="firebase",
            is_authenticated=True,
            raw_claims=dict(claims),
        )

    def owns(self, email: str | None) -> bool:
        """True when the caller's verified email equals ``email``."""
        if not self.is_authenticated or not self.email:
            return False
        return normalize_email(email) == self.email

    def to_debug_dict(self) -> dict[str, Any]:
        """Safe subset for logs; never includes raw_claims."""
        return {
            "subject": self.subject,
            "email": self.email,
            "auth_provider": self.auth_provider,
            "is_authenticated": self.is_authenticated,
        }
