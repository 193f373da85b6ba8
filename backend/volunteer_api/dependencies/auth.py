# volunteer_api/dependencies/auth.py
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from volunteer_api.auth import firebase
from volunteer_api.auth.identity import Identity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthenticated(detail: str = "Authorization header with Bearer token required") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _invalid_credential(message: str = "Invalid token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"error": "INVALID_CREDENTIAL", "message": message},
    )


def require_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Gate for every identity-sensitive route.

    Validates:
      - Authorization: Bearer <token>            (401 otherwise)
      - token verifies against Firebase          (403 otherwise)
      - token carries an email                   (403 otherwise)
    Returns:
      - the verified Identity, also stored on request.state.identity

    Payload contents are never inspected here; ownership is checked by the
    services.
    """
    request.state.identity = Identity.unauthenticated()

    if not creds or creds.scheme.lower() != "bearer":
        raise _unauthenticated()

    token = (creds.credentials or "").strip()
    if not token:
        raise _unauthenticated()

    try:
        claims = firebase.verify_firebase_token(token)
    except firebase.FirebaseUnavailableError as exc:
        logger.error("Token verification unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Token verification unavailable",
        )
    except firebase.FirebaseTokenExpiredError:
        logger.info("Rejected expired Firebase token")
        raise _invalid_credential("Token has expired")
    except firebase.FirebaseVerificationError as exc:
        logger.warning("Firebase token verification failed: %s", exc)
        raise _invalid_credential()

    identity = Identity.from_firebase(claims)
    if not identity.email:
        logger.warning("Verified token for subject %s carries no email", identity.subject)
        raise _invalid_credential("Token missing email claim")

    request.state.identity = identity
    return identity
