from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from genie.config import settings


_bearer_scheme = HTTPBearer(auto_error=False)
_ALGORITHMS = ["HS256"]


class AuthenticatedUser(BaseModel):
    id: str
    email: str | None = None
    role: str | None = None


def _auth_unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _auth_misconfigured(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


def decode_and_validate_token(token: str) -> dict[str, Any]:
    secret = str(settings.jwt_secret or "").strip()
    if not secret:
        raise _auth_misconfigured("Authentication is enabled but JWT_SECRET is not configured.")

    audience = str(settings.jwt_audience or "").strip()
    issuer = str(settings.jwt_issuer or "").strip().rstrip("/")
    decode_kwargs: dict[str, Any] = {
        "algorithms": _ALGORITHMS,
        "options": {"verify_aud": bool(audience), "verify_iss": bool(issuer)},
    }
    if audience:
        decode_kwargs["audience"] = audience
    if issuer:
        decode_kwargs["issuer"] = issuer

    try:
        claims = jwt.decode(token, secret, **decode_kwargs)
    except JWTError as exc:
        raise _auth_unauthorized(f"Invalid or expired token: {exc}") from exc

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise _auth_unauthorized("Token does not identify a user (missing sub).")
    return claims


def user_from_claims(claims: dict[str, Any]) -> AuthenticatedUser:
    email = claims.get("email")
    role = claims.get("role")
    return AuthenticatedUser(
        id=str(claims["sub"]),
        email=email if isinstance(email, str) and email.strip() else None,
        role=role if isinstance(role, str) else None,
    )


def require_authenticated_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthenticatedUser | None:
    if not settings.auth_enabled:
        return None

    if credentials is None:
        raise _auth_unauthorized("Missing bearer token.")
    if credentials.scheme.lower() != "bearer":
        raise _auth_unauthorized("Unsupported authorization scheme.")

    token = credentials.credentials.strip()
    if not token:
        raise _auth_unauthorized("Missing bearer token.")

    return user_from_claims(decode_and_validate_token(token))
