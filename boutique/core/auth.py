# boutique/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from boutique.core.config import get_settings
from boutique.schemas.user import AuthUser

settings = get_settings()

# auto_error=False so browsing endpoints can serve guests
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (SUPABASE_JWT_SECRET, SUPABASE_JWT_ALG)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _display_name(payload: dict[str, Any], email: str) -> str:
    metadata = payload.get("user_metadata") or {}
    name = (metadata.get("full_name") or metadata.get("name") or "").strip()
    if name:
        return name
    return email.split("@", 1)[0] if "@" in email else email


def _is_admin(payload: dict[str, Any], email: str) -> bool:
    app_metadata = payload.get("app_metadata") or {}
    if app_metadata.get("role") == "admin":
        return True
    return email.lower() in settings.admin_emails


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthUser | None:
    """
    Resolve the caller from a Supabase JWT.

    Returns None for guests (no Authorization header).

    Raises:
        HTTPException(401): if the token is malformed or lacks sub/email.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return AuthUser(
        id=user_id,
        email=email,
        name=_display_name(payload, email),
        is_admin=_is_admin(payload, email),
    )


def require_user(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """
    Enforce authentication for shopper routes (cart, checkout, history).
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: AuthUser = Depends(require_user)) -> AuthUser:
    """
    Enforce the storefront admin role.

    Raises:
        HTTPException(403): if the caller is not an admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
