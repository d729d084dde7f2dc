"""
Security helpers for password hashing and JWT authentication.

Tokens are HS256 JSON Web Tokens built from base64url encoded parts
and an HMAC-SHA256 signature keyed with ``settings.secret_key``.  They
carry the user's email in ``sub`` and an expiration timestamp in
``exp``.  Passwords are hashed with PBKDF2-HMAC-SHA256 and stored as
``salthex$hashhex``.

The FastAPI dependencies at the bottom of the module turn a bearer
token into a user context dict::

    {"sub": email, "user_id": 3, "role": "produtor", "producer_id": 7}

and enforce role or permission requirements on routes.
"""

import base64
import binascii
import hashlib
import hmac
import json
import os
import time
from typing import Callable, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .access_control import AccessControlManager


PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "admin@agency.com"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(',', ':')).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(',', ':')).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, str]]:
    """Verify and decode a JWT token.

    Returns the payload when the signature is valid and the token has
    not expired, otherwise ``None``.
    """
    parts = token.split('.')
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign(signing_input, settings.secret_key)
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (binascii.Error, ValueError):
        return None
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    try:
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256 and a random salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    if not hashed_password or '$' not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split('$', 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, object]:
    """Dependency that resolves the bearer token to a user context.

    The static ``SUPER_ADMIN_TOKEN`` (when configured) authenticates as
    an administrator with no profile behind it.  Otherwise the JWT
    subject is looked up in ``profiles`` so role and producer link
    always reflect the current database state.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    token = credentials.credentials

    if settings.super_admin_static_token and hmac.compare_digest(
        token, settings.super_admin_static_token
    ):
        return {
            "sub": "static_super_admin",
            "user_id": None,
            "role": "admin",
            "producer_id": None,
        }

    payload = decode_access_token(token)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    from dj_agency_api.app.core.db import get_connection
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id, role, producer_id, disabled FROM profiles WHERE email = ?",
            (payload.get("sub"),),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        raise _unauthorized("User no longer exists")
    if row["disabled"]:
        raise _unauthorized("User account disabled")
    return {
        "sub": payload.get("sub"),
        "user_id": row["id"],
        "role": row["role"],
        "producer_id": row["producer_id"],
    }


def require_roles(*roles: str) -> Callable[[Dict[str, object]], Dict[str, object]]:
    """Dependency factory enforcing that the current user has one of ``roles``.

    Use as ``Depends(require_roles("admin"))``.  Raises 403 when the
    authenticated user's role is not listed.
    """

    def _role_dependency(current_user: Dict[str, object] = Depends(get_current_user)) -> Dict[str, object]:
        if current_user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


def require_permission(permission: str) -> Callable[[Dict[str, object]], Dict[str, object]]:
    """Dependency factory enforcing a named permission flag.

    Permission names are the keys returned by
    ``AccessControlManager.get_user_permissions`` (e.g.
    ``can_view_financials``).
    """

    def _permission_dependency(current_user: Dict[str, object] = Depends(get_current_user)) -> Dict[str, object]:
        permissions = AccessControlManager.get_user_permissions(current_user)
        if not permissions.get(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _permission_dependency
