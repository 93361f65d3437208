from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from shop_erp.core.settings import get_app_settings
from shop_erp.schemas.auth import Identity

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash."""
    return _pwd_context.verify(plain_password, hashed_password)


# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def encode_identity(identity: Identity) -> str:
    """Sign the identity so it can be persisted client-side. Tokens carry no expiry."""
    settings = get_app_settings()
    payload: Dict[str, Any] = {"sub": identity.username, **identity.model_dump()}
    return jwt.encode(payload, settings.SESSION_SECRET_KEY, algorithm=settings.SESSION_ALGORITHM)


# PUBLIC_INTERFACE
def decode_identity(token: str) -> Identity:
    """Decode and validate a persisted identity; raises JWTError if the signature is bad."""
    settings = get_app_settings()
    claims = jwt.decode(token, settings.SESSION_SECRET_KEY, algorithms=[settings.SESSION_ALGORITHM])
    return Identity(
        username=claims.get("username") or claims.get("sub") or "",
        name=claims.get("name") or "",
        role=claims.get("role") or "",
    )


class SessionState(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionGuard:
    """
    Tracks the signed-in identity for one browser session.

    Starts in ``loading`` until the persisted token has been checked, then moves
    to ``authenticated`` or ``unauthenticated``. Logging in hands back the token
    the caller persists; logging out clears the identity.
    """

    def __init__(self) -> None:
        self.state = SessionState.LOADING
        self.identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def restore(self, token: Optional[str]) -> SessionState:
        """Resolve the persisted token into an identity, if it is present and valid."""
        self.identity = None
        if token:
            try:
                self.identity = decode_identity(token)
            except (JWTError, ValueError):
                self.identity = None
        self.state = SessionState.AUTHENTICATED if self.identity else SessionState.UNAUTHENTICATED
        return self.state

    def login(self, identity: Identity) -> str:
        """Mark the session authenticated and return the token to persist."""
        self.identity = identity
        self.state = SessionState.AUTHENTICATED
        return encode_identity(identity)

    def logout(self) -> None:
        self.identity = None
        self.state = SessionState.UNAUTHENTICATED
