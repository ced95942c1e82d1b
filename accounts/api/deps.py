from fastapi import Depends, Header
from sqlalchemy.orm import Session

from accounts.db import SessionLocal
from accounts.db.models.user import User
from accounts.errors import InvalidTokenError, TokenExpiredError
from accounts.services.token import TokenService, get_token_service

BEARER_PREFIX = "Bearer "


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_tokens(db: Session = Depends(get_db)) -> TokenService:
    return get_token_service(db)


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def get_authenticated_user(
    token: str | None = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_tokens),
) -> User | None:
    """
    Resolve the caller from the bearer token, refreshing the token on success.

    A missing, unknown or expired token makes the caller anonymous (None);
    endpoints that need an owner reject anonymous callers themselves.
    """
    if token is None:
        return None
    try:
        return tokens.validate(token)
    except (InvalidTokenError, TokenExpiredError):
        return None
