"""Auth service: credential verification, login and logout."""

import logging

from sqlalchemy.orm import Session

from accounts.core.security import dummy_verify, verify_password
from accounts.db.models.user import User as UserModel
from accounts.errors import AuthenticationFailure, ForbiddenInactive
from accounts.repositories.user import get_user_by_email
from accounts.schemas.user import AuthResponse
from accounts.services.token import TokenService

logger = logging.getLogger(__name__)


def verify_credentials(user: UserModel | None, password: str) -> None:
    """
    Check a password against a stored user, then the active flag.

    Raises:
        AuthenticationFailure: If the user is missing or the password is wrong.
        ForbiddenInactive: If the password is right but the account is not active.
    """
    if user is None:
        dummy_verify()
        raise AuthenticationFailure()

    if not verify_password(password, user.password_hash):
        raise AuthenticationFailure()

    if not user.active:
        raise ForbiddenInactive()


def authenticate(
    db: Session, token_service: TokenService, email: str | None, password: str | None
) -> AuthResponse:
    """
    Authenticate user by email and password, return an opaque bearer token.

    Raises:
        AuthenticationFailure: If email/password is missing, unknown or incorrect.
        ForbiddenInactive: If the account has not been activated.
    """
    if not email or not password:
        raise AuthenticationFailure()

    user = get_user_by_email(db, email)
    verify_credentials(user, password)

    token = token_service.issue(user)
    logger.info("User %s logged in", user.id)
    return AuthResponse(id=user.id, username=user.username, token=token)


def logout(token_service: TokenService, token: str | None) -> None:
    """Revoke the presented token. Without a token this does nothing."""
    if not token:
        return
    token_service.revoke(token)
