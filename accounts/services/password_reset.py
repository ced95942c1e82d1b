"""Password reset: request a reset token, check it, and apply the new password.

A user has at most one pending reset token (``users.password_reset_token``).
Requesting again replaces it; completing the reset clears it. Reset tokens do
not expire on their own.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from accounts.core.security import generate_token, get_password_hash
from accounts.core.validation import check_email, check_password
from accounts.db.models.user import User as UserModel
from accounts.errors import EmailNotFoundError, ForbiddenResetToken, ValidationFailure
from accounts.repositories.user import get_user_by_email, get_user_by_reset_token
from accounts.services import email as email_service
from accounts.services.token import TokenService

logger = logging.getLogger(__name__)


async def request_reset(db: Session, email: str | None) -> None:
    """
    Store a new reset token for the user and mail it.

    The token is committed before the mail goes out, so it stays pending even
    when delivery fails.

    Raises:
        ValidationFailure: If the email is missing or malformed.
        EmailNotFoundError: If no user has this email.
        EmailDeliveryError: If the reset mail could not be sent.
    """
    if check_email(email):
        raise ValidationFailure({"email": "email_invalid"})

    user = get_user_by_email(db, email)
    if user is None:
        raise EmailNotFoundError()

    user.password_reset_token = generate_token()
    db.commit()

    await email_service.send_password_reset(user.email, user.password_reset_token)


def validate_reset_token(db: Session, token: str | None) -> UserModel:
    """
    Return the user holding exactly this reset token.

    Raises:
        ForbiddenResetToken: If the token is missing or nobody holds it.
    """
    if not token:
        raise ForbiddenResetToken()
    user = get_user_by_reset_token(db, token)
    if user is None:
        raise ForbiddenResetToken()
    return user


def complete_reset(
    db: Session, token_service: TokenService, token: str | None, new_password: str | None
) -> None:
    """
    Set a new password using a pending reset token.

    In a single transaction: store the new hash, clear the reset token,
    activate a still-pending account, and delete every bearer token of the
    user.

    Raises:
        ForbiddenResetToken: If the token is missing or unknown.
        ValidationFailure: If the new password breaks a password rule.
    """
    user = validate_reset_token(db, token)

    error = check_password(new_password)
    if error:
        raise ValidationFailure({"password": error})

    try:
        user.password_hash = get_password_hash(new_password)
        user.password_reset_token = None
        if not user.active:
            user.active = True
            user.activation_token = None
        token_service.revoke_all(user.id, commit=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Password reset for user %s rolled back", user.id)
        raise

    logger.info("Password reset completed for user %s", user.id)
