import logging

from sqlalchemy.orm import Session

import accounts.repositories.user as user_repo
from accounts.core.security import generate_token, get_password_hash
from accounts.core.validation import check_email, check_password, check_username, collect_errors
from accounts.db.models.user import User as UserModel
from accounts.errors import (
    ActivationFailure,
    ForbiddenOwnership,
    UserNotFoundError,
    ValidationFailure,
)
from accounts.schemas.pagination import PaginatedResponse
from accounts.schemas.user import User, UserCreate, UserUpdate
from accounts.services import email as email_service
from accounts.services import file as file_service
from accounts.services.token import TokenService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


async def register(db: Session, user_data: UserCreate) -> UserModel:
    """
    Create an inactive user and send the activation email.

    - Validates username, email and password against the field rules
    - Validates email uniqueness
    - Commits only once the activation email is accepted

    Raises:
        ValidationFailure: With every failing field.
        EmailDeliveryError: If the activation email could not be sent. Nothing is stored.
    """
    errors = collect_errors(
        username=check_username(user_data.username),
        email=check_email(user_data.email),
        password=check_password(user_data.password),
    )
    if "email" not in errors and user_repo.get_user_by_email(db, user_data.email):
        errors["email"] = "email_inuse"
    if errors:
        raise ValidationFailure(errors)

    user = user_repo.create_user(
        db,
        username=user_data.username,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        activation_token=generate_token(),
    )
    try:
        await email_service.send_account_activation(user.email, user.activation_token)
    except Exception:
        db.rollback()
        raise
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def activate(db: Session, token: str) -> None:
    """
    Activate the account holding this activation token.

    Raises:
        ActivationFailure: If no account holds the token.
    """
    user = user_repo.get_user_by_activation_token(db, token)
    if user is None:
        raise ActivationFailure()
    user.active = True
    user.activation_token = None
    db.commit()


def normalize_page(page: str | int | None, size: str | int | None) -> tuple[int, int]:
    """Clamp paging input: page falls back to 1, size outside 1..100 falls back to 10."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        size = int(size)
    except (TypeError, ValueError):
        size = DEFAULT_PAGE_SIZE
    if page < 1:
        page = 1
    if size < 1 or size > MAX_PAGE_SIZE:
        size = DEFAULT_PAGE_SIZE
    return page, size


def list_users(
    db: Session,
    page: str | int | None = 1,
    size: str | int | None = DEFAULT_PAGE_SIZE,
    authenticated_user: UserModel | None = None,
) -> PaginatedResponse[User]:
    """
    List active users, leaving out the caller when authenticated.

    Args:
        page: Page number (1-indexed)
        size: Number of items per page
    """
    page, size = normalize_page(page, size)
    users, total = user_repo.get_active_users_paginated(
        db,
        page=page,
        page_size=size,
        exclude_user_id=authenticated_user.id if authenticated_user else None,
    )
    return PaginatedResponse[User].of(
        [User.model_validate(user) for user in users], total, page, size
    )


def get_user(db: Session, user_id: int) -> UserModel:
    """
    Get an active user by ID.

    Raises:
        UserNotFoundError: If no active user has this ID.
    """
    user = user_repo.get_active_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def update_user(
    db: Session,
    user_id: int,
    user_data: UserUpdate,
    authenticated_user: UserModel | None,
) -> UserModel:
    """
    Update username and profile image of the caller's own account.

    Raises:
        ForbiddenOwnership: If the caller is anonymous or targets another account.
        ValidationFailure: If the username or image breaks a rule.
    """
    if authenticated_user is None or authenticated_user.id != user_id:
        raise ForbiddenOwnership("unauthorized_user_update")

    errors = collect_errors(
        username=check_username(user_data.username),
        image=file_service.check_profile_image(user_data.image) if user_data.image else None,
    )
    if errors:
        raise ValidationFailure(errors)

    user = authenticated_user
    user.username = user_data.username
    if user_data.image:
        previous = user.image
        user.image = file_service.save_profile_image(user_data.image)
        file_service.delete_profile_image(previous)
    db.commit()
    db.refresh(user)
    return user


def delete_user(
    db: Session,
    token_service: TokenService,
    user_id: int,
    authenticated_user: UserModel | None,
) -> None:
    """
    Delete the caller's own account, its bearer tokens and its profile image.

    Raises:
        ForbiddenOwnership: If the caller is anonymous or targets another account.
    """
    if authenticated_user is None or authenticated_user.id != user_id:
        raise ForbiddenOwnership("unauthorized_user_delete")

    image = authenticated_user.image
    token_service.revoke_all(user_id, commit=False)
    user_repo.delete_user(db, authenticated_user)
    db.commit()
    file_service.delete_profile_image(image)
    logger.info("Deleted user %s", user_id)
