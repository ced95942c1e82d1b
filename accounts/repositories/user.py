"""User data access. Callers own the transaction; nothing here commits."""

from sqlalchemy.orm import Session

from accounts.db.models.user import User as UserModel


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email."""
    return db.query(UserModel).filter(UserModel.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def get_active_user_by_id(db: Session, user_id: int) -> UserModel | None:
    return (
        db.query(UserModel)
        .filter(UserModel.id == user_id, UserModel.active.is_(True))
        .first()
    )


def get_user_by_reset_token(db: Session, token: str) -> UserModel | None:
    """Get a user by password reset token."""
    return db.query(UserModel).filter(UserModel.password_reset_token == token).first()


def get_user_by_activation_token(db: Session, token: str) -> UserModel | None:
    return db.query(UserModel).filter(UserModel.activation_token == token).first()


def create_user(
    db: Session,
    username: str,
    email: str,
    password_hash: str,
    activation_token: str,
) -> UserModel:
    """Add an inactive user and flush so it gets an id."""
    db_user = UserModel(
        username=username,
        email=email,
        password_hash=password_hash,
        active=False,
        activation_token=activation_token,
    )
    db.add(db_user)
    db.flush()
    return db_user


def get_active_users_paginated(
    db: Session, page: int = 1, page_size: int = 10, exclude_user_id: int | None = None
) -> tuple[list[UserModel], int]:
    """
    Get active users with pagination, sorted by id for stable pagination.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        exclude_user_id: Leave this user out (the caller, when authenticated)

    Returns:
        Tuple of (list of users, total count)
    """
    query = db.query(UserModel).filter(UserModel.active.is_(True))
    if exclude_user_id is not None:
        query = query.filter(UserModel.id != exclude_user_id)
    total = query.count()
    skip = (page - 1) * page_size
    users = query.order_by(UserModel.id).offset(skip).limit(page_size).all()
    return users, total


def delete_user(db: Session, user: UserModel) -> None:
    db.delete(user)
    db.flush()
