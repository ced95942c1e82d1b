from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from accounts.api.deps import get_authenticated_user, get_db, get_tokens
from accounts.core.i18n import get_language, translate
from accounts.db.models.user import User as UserModel
from accounts.schemas.pagination import PaginatedResponse
from accounts.schemas.user import Message, User, UserCreate, UserUpdate
from accounts.services import user as user_service
from accounts.services.token import TokenService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=Message)
async def create_new_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    language: str = Depends(get_language),
):
    """
    Register a new account. The account stays inactive until the token
    from the activation email is posted back.
    """
    await user_service.register(db, user_data)
    return Message(message=translate("user_create_success", language))


@router.post("/token/{token}", response_model=Message)
def activate_account(
    token: str,
    db: Session = Depends(get_db),
    language: str = Depends(get_language),
):
    """Activate the account holding this activation token."""
    user_service.activate(db, token)
    return Message(message=translate("account_activation_success", language))


@router.get("", response_model=PaginatedResponse[User])
def get_all_users_paginated(
    page: str | None = Query(None, description="Page number (1-indexed)"),
    size: str | None = Query(None, description="Number of items per page, 1 to 100"),
    db: Session = Depends(get_db),
    current_user: UserModel | None = Depends(get_authenticated_user),
):
    """
    List active users. An authenticated caller is left out of the list.

    Out-of-range paging values fall back to page 1 and 10 items per page.
    """
    return user_service.list_users(db, page=page, size=size, authenticated_user=current_user)


@router.get("/{user_id}", response_model=User)
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    """Get an active user by ID."""
    user = user_service.get_user(db, user_id)
    return User.model_validate(user)


@router.put("/{user_id}", response_model=User)
def update_user_by_id(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel | None = Depends(get_authenticated_user),
):
    """
    Update username and profile image. Users can only update themselves.

    The image is sent base64 encoded and must be a PNG or JPEG of at most 2MB.
    """
    user = user_service.update_user(db, user_id, user_data, current_user)
    return User.model_validate(user)


@router.delete("/{user_id}")
def delete_user_by_id(
    user_id: int,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
    current_user: UserModel | None = Depends(get_authenticated_user),
):
    """Delete a user by ID. Users can only delete themselves."""
    user_service.delete_user(db, tokens, user_id, current_user)
    return {}
