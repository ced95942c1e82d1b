from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accounts.api.deps import get_bearer_token, get_db, get_tokens
from accounts.core.i18n import get_language, translate
from accounts.schemas.user import (
    AuthResponse,
    LoginRequest,
    Message,
    PasswordReset,
    PasswordResetRequest,
)
from accounts.services import auth as auth_service
from accounts.services import password_reset as password_reset_service
from accounts.services.token import TokenService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
):
    """Login endpoint - returns the user's id, username and a bearer token."""
    return auth_service.authenticate(db, tokens, credentials.email, credentials.password)


@router.post("/logout", response_model=Message)
def logout(
    token: str | None = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_tokens),
    language: str = Depends(get_language),
):
    """Revoke the presented bearer token. Succeeds without one too."""
    auth_service.logout(tokens, token)
    return Message(message=translate("logout_success", language))


@router.post("/forgot-password", response_model=Message)
async def forgot_password(
    request: PasswordResetRequest,
    db: Session = Depends(get_db),
    language: str = Depends(get_language),
):
    """Request password reset - sends email with reset token."""
    await password_reset_service.request_reset(db, request.email)
    return Message(message=translate("password_reset_request_success", language))


@router.put("/reset-password")
def reset_password(
    reset_data: PasswordReset,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_tokens),
):
    """Reset password using token from email."""
    password_reset_service.complete_reset(
        db, tokens, reset_data.password_reset_token, reset_data.password
    )
    return {}
