"""Bearer token lifecycle: issue, validate with sliding expiry, revoke, sweep."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

import accounts.repositories.token as token_repo
from accounts.core.config import settings
from accounts.core.security import generate_token
from accounts.db.models.user import User as UserModel
from accounts.errors import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 32


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the tokens table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TokenService:
    """
    Creates and checks opaque bearer tokens stored in the tokens table.

    A token stays valid while it is used at least once per ``expire_after``
    window; each successful validation moves its ``last_used_at`` to now.
    """

    def __init__(
        self,
        db: Session,
        expire_after: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.expire_after = expire_after
        self.clock = clock

    def issue(self, user: UserModel) -> str:
        """Mint a token for the user and persist it with last_used_at = now."""
        token = generate_token(TOKEN_LENGTH)
        token_repo.create_token(self.db, token, user.id, self.clock())
        self.db.commit()
        return token

    def validate(self, token: str) -> UserModel:
        """
        Resolve the user owning a token and refresh its last use.

        Raises:
            InvalidTokenError: If the token is unknown, has no owner, or was
                revoked before its refresh was written.
            TokenExpiredError: If the token was last used longer ago than the
                expiry window. The row is deleted before raising.
        """
        row = token_repo.get_token(self.db, token)
        if row is None:
            raise InvalidTokenError()

        now = self.clock()
        if now - row.last_used_at > self.expire_after:
            logger.info("Token of user %s expired after %s idle", row.user_id, now - row.last_used_at)
            token_repo.delete_token(self.db, token)
            self.db.commit()
            raise TokenExpiredError()

        user = row.user
        if user is None:
            raise InvalidTokenError()

        # A concurrent logout or sweep may have removed the row since it was read
        if not token_repo.touch_token(self.db, token, now):
            self.db.rollback()
            raise InvalidTokenError()
        self.db.commit()
        return user

    def revoke(self, token: str) -> None:
        """Delete a token. Unknown tokens are ignored."""
        token_repo.delete_token(self.db, token)
        self.db.commit()

    def revoke_all(self, user_id: int, commit: bool = True) -> int:
        """
        Delete every token owned by the user.

        With ``commit=False`` the deletes join the caller's open transaction.
        """
        count = token_repo.delete_tokens_for_user(self.db, user_id)
        if commit:
            self.db.commit()
        return count

    def sweep_expired(self) -> int:
        """Delete all tokens idle for longer than the expiry window."""
        cutoff = self.clock() - self.expire_after
        count = token_repo.delete_tokens_used_before(self.db, cutoff)
        self.db.commit()
        return count


def get_token_service(db: Session) -> TokenService:
    """Build a TokenService configured from settings."""
    return TokenService(db, expire_after=settings.token_expire_after)
