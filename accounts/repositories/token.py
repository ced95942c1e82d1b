"""Token data access. Callers own the transaction; nothing here commits."""

from datetime import datetime

from sqlalchemy.orm import Session

from accounts.db.models.token import Token as TokenModel


def get_token(db: Session, token: str) -> TokenModel | None:
    return db.query(TokenModel).filter(TokenModel.token == token).first()


def create_token(db: Session, token: str, user_id: int | None, last_used_at: datetime) -> TokenModel:
    db_token = TokenModel(token=token, user_id=user_id, last_used_at=last_used_at)
    db.add(db_token)
    db.flush()
    return db_token


def delete_token(db: Session, token: str) -> int:
    """Delete one token. Returns the number of rows removed (0 or 1)."""
    return (
        db.query(TokenModel)
        .filter(TokenModel.token == token)
        .delete()
    )


def delete_tokens_for_user(db: Session, user_id: int) -> int:
    return (
        db.query(TokenModel)
        .filter(TokenModel.user_id == user_id)
        .delete()
    )


def delete_tokens_used_before(db: Session, cutoff: datetime) -> int:
    """Delete every token whose last use is older than the cutoff, whoever owns it."""
    return (
        db.query(TokenModel)
        .filter(TokenModel.last_used_at < cutoff)
        .delete()
    )


def touch_token(db: Session, token: str, last_used_at: datetime) -> int:
    """Move a token's last use forward. Returns 0 if the row is already gone."""
    return (
        db.query(TokenModel)
        .filter(TokenModel.token == token)
        .update({TokenModel.last_used_at: last_used_at})
    )
