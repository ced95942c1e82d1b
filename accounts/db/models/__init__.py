from accounts.db.models.user import User
from accounts.db.models.token import Token

__all__ = ["User", "Token"]
