from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from accounts.db.base import Base


class Token(Base):
    __tablename__ = "tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    # Naive UTC
    last_used_at = Column(DateTime, nullable=False, index=True)

    # Relationship
    user = relationship("User", back_populates="tokens")
