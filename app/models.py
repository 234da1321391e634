from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from app.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """
    Administrator credential.

    - email is unique and indexed for login lookup
    - password_hash never leaves the database layer
    - rows are only created by the bootstrap seed
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class Session(Base):
    """
    Server-side session storage.

    - session_id is an HMAC digest of the cookie token, never the token itself
    - expires_at is fixed at issuance and checked on every lookup

    Session lifecycle:
    1. Created on login (or demo login)
    2. Validated on each request against expires_at
    3. Deleted on logout or purged once expired
    """
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index('ix_session_lookup', 'session_id', 'expires_at'),
    )

    def __repr__(self):
        return f"<Session(id={self.id}, user_id={self.user_id})>"


class Client(Base):
    """
    Contact list entry.

    Timestamps are set application-side so updated_at keeps sub-second
    resolution on SQLite.
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255))
    phone = Column(String(20))
    address = Column(Text)
    status = Column(String(16), nullable=False, default="active")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Client(id={self.id}, name={self.name})>"
