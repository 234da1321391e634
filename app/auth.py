from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from typing import Optional
from sqlalchemy.orm import Session
from app.models import User, Session as SessionModel, utcnow
from app.store import ClientStore
from app.config import get_settings

logger = logging.getLogger(__name__)

# Argon2id with library defaults
# Salt is generated per hash and embedded in the hash string
ph = PasswordHasher()

# Verified against when the email is unknown so both paths cost the same
_DUMMY_HASH = ph.hash(secrets.token_hex(16))


def hash_password(password: str) -> str:
    """
    Hash password using Argon2id.

    Returns hash string that includes algorithm parameters and salt.
    Format: $argon2id$v=19$m=65536,t=3,p=4$salt$hash
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against stored hash.

    Uses constant-time comparison internally to prevent timing attacks.
    Returns False for any error to avoid information leakage.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def authenticate(store: ClientStore, email: str, password: str) -> Optional[User]:
    """
    Resolve credentials to a user.

    Unknown email and wrong password both return None, and both run one
    Argon2 verification.
    """
    user = store.find_user_by_email(normalize_email(email))
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def generate_session_id() -> str:
    """
    Generate cryptographically secure session token.

    Uses 32 bytes (256 bits) of randomness, hex encoded.
    """
    return secrets.token_hex(32)


def session_key(token: str) -> str:
    """
    Storage key for a cookie token.

    Only the HMAC digest is persisted, so a leaked sessions table
    cannot be replayed as cookies.
    """
    secret = get_settings().session_secret.encode()
    return hmac.new(secret, token.encode(), hashlib.sha256).hexdigest()


def create_session(db: Session, user_id: int) -> str:
    """
    Create new session for user.

    Returns the token to be stored in cookie.
    Session expires a fixed number of hours after issuance.
    """
    token = generate_session_id()
    expires_at = utcnow() + timedelta(hours=get_settings().session_expire_hours)

    session = SessionModel(
        session_id=session_key(token),
        user_id=user_id,
        expires_at=expires_at
    )

    db.add(session)
    db.commit()

    return token


def get_user_id_from_session(db: Session, token: Optional[str]) -> Optional[int]:
    """
    Resolve a cookie token to a user id.

    Returns None if the token is missing, unknown or expired.
    """
    if not token:
        return None

    session = db.query(SessionModel).filter(
        SessionModel.session_id == session_key(token),
        SessionModel.expires_at > utcnow()
    ).first()

    if not session:
        return None
    return session.user_id


def delete_session(db: Session, token: str) -> bool:
    """
    Delete session (logout).

    Returns True if session was deleted, False if not found.
    """
    result = db.query(SessionModel).filter(
        SessionModel.session_id == session_key(token)
    ).delete()

    db.commit()
    return result > 0


def cleanup_expired_sessions(db: Session) -> int:
    """
    Remove expired sessions from database.

    Returns number of sessions cleaned up.
    """
    result = db.query(SessionModel).filter(
        SessionModel.expires_at <= utcnow()
    ).delete()

    db.commit()
    if result:
        logger.info("Purged %d expired sessions", result)
    return result
