import logging
from app.auth import hash_password, normalize_email
from app.store import ClientStore

logger = logging.getLogger(__name__)

SEEDED = "seeded"
EXISTS = "exists"


def seed_admin(store: ClientStore, email: str, password: str) -> str:
    """
    Make sure the administrator account exists.

    Creates the user on first boot and leaves an existing row untouched,
    so calling it on every start is safe.
    """
    email = normalize_email(email)
    if store.find_user_by_email(email):
        logger.info("Admin user %s already exists", email)
        return EXISTS

    store.insert_user(email, hash_password(password))
    logger.warning("Seeded admin user: %s (change password!)", email)
    return SEEDED
