"""
Storage port for clients and users.

Wraps one SQLAlchemy session. Route handlers receive it through the
get_store dependency, so tests can bind it to an in-memory database.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Client, User, utcnow

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ("name", "email", "phone", "address", "status")


class StorageError(Exception):
    """Generic storage failure. The engine's own message stays in the log."""

    def __init__(self, message: str = "storage failure"):
        super().__init__(message)
        self.message = message


class ClientStore:
    """Repository for client and user rows."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure during %s", operation)
            raise StorageError() from e

    # Clients

    def insert_client(self, fields: Mapping[str, Any]) -> int:
        """Insert a client and return its id. Unknown keys are ignored."""
        with self._guard("insert_client"):
            client = Client(**{k: v for k, v in fields.items() if k in CLIENT_FIELDS})
            self.db.add(client)
            self.db.commit()
            self.db.refresh(client)
            return client.id

    def get_client(self, client_id: int) -> Optional[Client]:
        with self._guard("get_client"):
            return self.db.get(Client, client_id)

    def list_clients(self) -> List[Client]:
        """All clients, newest id first."""
        with self._guard("list_clients"):
            return self.db.query(Client).order_by(Client.id.desc()).all()

    def update_client(self, client_id: int, fields: Mapping[str, Any]) -> int:
        """
        Write only the supplied fields and refresh updated_at.

        Fields missing from the mapping keep their stored value.
        Returns the number of rows affected (0 when the id does not exist).
        """
        values: Dict[str, Any] = {k: v for k, v in fields.items() if k in CLIENT_FIELDS}
        values["updated_at"] = utcnow()
        with self._guard("update_client"):
            count = self.db.query(Client).filter(
                Client.id == client_id
            ).update(values, synchronize_session=False)
            self.db.commit()
            return count

    def delete_client(self, client_id: int) -> int:
        """Returns the number of rows deleted."""
        with self._guard("delete_client"):
            count = self.db.query(Client).filter(
                Client.id == client_id
            ).delete(synchronize_session=False)
            self.db.commit()
            return count

    # Users

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self._guard("find_user_by_email"):
            return self.db.query(User).filter(User.email == email).first()

    def insert_user(self, email: str, password_hash: str) -> int:
        with self._guard("insert_user"):
            user = User(email=email, password_hash=password_hash)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user.id

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._guard("get_user_by_id"):
            return self.db.get(User, user_id)


def get_store(db: Session = Depends(get_db)) -> ClientStore:
    return ClientStore(db)
