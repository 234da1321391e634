import os

# Keep the module-level engine off the developer's database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.bootstrap import seed_admin
from app.config import Settings, get_settings
from app.database import Base, get_db, init_db, make_engine
from app.main import app
from app.store import ClientStore

ADMIN_EMAIL = "admin@local"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    sess = session_factory()
    try:
        yield sess
    finally:
        sess.close()


@pytest.fixture
def store(db):
    return ClientStore(db)


@pytest.fixture
def settings():
    return Settings(
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        demo_mode=False,
    )


@pytest.fixture
def client(session_factory, settings):
    """API client on a fresh in-memory database with the admin seeded."""
    sess = session_factory()
    try:
        seed_admin(ClientStore(sess), settings.admin_email, settings.admin_password)
    finally:
        sess.close()

    def override_get_db():
        sess = session_factory()
        try:
            yield sess
        finally:
            sess.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    response = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
