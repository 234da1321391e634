import pytest

import app.main as main
from app.models import User


@pytest.fixture
def boot(monkeypatch, session_factory):
    monkeypatch.setattr(main, "SessionLocal", session_factory)
    monkeypatch.setattr(main.settings, "admin_email", "boot@local")
    monkeypatch.setattr(main.settings, "admin_password", "boot-pass")
    return main.run_bootstrap


def test_bootstrap_seeds_admin_once(boot, db):
    boot()
    boot()
    assert db.query(User).filter(User.email == "boot@local").count() == 1


def test_seed_failure_is_logged_not_fatal(boot, monkeypatch, caplog):
    def broken_seed(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(main, "seed_admin", broken_seed)
    boot()
    assert "Admin seed error" in caplog.text


def test_seed_failure_is_fatal_when_required(boot, monkeypatch):
    def broken_seed(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(main, "seed_admin", broken_seed)
    monkeypatch.setattr(main.settings, "require_admin_seed", True)
    with pytest.raises(RuntimeError):
        boot()
