import os
import shutil
import tempfile
from datetime import timedelta
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_accounts.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SMTP_HOST"] = "localhost"
os.environ["SMTP_PORT"] = "2525"
os.environ["SMTP_USE_TLS"] = "false"
os.environ["SMTP_FROM_EMAIL"] = "My App <info@my-app.com>"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp()
os.environ["PROFILE_DIR"] = "profile"

import aiosmtplib
import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from accounts.core.security import get_password_hash
from accounts.db.models.user import User as UserModel
from accounts.main import app
from accounts.services.file import create_folders
from accounts.services.token import TokenService

ROOT_DIR = Path(__file__).resolve().parent.parent

ACTIVE_USER = {
    "username": "user1",
    "email": "user1@mail.com",
    "password": "P4ssword",
}


@pytest.fixture(scope="function")
def engine():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    try:
        yield test_engine
    finally:
        test_engine.dispose()
        # Remove the database file together with its WAL files
        shutil.rmtree(temp_db_dir, ignore_errors=True)


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from accounts.api.deps import get_db

    create_folders()
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


class MailRecorder:
    """Stands in for the SMTP server: keeps sent messages or rejects them."""

    def __init__(self):
        self.messages = []
        self.fail = False

    async def send(self, message, **kwargs):
        if self.fail:
            raise aiosmtplib.SMTPResponseException(553, "Invalid mailbox")
        self.messages.append(message)
        return {}, "OK"

    @property
    def last(self) -> str:
        return self.messages[-1].as_string()


@pytest.fixture(autouse=True)
def mail(monkeypatch) -> MailRecorder:
    recorder = MailRecorder()
    monkeypatch.setattr(aiosmtplib, "send", recorder.send)
    return recorder


@pytest.fixture(scope="function")
def tokens(db: Session) -> TokenService:
    return TokenService(db, expire_after=timedelta(days=7))


def add_user(db: Session, **overrides) -> UserModel:
    """Insert a user directly, active unless told otherwise."""
    data = {**ACTIVE_USER, "active": True, **overrides}
    user = UserModel(
        username=data["username"],
        email=data["email"],
        password_hash=get_password_hash(data["password"]),
        active=data["active"],
        activation_token=data.get("activation_token"),
        password_reset_token=data.get("password_reset_token"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def active_user(db: Session) -> UserModel:
    return add_user(db)


@pytest.fixture(scope="function")
def inactive_user(db: Session) -> UserModel:
    return add_user(db, active=False, activation_token="activation-token")
