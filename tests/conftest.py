import os
import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_funeralcover.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["FIRST_ADMIN_EMAIL"] = "admin@test.example.com"
os.environ["FIRST_ADMIN_PASSWORD"] = "AdminTest123!"
os.environ.pop("PAYMENT_WEBHOOK_SECRET", None)
os.environ.pop("SMTP_HOST", None)

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from funeralcover.main import app
from funeralcover.core.security import create_access_token
from funeralcover.errors import NotificationError
from funeralcover.schemas.user import UserRegister
from funeralcover.services.documents import LocalDocumentStorage

# Every test starts at this instant unless it moves the clock.
T0 = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock whose time only moves when a test moves it."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


class RecordingNotifier:
    """Notification sender that records messages instead of emailing them."""

    def __init__(self):
        self.fail = False
        self.reminders = []
        self.lapse_notices = []

    async def send_reminder(self, member, policy, arrears: Decimal) -> None:
        if self.fail:
            raise NotificationError(f"Reminder for policy {policy.id} not sent")
        self.reminders.append((member.id, policy.id, arrears))

    async def send_lapse_notice(self, member, policy, arrears: Decimal) -> None:
        if self.fail:
            raise NotificationError(f"Lapse notice for policy {policy.id} not sent")
        self.lapse_notices.append((member.id, policy.id, arrears))


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
        poolclass=None,  # Don't use connection pooling for SQLite
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema and seed data
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    try:
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        print(f"Migration failed: {e}")
        raise

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        try:
            if os.path.exists(test_db_path):
                os.remove(test_db_path)
            # Also remove WAL files
            for suffix in ["-wal", "-shm"]:
                wal_path = f"{test_db_path}{suffix}"
                if os.path.exists(wal_path):
                    os.remove(wal_path)
            if os.path.exists(temp_db_dir):
                os.rmdir(temp_db_dir)
        except Exception as e:
            print(f"Cleanup failed: {e}")


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture(scope="function")
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="function")
def storage(tmp_path) -> LocalDocumentStorage:
    return LocalDocumentStorage(tmp_path / "uploads")


@pytest.fixture(scope="function")
def client(db_session, clock, notifier, storage):
    """Create a test client with database, clock, notifier and storage overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from funeralcover.api.deps import get_clock, get_db, get_document_storage, get_notifier

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_document_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_user(db: Session, clock: FixedClock) -> dict:
    """The admin seeded by migration 002, with its trial restarted at the test clock."""
    from funeralcover.repositories.user import get_user_by_email
    from funeralcover.core.config import settings
    from funeralcover.services.account import start_trial

    user = get_user_by_email(db, settings.first_admin_email)
    if not user:
        raise RuntimeError("Admin user not found. Check migration 002.")
    start_trial(db, user.id, clock.now())

    return {
        "id": user.id,
        "email": user.email,
        "password": settings.first_admin_password,  # Plaintext password from env
        "role_id": user.role_id,
    }


@pytest.fixture(scope="function")
def admin_token(admin_user: dict) -> str:
    """Get JWT token for admin user."""
    token = create_access_token(data={"sub": admin_user["id"]})
    return token


@pytest.fixture(scope="function")
def agent_user(db: Session, clock: FixedClock) -> dict:
    """Register an agent user; their trial starts at the test clock."""
    from funeralcover.services.auth import register

    email = "agent@example.com"
    password = "AgentPass123!"
    user = register(
        db,
        UserRegister(name="Field Agent", email=email, password=password),
        clock.now(),
    )

    return {
        "id": user.id,
        "email": user.email,
        "password": password,
        "role_id": user.role_id,
    }


@pytest.fixture(scope="function")
def agent_token(agent_user: dict) -> str:
    """Get JWT token for agent user."""
    token = create_access_token(data={"sub": agent_user["id"]})
    return token


@pytest.fixture(scope="function")
def member(db: Session):
    from funeralcover.services.member import create_member

    return create_member(
        db,
        name="Thandi Mokoena",
        id_number="8001015009087",
        address="12 Church Street, Pretoria",
        email="thandi@example.com",
    )


@pytest.fixture(scope="function")
def policy(db: Session, member, clock: FixedClock):
    """An Active policy started at T0: premium 100.00 per period, cover 10000.00."""
    from funeralcover.services.policy import create_policy

    return create_policy(
        db,
        member_id=member.id,
        plan_type="Family",
        cover_level=Decimal("10000.00"),
        premium=Decimal("100.00"),
        now=clock.now(),
    )
