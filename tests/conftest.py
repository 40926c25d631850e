import inspect
import os
from unittest.mock import MagicMock

# The engine and cached settings are built at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin")
os.environ.setdefault("ENV_NAME", "test")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from ecohouse.auth.dependencies import get_current_account  # noqa: E402
from ecohouse.auth.service import (  # noqa: E402
    AuthResult,
    AuthSession,
    AuthUser,
    GoTrueAuthService,
    get_auth_service,
)
from ecohouse.core.settings import Settings, get_settings  # noqa: E402
from ecohouse.db.engine import enable_sqlite_foreign_keys, get_session  # noqa: E402
from ecohouse.main import app  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database with foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="account")
def account_fixture() -> AuthUser:
    """The authenticated account used by route tests."""
    return AuthUser(id="acct-head-1", email="head@example.com", email_confirmed=True)


@pytest.fixture(name="make_auth_result")
def make_auth_result_fixture():
    """Build AuthResult values; with_session=False mimics pending email confirmation."""

    def make(
        user_id: str = "acct-new-1",
        email: str = "new@example.com",
        with_session: bool = False,
    ) -> AuthResult:
        session = None
        if with_session:
            session = AuthSession(
                access_token="access-token",
                refresh_token="refresh-token",
                expires_in=3600,
            )
        return AuthResult(
            user=AuthUser(id=user_id, email=email, email_confirmed=with_session),
            session=session,
        )

    return make


@pytest.fixture(name="mock_auth")
def mock_auth_fixture(account: AuthUser):
    """Create a mock GoTrueAuthService."""
    mock_service = MagicMock(spec=GoTrueAuthService)
    mock_service.can_delete_users = True
    mock_service.get_user.return_value = account
    mock_service.delete_user.return_value = True
    return mock_service


@pytest.fixture(name="mock_settings")
def mock_settings_fixture():
    """Create mock settings."""
    return Settings(
        env_name="test",
        database_url="sqlite://",
        session_secret_key="test-secret-key",
        admin_username="admin",
        admin_password="admin",
        session_expires_days=5,
        auth_url="https://auth.example.test",
        auth_anon_key="anon-key",
        auth_service_role_key="service-role-key",
    )


@pytest.fixture(name="client")
def client_fixture(
    session: Session,
    account: AuthUser,
    mock_auth: MagicMock,
    mock_settings: Settings,
):
    """Create a test client with overridden dependencies."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_current_account] = lambda: account
    app.dependency_overrides[get_auth_service] = lambda: mock_auth
    app.dependency_overrides[get_settings] = lambda: mock_settings

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="unauthenticated_client")
def unauthenticated_client_fixture(
    session: Session,
    mock_auth: MagicMock,
    mock_settings: Settings,
):
    """Create a test client without the account override (auth failures)."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_auth_service] = lambda: mock_auth
    app.dependency_overrides[get_settings] = lambda: mock_settings

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
