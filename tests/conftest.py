"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

ROOT = Path(__file__).resolve().parents[1]

# Add project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if str(ROOT / "tests") not in sys.path:
    sys.path.insert(0, str(ROOT / "tests"))

# Set test environment variables before importing the app
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("AUTH_JWT_SECRET", "unit-test-secret")
os.environ.setdefault("AUTH_ALGORITHMS", "HS256")
for _name in ("EMAIL_USERNAME", "EMAIL_PASSWORD", "GMAIL_USER", "GMAIL_PASS"):
    os.environ.pop(_name, None)

from fakes import (  # noqa: E402
    FakeAccountRepository,
    FakeTransactionRepository,
    RecordingTransport,
)
from wallet_admin.notifications.dispatcher import NotificationDispatcher  # noqa: E402
from wallet_admin.notifications.fanout import AdminNotifier  # noqa: E402
from wallet_admin.notifications.transport import MailTransportHandle  # noqa: E402
from wallet_admin.services.transaction_service import TransactionService  # noqa: E402

ADMIN_URL = "http://admin.test/admin"
SENDER = '"QFS Wallet" <noreply@qfs-wallet.com>'


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Clear cached settings around each test."""
    from wallet_admin.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Drop structlog config bound to a test's captured (now closed) stdout."""
    import structlog

    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_session():
    """Session stand-in; repositories are replaced by fakes."""
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    return session


@pytest.fixture
def accounts() -> FakeAccountRepository:
    return FakeAccountRepository()


@pytest.fixture
def transactions() -> FakeTransactionRepository:
    return FakeTransactionRepository()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def transport_handle(transport) -> MailTransportHandle:
    handle = MailTransportHandle()
    handle.replace(transport)
    return handle


@pytest.fixture
def dispatcher(transport_handle) -> NotificationDispatcher:
    return NotificationDispatcher(transport_handle, sender=SENDER, admin_url=ADMIN_URL)


@pytest.fixture
def notifier(accounts, dispatcher) -> AdminNotifier:
    return AdminNotifier(directory=accounts, dispatcher=dispatcher)


@pytest.fixture
def admin(accounts) -> dict:
    return accounts.add(email="admin@example.com", role="admin", first_name="Ada")


@pytest.fixture
def make_service(mock_session, notifier, accounts, transactions):
    """Build a TransactionService wired to in-memory repositories."""

    def _make(notify_on_rejection: bool = False) -> TransactionService:
        service = TransactionService(
            mock_session, notifier, notify_on_rejection=notify_on_rejection
        )
        service.accounts = accounts
        service.transactions = transactions
        return service

    return _make


@pytest.fixture
def funded_user(accounts) -> dict:
    return accounts.add(
        email="alice@example.com",
        first_name="Alice",
        last_name="Doe",
        balance=Decimal("150"),
    )
