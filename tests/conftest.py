"""
Pytest configuration and shared fixtures for DocVault tests.

This module provides:
- Subjects for every role
- Authorization providers
- Fresh, isolated document stores with a controllable clock
"""

from datetime import datetime, timedelta, timezone

import pytest

from docvault.auth.provider import LocalRuleProvider
from docvault.auth.rules import RulePolicy
from docvault.auth.types import Role, Subject
from docvault.auth.users import UserDirectory
from docvault.config import AppConfig
from docvault.documents.notifications import ChangeNotifier
from docvault.documents.store import DocumentStore
from docvault.gateway import DocumentGateway

TEST_SECRET_KEY = "test_secret_key_for_testing_only_" + "x" * 32
TEST_PASSWORD = "test-password"


# ============================================================================
# SUBJECTS
# ============================================================================


@pytest.fixture
def admin() -> Subject:
    return Subject(id="admin-id", role=Role.ADMIN)


@pytest.fixture
def editor() -> Subject:
    return Subject(id="user-id", role=Role.EDITOR)


@pytest.fixture
def other_editor() -> Subject:
    return Subject(id="other-editor-id", role=Role.EDITOR)


@pytest.fixture
def viewer() -> Subject:
    return Subject(id="viewer-id", role=Role.VIEWER)


# ============================================================================
# CLOCK
# ============================================================================


class FakeClock:
    """Deterministic clock; every call advances one second."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# SERVICES
# ============================================================================


@pytest.fixture
def local_provider() -> LocalRuleProvider:
    return LocalRuleProvider()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def store(local_provider, notifier, clock) -> DocumentStore:
    """A seeded store backed by the local rule table."""
    return DocumentStore(local_provider, notifier=notifier, clock=clock)


@pytest.fixture
def empty_store(local_provider, notifier, clock) -> DocumentStore:
    """A store without seed documents."""
    return DocumentStore(local_provider, notifier=notifier, clock=clock, seed=False)


@pytest.fixture
def permissive_store(notifier, clock) -> DocumentStore:
    """A store whose editors may delete documents they do not own."""
    provider = LocalRuleProvider(policy=RulePolicy(editor_can_delete_unowned=True))
    return DocumentStore(provider, notifier=notifier, clock=clock)


@pytest.fixture
def directory() -> UserDirectory:
    return UserDirectory(password=TEST_PASSWORD, bcrypt_rounds=4)


@pytest.fixture
def gateway(store, directory, local_provider) -> DocumentGateway:
    return DocumentGateway(store, directory, local_provider)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        authz_provider="local",
        secret_key=TEST_SECRET_KEY,
        demo_password=TEST_PASSWORD,
        bcrypt_rounds=4,
    )


@pytest.fixture
def secret_key() -> str:
    return TEST_SECRET_KEY


@pytest.fixture
def password() -> str:
    return TEST_PASSWORD


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that drive the HTTP application")
