"""
tests/conftest.py -- Shared test fixtures for TaskGuard tests.

This module provides:
  - hasher / tokens: cheap PasswordHasher (rounds=4) and a TokenService with
    a per-fixture secret, for unit tests
  - user_store / task_store: isolated plain in-memory stores
  - _make_test_stores(): isolated named shared-memory DBs for API tests
  - _patch_lifespan(): wires test stores and services into app.state
  - api_client: TestClient plus tokens for an admin and two regular users

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
API tests because TestClient runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread.

The DEBUG env var must be set before any api/ import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import secrets
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Role, User
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from tasks.store import TaskStore

# bcrypt's minimum cost -- keeps the suite fast. Production uses Settings.bcrypt_rounds.
TEST_ROUNDS = 4


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def tokens() -> TokenService:
    """TokenService with a secret nobody else shares."""
    return TokenService(secret=secrets.token_hex(32))


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def task_store() -> Generator[TaskStore, None, None]:
    store = TaskStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def auth_service(user_store: UserStore, hasher: PasswordHasher, tokens: TokenService) -> AuthService:
    return AuthService(store=user_store, hasher=hasher, tokens=tokens)


# ---------------------------------------------------------------------------
# API helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, TaskStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    auth_url = f"sqlite:///file:test_auth_{db_suffix}?mode=memory&cache=shared&uri=true"
    tasks_url = f"sqlite:///file:test_tasks_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=auth_url), TaskStore(db_url=tasks_url)


def _patch_lifespan(user_store: UserStore, task_store: TaskStore, auth_service: AuthService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores and services into app.state so TestClient
    routes see isolated test DBs and a test-only signing secret.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.task_store = task_store
        app.state.tokens = auth_service.tokens
        app.state.auth_service = auth_service
        yield

    return test_lifespan


@dataclass
class ApiHarness:
    """Everything an API test needs: the client, the service and ready tokens.

    Users created up front:
      admin@example.com / adminpass (admin)
      alice@example.com / alicepass (user)
      bob@example.com   / bobpass   (user)
    """

    client: TestClient
    auth_service: AuthService
    secret: str
    admin_token: str
    alice_token: str
    bob_token: str
    alice_id: str


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiHarness, None, None]:
    """Yield an ApiHarness backed by module-private in-memory stores.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers, the real gate, and the real exception handlers.
    """
    user_store, task_store = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    secret = secrets.token_hex(32)
    service = AuthService(
        store=user_store,
        hasher=PasswordHasher(rounds=TEST_ROUNDS),
        tokens=TokenService(secret=secret),
    )

    users: dict[str, User] = {}
    for name, role in (("admin", Role.admin), ("alice", Role.user), ("bob", Role.user)):
        users[name] = service.register(f"{name}@example.com", f"{name}pass", role)

    app.router.lifespan_context = _patch_lifespan(user_store, task_store, service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiHarness(
            client=client,
            auth_service=service,
            secret=secret,
            admin_token=service.tokens.issue(users["admin"].subject_id, Role.admin),
            alice_token=service.tokens.issue(users["alice"].subject_id, Role.user),
            bob_token=service.tokens.issue(users["bob"].subject_id, Role.user),
            alice_id=users["alice"].subject_id,
        )

    user_store.close()
    task_store.close()
