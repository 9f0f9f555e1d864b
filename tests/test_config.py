"""Unit tests for core/config.py -- Settings validation.

Settings(...) keyword arguments take precedence over environment variables,
so these tests do not depend on the DEBUG=true set in conftest.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings

_KEY = "k" * 32


def test_debug_generates_secret() -> None:
    settings = Settings(debug=True, secret_key="")
    assert len(settings.secret_key) >= 32


def test_production_requires_secret() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(debug=False, secret_key="")


def test_short_secret_rejected() -> None:
    with pytest.raises(ValidationError, match="at least 32"):
        Settings(debug=False, secret_key="short")


def test_defaults() -> None:
    settings = Settings(debug=False, secret_key=_KEY)
    assert settings.token_expire_seconds == 3600
    assert settings.bcrypt_rounds == 12


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_range(rounds: int) -> None:
    with pytest.raises(ValidationError, match="BCRYPT_ROUNDS"):
        Settings(secret_key=_KEY, bcrypt_rounds=rounds)


def test_token_lifetime_must_be_positive() -> None:
    with pytest.raises(ValidationError, match="TOKEN_EXPIRE_SECONDS"):
        Settings(secret_key=_KEY, token_expire_seconds=0)
