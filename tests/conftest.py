"""Shared pytest fixtures for exactcalc tests."""

from decimal import Decimal

import pytest

from exactcalc.core.config import PRECISION_ENV_VAR, ROUNDING_ENV_VAR


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep evaluator overrides in the caller's environment out of tests."""
    monkeypatch.delenv(PRECISION_ENV_VAR, raising=False)
    monkeypatch.delenv(ROUNDING_ENV_VAR, raising=False)


@pytest.fixture
def ab_bindings() -> dict[str, Decimal]:
    """Return the a/b bindings used across executor tests."""
    return {"a": Decimal("2.6"), "b": Decimal("5.7")}
