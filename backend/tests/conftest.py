"""Shared test configuration, pytest markers and Supabase mock helpers."""

from unittest.mock import MagicMock

import pytest

from api.router import limiter


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls the real Gemini API (needs GEMINI_API_KEY)"
    )


@pytest.fixture(autouse=True)
def _no_rate_limit():
    """The extract endpoint is rate limited per client IP; every test shares one."""
    limiter.enabled = False
    yield
    limiter.enabled = True


def make_execute(data=None, error=None):
    """Build a fake .execute() return value with .data and optional .error."""
    result = MagicMock()
    result.data = data if data is not None else []
    if error is not None:
        result.error = error
    else:
        # getattr(result, "error", None) must return None
        del result.error
    return result


def make_table(*results):
    """A fake ``client.table(name)`` whose every query chain returns *results* in turn.

    Filter/modifier calls (select, eq, in_, limit, update) return the same
    builder, so any chain ending in .execute() pops the next result.
    """
    builder = MagicMock()
    for method in ("select", "eq", "in_", "limit", "update"):
        getattr(builder, method).return_value = builder
    builder.execute.side_effect = list(results)
    return builder


def make_client(**tables):
    """A fake Supabase client routing ``client.table(name)`` to per-table builders."""
    client = MagicMock()
    client.table.side_effect = lambda name: tables[name]
    return client
