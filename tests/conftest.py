"""Root-level pytest fixtures for the airmonitor test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus small in-memory monitors. No test touches the network.
"""

import pytest

from airmonitor.monitor import Monitor
from airmonitor.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_tables import make_data, make_meta


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_retries(make_config):
    ...     config = make_config(RETRIES=5)
    ...     assert config.fetch.retries == 5
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Monitor Fixtures
# =============================================================================

@pytest.fixture
def make_monitor(internal_config):
    """Factory fixture: ``make_monitor({"a": [1, 2], ...}, start=..., **meta_columns)``."""
    def _make(values, start="2024-01-01 00:00", **meta_columns):
        ids = list(values)
        return Monitor(
            make_meta(ids, **meta_columns),
            make_data(values, start=start),
            config=internal_config,
        )

    return _make


@pytest.fixture
def three_monitor(make_monitor):
    """Three series over six hours: full, partly missing, all missing."""
    return make_monitor(
        {
            "a": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
            "b": [10.0, None, 30.0, None, None, None],
            "c": [None] * 6,
        },
        stateCode=["CA", "OR", "CA"],
    )
