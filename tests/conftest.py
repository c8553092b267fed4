"""Shared fixtures and Hypothesis settings for the pbt test-suite.

Hypothesis drives the meta-properties (shrinkers terminate, sources replay);
the engine under test drives everything else with fixed seeds.
"""

import os

import pytest
from hypothesis import HealthCheck, settings

from pbt.checker import CheckConfig
from pbt.registry import default_registry

settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

settings.register_profile(
    "ci",
    max_examples=50,
    deadline=None,
    derandomize=True,
    suppress_health_check=[HealthCheck.too_slow],
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci" if os.environ.get("CI") else "default"))


@pytest.fixture
def registry():
    """A fresh registry, so registrations never leak between tests."""
    return default_registry()


@pytest.fixture
def config():
    return CheckConfig(seed=20240601)
