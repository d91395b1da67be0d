"""
Root pytest configuration for the Django project.

pytest-django reads DJANGO_SETTINGS_MODULE from pyproject.toml
(config.test_settings), so no manual django.setup() is needed here.
Project-wide fixtures live here; app-specific fixtures are defined in
each app's tests/conftest.py.
"""

import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty local-memory cache."""
    cache.clear()
    yield
    cache.clear()
