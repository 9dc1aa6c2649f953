"""Shared fixtures for blog_relations tests."""
import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache."""
    cache.clear()
    yield
    cache.clear()
