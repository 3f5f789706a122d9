"""
Pytest configuration and shared fixtures for response_finalizer tests.
"""

import pytest

from response_finalizer.core.finalizer import ResponseFinalizer
from response_finalizer.models import ResponseContext


@pytest.fixture
def ctx() -> ResponseContext:
    """Provide a fresh, empty response context."""
    return ResponseContext()


@pytest.fixture
def finalizer() -> ResponseFinalizer:
    """Provide a finalizer with default configuration."""
    return ResponseFinalizer()
