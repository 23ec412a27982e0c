"""
DoseTrack Test Suite
====================

This package contains all tests for the DoseTrack medication adherence backend.

Test Structure:
- test_tools/: Schedule derivation and adherence computation unit tests
- test_services/: Service tests against an in-memory SQLite database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_api/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_USER_EMAIL = "jane.doe@example.com"

__all__ = [
    "TEST_DATABASE_URL",
    "TEST_USER_EMAIL",
]
