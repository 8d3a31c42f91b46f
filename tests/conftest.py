# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from typing import Any

import pytest


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def program_id() -> str:
    """Provide a sample program ID."""
    return "0b6f4f6e-8a43-4c61-9d1a-3f0a1b2c3d4e"


@pytest.fixture
def session_id() -> str:
    """Provide a sample academic session ID."""
    return "5a7e2b9c-1d3f-4e8a-b6c2-7d9e0f1a2b3c"


@pytest.fixture
def department_id() -> str:
    """Provide a sample department ID."""
    return "7c9d1e2f-3a4b-4c5d-8e6f-9a0b1c2d3e4f"


@pytest.fixture
def student_payload(program_id: str, session_id: str) -> dict[str, Any]:
    """Provide a valid fresh-admission request body."""
    return {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "Jane@X.com",
        "program_id": program_id,
        "session_id": session_id,
        "admission_type": "fresh",
    }
