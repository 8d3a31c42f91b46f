# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    students: Student provisioning endpoint.
    auth: Activation invite endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import auth, students

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
