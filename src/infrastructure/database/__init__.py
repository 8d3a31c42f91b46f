# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

This package provides the SQLAlchemy async connection pool. The SQL
adapters for the catalog and student records live in academic_records.

Example:
    from src.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Program))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    UniqueViolationError,
    check_database_connection,
    close_database,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
    is_unique_violation,
)

__all__ = [
    "DatabaseError",
    "UniqueViolationError",
    "check_database_connection",
    "close_database",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
    "is_unique_violation",
]
