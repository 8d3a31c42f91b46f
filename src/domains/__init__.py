# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for Registrar.

This package contains domain services that encapsulate business logic.
Each domain module orchestrates operations across the stores and external
services it depends on.

Domains:
    auth: Token validation and caller authorization.
    provisioning: Student account provisioning and activation invites.
"""
