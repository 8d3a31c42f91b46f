"""Registrar Backend.

School administration backend: admissions and student account provisioning
across the identity service, the profile store and the academic records store.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
