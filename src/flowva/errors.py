# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations


class FlowvaError(Exception):
    """Base class for errors reported back to the caller."""


class InputError(FlowvaError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class EmailAlreadyRegistered(FlowvaError):
    def __init__(self, email: str) -> None:
        super().__init__(f"Email already in use: {email}")
        self.email = email
