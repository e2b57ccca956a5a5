# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Flowva: email/password accounts, signed cookie sessions and onboarding."""

__version__ = "0.1.0"
