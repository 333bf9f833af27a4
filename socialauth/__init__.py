# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential authentication and server-side session service."""

__version__ = "0.1.0"
