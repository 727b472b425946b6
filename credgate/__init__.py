# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential issuance and validation service."""

__version__ = "0.1.0"
