# jolt_sdk/core/__init__.py
# SPDX-License-Identifier: Apache-2.0
"""Cross-cutting helpers shared by the codec and the CLI."""

from .error_context import attach_context, clear_context, get_context, has_context

__all__ = [
    "attach_context",
    "get_context",
    "has_context",
    "clear_context",
]
