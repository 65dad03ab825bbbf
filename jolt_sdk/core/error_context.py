# jolt_sdk/core/error_context.py
# SPDX-License-Identifier: Apache-2.0

"""
Error context utilities.

Helpers for attaching debugging context to exceptions as they leave the codec
(or the CLI) without touching their type or message. Downstream handlers read
the context back to log or aggregate failures.

Typical usage
-------------

    from jolt_sdk.core.error_context import attach_context

    try:
        value = codec.decode(text, kind="duration")
    except JoltError as exc:
        attach_context(exc, component="codec", operation="decode", mode="strict")
        raise

Later, in error handlers:

    except Exception as exc:
        context = get_context(exc)
        logger.error("decode failed", extra={"operation": context.get("operation")})

Two attributes carry the same mapping:

* ``__jolt_context__`` (canonical), and
* ``__<component>_context__`` (e.g. ``__codec_context__``, ``__cli_context__``).

Multiple calls merge contexts rather than overwriting them, so several layers
can contribute. Attachment is best-effort and never masks the original
exception.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping, Optional

logger = logging.getLogger(__name__)

CANONICAL_ATTR = "__jolt_context__"


def _component_attr(component: str) -> str:
    return f"__{component}_context__"


def attach_context(
    exc: BaseException,
    component: str,
    **context: Any,
) -> None:
    """
    Attach debugging context to an exception.

    Parameters
    ----------
    exc:
        The exception to enrich.

    component:
        Origin of this context ("codec", "cli", ...). Stored under the
        ``component`` key (first writer wins) and used to build the
        component-specific attribute name.

    **context:
        Arbitrary keys, e.g. ``operation``, ``mode``, ``requested_kind``.
        Payload text should not be attached; error ``details`` already carry
        what is safe to log.
    """
    try:
        merged_context: MutableMapping[str, Any] = {}

        existing = getattr(exc, CANONICAL_ATTR, None)
        if isinstance(existing, Mapping):
            merged_context.update(existing)

        merged_context.setdefault("component", component)
        merged_context.update(context)

        setattr(exc, CANONICAL_ATTR, merged_context)
        setattr(exc, _component_attr(component), merged_context)

    except Exception as attachment_error:  # noqa: BLE001
        # Context attachment must never interfere with exception propagation.
        logger.debug(
            "Failed to attach error context to %s: %s",
            type(exc).__name__,
            attachment_error,
            extra={"component": component},
        )


def get_context(
    exc: BaseException,
    *,
    component: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Retrieve attached context, or an empty dict if there is none.

    With ``component`` the component-specific attribute is tried first.
    """
    names = [CANONICAL_ATTR]
    if component:
        names.insert(0, _component_attr(component))
    for name in names:
        ctx = getattr(exc, name, None)
        if isinstance(ctx, Mapping):
            return ctx
    return {}


def has_context(
    exc: BaseException,
    *,
    component: Optional[str] = None,
) -> bool:
    return len(get_context(exc, component=component)) > 0


def clear_context(
    exc: BaseException,
    *,
    component: Optional[str] = None,
) -> None:
    """Remove attached context (useful in tests or before serialization)."""
    names = [CANONICAL_ATTR]
    if component:
        names.append(_component_attr(component))
    for name in names:
        if hasattr(exc, name):
            try:
                delattr(exc, name)
            except AttributeError:
                logger.debug("Failed to clear %s on %s", name, type(exc).__name__)


__all__ = [
    "attach_context",
    "get_context",
    "has_context",
    "clear_context",
]
