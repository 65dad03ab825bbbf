# jolt_sdk/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""
Jolt SDK

Encode property-graph values (scalars, temporal and spatial values, nodes,
relationships and paths) as self-describing tagged JSON, and decode them back.

    from jolt_sdk import JoltCodec

    codec = JoltCodec("strict")
    codec.encode(["A", 21, 42.3])
    # '{"[]":[{"U":"A"},{"Z":"21"},{"R":"42.3"}]}'
"""

from jolt_sdk.jolt import *  # noqa: F401,F403
from jolt_sdk.jolt import __all__ as _jolt_all

__version__ = "1.0.0"

__all__ = ["__version__", *_jolt_all]
