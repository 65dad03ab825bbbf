# SPDX-License-Identifier: Apache-2.0
"""
Jolt SDK Tests

Unit tests for the Jolt codec (sigils, scalars, containers, graph entities,
ambiguity resolution), golden wire samples, wire-shape schemas and the CLI.
"""
