"""Core interfaces.

Structural contracts (Protocol) implemented by the adapters, so the
workflows can run against the real automation server or a test double.
"""
