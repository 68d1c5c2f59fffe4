"""Gatehouse - role and direct-grant authorization service."""

__version__ = "0.1.0"
