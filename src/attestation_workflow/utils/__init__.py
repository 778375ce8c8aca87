"""Utility modules for the attestation workflow."""

from .clock import Clock, SystemClock
from .encoding import to_utf8_hex_bytes32
from .logging import configure_logging

__all__ = [
    "Clock",
    "SystemClock",
    "configure_logging",
    "to_utf8_hex_bytes32",
]
