"""Utility helpers for the repair intake backend."""

from .ids import millis_to_iso, monotonic_millis, to_base36

__all__ = [
    "millis_to_iso",
    "monotonic_millis",
    "to_base36",
]
