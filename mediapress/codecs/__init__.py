"""Codec capability detection."""

from .capabilities import (
    CapabilityProvider,
    PillowCapabilityProber,
    StaticCapabilities,
    default_capabilities,
    probe,
)

__all__ = [
    "CapabilityProvider",
    "PillowCapabilityProber",
    "StaticCapabilities",
    "default_capabilities",
    "probe",
]
