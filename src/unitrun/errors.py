"""Exceptions raised outside of test bodies."""
from __future__ import annotations


class UnitrunError(Exception):
    """Base class for errors that abort a run."""


class DiscoveryError(UnitrunError):
    """Raised when a location yields no runnable test cases."""


class NotFoundError(DiscoveryError):
    """Raised when the discovery path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


class ConfigError(UnitrunError):
    """Raised when a configuration file is missing or invalid."""
