"""Exception hierarchy raised by the check entrypoint."""

from __future__ import annotations


class CheckError(RuntimeError):
    """Base error for failures while checking a project."""


class ValidationError(CheckError):
    """Raised when the check options fail schema validation."""


class InputLoadError(CheckError):
    """Raised when a supplied input file cannot be read or parsed."""


class OfflineConfigError(CheckError):
    """Raised when offline mode is requested without its required inputs."""


class TreeTraversalError(CheckError):
    """Raised when a lockfile dependency tree has an unexpected shape."""


class TransportError(CheckError):
    """Raised when the remote check request fails."""


class ConfigError(CheckError):
    """Raised when the configuration file cannot be loaded or is invalid."""
