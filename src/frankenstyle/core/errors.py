"""
Error types for Frankenstyle graph loading, ordering, and CSS resolution.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class FrankenstyleError(Exception):
    """Base exception for all Frankenstyle errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class GraphBuildError(FrankenstyleError):
    """
    Raised when the dependency graph cannot be built.

    Examples:
    - A package depends on a package that is not installed
    - Two packages share the same identifier
    """

    def __init__(
        self,
        message: str,
        package: str | None = None,
        dependency: str | None = None,
    ):
        self.package = package
        self.dependency = dependency
        super().__init__(message)


class CycleDetectedError(FrankenstyleError):
    """
    Raised when no topological order exists.

    The ``cycle`` attribute holds the offending path, first node repeated
    at the end (e.g. ``["a", "b", "a"]``).
    """

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")


class FragmentNotFoundError(FrankenstyleError):
    """Raised when a package in the graph has no CSS source."""

    def __init__(self, package_id: str, message: str | None = None):
        self.package_id = package_id
        super().__init__(message or f"No CSS source found for package '{package_id}'")


class ConfigError(FrankenstyleError):
    """
    Raised when a manifest or package descriptor cannot be loaded.

    Examples:
    - Malformed TOML
    - Unknown url style
    - Non-positive worker count
    """

    pass


@dataclass
class ErrorContext:
    """
    Location of a configuration error.

    Attributes:
        file: Path to the file that failed to load
        package: Optional package the file belongs to
    """

    file: Path
    package: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "packages/brakes/package.toml in package brakes"
        """
        location = str(self.file)
        if self.package:
            location += f" in package {self.package}"
        return location


def make_config_error(
    message: str,
    file: Path | None = None,
    package: str | None = None,
) -> ConfigError:
    """
    Helper to create a ConfigError with optional file context.

    Args:
        message: Error description
        file: Optional path of the offending file
        package: Optional package name

    Returns:
        ConfigError with context if a file was provided
    """
    if file is not None:
        return ConfigError(message, ErrorContext(file=file, package=package))
    return ConfigError(message)


__all__ = [
    "FrankenstyleError",
    "GraphBuildError",
    "CycleDetectedError",
    "FragmentNotFoundError",
    "ConfigError",
    "ErrorContext",
    "make_config_error",
]
