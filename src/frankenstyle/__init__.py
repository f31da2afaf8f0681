"""
Frankenstyle - dependency-ordered CSS bundling for component packages.

Concatenates each package's CSS into a single stylesheet so that no package's
rules precede those of a package it depends on.
"""

from __future__ import annotations

from ._version import get_version
from .core import (
    AssemblyConfig,
    CycleDetectedError,
    FragmentNotFoundError,
    FrankenstyleError,
    GraphBuildError,
    PackageDescriptor,
    UrlStyle,
    build_stylesheet,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "AssemblyConfig",
    "PackageDescriptor",
    "UrlStyle",
    "build_stylesheet",
    "FrankenstyleError",
    "GraphBuildError",
    "CycleDetectedError",
    "FragmentNotFoundError",
]
