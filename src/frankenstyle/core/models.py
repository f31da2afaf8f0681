"""
Value types for the CSS assembly pipeline.

Everything here is immutable: packages are discovered once, fragments are
produced once, and neither is mutated afterwards.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UrlStyle(StrEnum):
    """How rewritten asset references are written into the stylesheet."""

    LITERAL = "literal"  # url('brakes/brakes.png')
    HELPER = "helper"  # asset-url('brakes/brakes.png'), for the Rails asset pipeline


class PackageDescriptor(BaseModel):
    """
    An installed package as seen by the assembler.

    Attributes:
        id: Package identifier, unique within a project
        dependencies: Declared dependency identifiers, in declared order
        css: CSS source content, or None if the package ships no stylesheet
        asset_dir: Directory holding the package's static assets
    """

    id: str
    dependencies: tuple[str, ...] = ()
    css: str | None = None
    asset_dir: Path | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure the package id is non-empty."""
        if not v.strip():
            raise ValueError("package id cannot be empty")
        return v

    @field_validator("dependencies")
    @classmethod
    def dedupe_dependencies(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Collapse repeated dependencies, keeping the first occurrence."""
        return tuple(dict.fromkeys(v))


class CssFragment(BaseModel):
    """
    The CSS attributed to a single package.

    Attributes:
        package_id: Package the rule belongs to
        text: Rule text with relative urls rewritten under ``<package_id>/``
        asset_urls: Rewritten asset paths, in order of appearance
    """

    package_id: str
    text: str
    asset_urls: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class AssemblyConfig(BaseModel):
    """
    Options for a stylesheet build.

    Attributes:
        cached: Reuse previously resolved fragments for unchanged packages
        url_style: Literal ``url()`` or the ``asset-url()`` helper
        whitelist: Packages to include (with their dependencies); None means all
        workers: Number of threads used to resolve fragments
        cache_dir: Persist the fragment cache here (only used when cached)
    """

    cached: bool = False
    url_style: UrlStyle = UrlStyle.LITERAL
    whitelist: frozenset[str] | None = None
    workers: int = Field(default=1, ge=1)
    cache_dir: Path | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("whitelist")
    @classmethod
    def empty_whitelist_is_none(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        """An empty whitelist filters nothing."""
        return v or None


class AssemblyResult(BaseModel):
    """
    Output of a stylesheet build.

    Attributes:
        order: Package ids in dependency order
        fragments: Resolved fragments, parallel to ``order``
        css: The assembled stylesheet
        cache_hits: Fragments served from the cache during this build
        fingerprint: Structural fingerprint of the dependency graph
    """

    order: tuple[str, ...]
    fragments: tuple[CssFragment, ...]
    css: str
    cache_hits: int = 0
    fingerprint: str

    model_config = ConfigDict(frozen=True)


__all__ = [
    "UrlStyle",
    "PackageDescriptor",
    "CssFragment",
    "AssemblyConfig",
    "AssemblyResult",
]
