"""Core Frankenstyle functionality: graph loading, ordering, fragments, caching, assembly."""

from .assembler import apply_url_style, assemble
from .cache import (
    DiskFragmentCache,
    FragmentCache,
    MemoryFragmentCache,
    NullFragmentCache,
    fragment_cache_key,
    make_fragment_cache,
)
from .errors import (
    ConfigError,
    CycleDetectedError,
    FragmentNotFoundError,
    FrankenstyleError,
    GraphBuildError,
)
from .fragments import FragmentResolver
from .graph import DependencyGraph, load_graph
from .models import (
    AssemblyConfig,
    AssemblyResult,
    CssFragment,
    PackageDescriptor,
    UrlStyle,
)
from .ordering import order_packages
from .pipeline import StylesheetBuilder, build_stylesheet

__all__ = [
    "FrankenstyleError",
    "GraphBuildError",
    "CycleDetectedError",
    "FragmentNotFoundError",
    "ConfigError",
    "PackageDescriptor",
    "CssFragment",
    "AssemblyConfig",
    "AssemblyResult",
    "UrlStyle",
    "DependencyGraph",
    "load_graph",
    "order_packages",
    "FragmentResolver",
    "FragmentCache",
    "NullFragmentCache",
    "MemoryFragmentCache",
    "DiskFragmentCache",
    "fragment_cache_key",
    "make_fragment_cache",
    "apply_url_style",
    "assemble",
    "StylesheetBuilder",
    "build_stylesheet",
]
