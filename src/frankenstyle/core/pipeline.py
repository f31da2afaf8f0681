"""
Stylesheet build pipeline.

Stages, each a plain function of the previous stage's output:

1. Graph loading (whitelist filtering, dangling reference checks)
2. Topological ordering (cycle detection)
3. Fragment resolution (through the fragment cache, optionally threaded)
4. Assembly

Any failure aborts the build; no partial stylesheet is returned.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable

from .assembler import assemble
from .cache import FragmentCache, make_fragment_cache
from .fragments import FragmentResolver
from .graph import load_graph
from .models import AssemblyConfig, AssemblyResult, CssFragment, PackageDescriptor
from .ordering import order_packages

logger = logging.getLogger(__name__)


class StylesheetBuilder:
    """
    Builds dependency-ordered stylesheets.

    The fragment cache lives as long as the builder, so repeated builds of
    unchanged packages are served from it when caching is enabled.
    """

    def __init__(self, config: AssemblyConfig | None = None, cache: FragmentCache | None = None):
        self.config = config or AssemblyConfig()
        self.cache = cache if cache is not None else make_fragment_cache(self.config)

    def build(self, packages: Iterable[PackageDescriptor]) -> AssemblyResult:
        """
        Build the stylesheet for a set of installed packages.

        Args:
            packages: Installed packages

        Returns:
            AssemblyResult with the order, fragments, and CSS text

        Raises:
            GraphBuildError: If a kept package depends on a missing package
            CycleDetectedError: If the dependency graph has a cycle
            FragmentNotFoundError: If an ordered package has no CSS
        """
        installed = list(packages)
        graph = load_graph(installed, self.config.whitelist)
        order = order_packages(graph)

        resolver = FragmentResolver(installed, self.cache)
        hits_before = self.cache.hits
        fragments = self._resolve_all(resolver, order)
        cache_hits = self.cache.hits - hits_before

        css = assemble(fragments, self.config.url_style)
        logger.debug(
            "Assembled %d fragments (%d from cache), graph %s",
            len(fragments),
            cache_hits,
            graph.fingerprint()[:12],
        )

        return AssemblyResult(
            order=tuple(order),
            fragments=tuple(fragments),
            css=css,
            cache_hits=cache_hits,
            fingerprint=graph.fingerprint(),
        )

    def _resolve_all(self, resolver: FragmentResolver, order: list[str]) -> list[CssFragment]:
        if self.config.workers <= 1 or len(order) <= 1:
            return [resolver.resolve(package_id) for package_id in order]

        # Results are keyed by package id and re-read in graph order, never in
        # completion order.
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            futures = {
                package_id: pool.submit(resolver.resolve, package_id) for package_id in order
            }
            resolved = {package_id: future.result() for package_id, future in futures.items()}
        return [resolved[package_id] for package_id in order]


def build_stylesheet(
    packages: Iterable[PackageDescriptor], config: AssemblyConfig | None = None
) -> str:
    """
    Build a stylesheet in one call.

    Args:
        packages: Installed packages
        config: Build options (defaults: no cache, literal urls, no whitelist)

    Returns:
        CSS text, one rule per package per line, dependencies first
    """
    return StylesheetBuilder(config).build(packages).css


__all__ = ["StylesheetBuilder", "build_stylesheet"]
