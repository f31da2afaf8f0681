"""
Dependency graph loading.

Builds the package graph from the installed set, optionally restricted to a
whitelist and everything the whitelisted packages require.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .errors import GraphBuildError
from .models import PackageDescriptor

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """
    Package id -> declared dependency ids.

    Node order is insertion order, which the orderer uses as its tie-break.
    Every dependency id is itself a node.
    """

    nodes: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __contains__(self, package_id: object) -> bool:
        return package_id in self.nodes

    def dependencies(self, package_id: str) -> tuple[str, ...]:
        return self.nodes[package_id]

    def edges(self) -> list[tuple[str, str]]:
        """Return (dependent, dependency) pairs."""
        return [(node, dep) for node, deps in self.nodes.items() for dep in deps]

    def fingerprint(self) -> str:
        """
        Compute a structural fingerprint of the graph.

        Returns:
            SHA-256 hash of the node list and edges, in node order
        """
        payload = [[node, list(deps)] for node, deps in self.nodes.items()]
        json_str = json.dumps(payload, separators=(",", ":"))
        return hashlib.sha256(json_str.encode()).hexdigest()


def _index_packages(packages: Iterable[PackageDescriptor]) -> dict[str, PackageDescriptor]:
    installed: dict[str, PackageDescriptor] = {}
    for package in packages:
        if package.id in installed:
            raise GraphBuildError(
                f"Duplicate package id '{package.id}' in the installed set",
                package=package.id,
            )
        installed[package.id] = package
    return installed


def _check_dependencies(
    package: PackageDescriptor, installed: dict[str, PackageDescriptor]
) -> None:
    for dep in package.dependencies:
        if dep not in installed:
            raise GraphBuildError(
                f"Package '{package.id}' depends on '{dep}', but '{dep}' is not installed. "
                f"Installed packages: {list(installed.keys())}",
                package=package.id,
                dependency=dep,
            )


def _required_closure(
    roots: list[str], installed: dict[str, PackageDescriptor]
) -> set[str]:
    """Collect roots and everything they transitively depend on."""
    required: set[str] = set()
    pending = list(roots)
    while pending:
        package_id = pending.pop()
        if package_id in required:
            continue
        required.add(package_id)
        package = installed[package_id]
        _check_dependencies(package, installed)
        pending.extend(dep for dep in package.dependencies if dep not in required)
    return required


def load_graph(
    packages: Iterable[PackageDescriptor],
    whitelist: Iterable[str] | None = None,
) -> DependencyGraph:
    """
    Build the dependency graph for a set of installed packages.

    Args:
        packages: Installed packages, in discovery order
        whitelist: Optional package ids to keep. Their transitive dependencies
            are kept too; every other package is pruned without error.

    Returns:
        DependencyGraph with nodes in installed order

    Raises:
        GraphBuildError: If an id is duplicated or a kept package depends on a
            package that is not installed
    """
    installed = _index_packages(packages)
    allowed = set(whitelist) if whitelist else set()

    if not allowed:
        for package in installed.values():
            _check_dependencies(package, installed)
        graph = DependencyGraph({pid: pkg.dependencies for pid, pkg in installed.items()})
        logger.debug("Loaded dependency graph with %d packages", len(graph))
        return graph

    missing = sorted(allowed - installed.keys())
    if missing:
        logger.warning("Whitelisted packages are not installed: %s", ", ".join(missing))

    roots = [pid for pid in installed if pid in allowed]
    required = _required_closure(roots, installed)

    pruned = [pid for pid in installed if pid not in required]
    if pruned:
        logger.debug("Pruned packages outside the whitelist: %s", ", ".join(pruned))

    graph = DependencyGraph(
        {pid: pkg.dependencies for pid, pkg in installed.items() if pid in required}
    )
    logger.debug(
        "Loaded dependency graph with %d of %d packages", len(graph), len(installed)
    )
    return graph


__all__ = ["DependencyGraph", "load_graph"]
