"""
Topological ordering of the package graph.

Depth-first, post-order: a package is emitted only after all of its
dependencies. Roots are visited in graph insertion order and dependencies in
declared order, so independent packages appear in the order the traversal
first reaches them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import CycleDetectedError
from .graph import DependencyGraph

logger = logging.getLogger(__name__)

_VISITING = 1
_DONE = 2


def order_packages(graph: DependencyGraph) -> list[str]:
    """
    Order packages so every dependency precedes its dependents.

    Args:
        graph: Dependency graph to order

    Returns:
        Package ids, each exactly once, dependencies first

    Raises:
        CycleDetectedError: If the graph contains a cycle (including a package
            that depends on itself)

    Example:
        drums, calipers -> brakes -> delorean <- mr-fusion
        visiting delorean first gives [drums, calipers, brakes, mr-fusion, delorean]
    """
    state: dict[str, int] = {}
    ordered: list[str] = []

    for root in graph:
        if root in state:
            continue

        # Explicit stack of (node, remaining dependencies) keeps deep chains
        # clear of the recursion limit.
        state[root] = _VISITING
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(graph.dependencies(root)))]

        while stack:
            node, pending = stack[-1]
            for dep in pending:
                mark = state.get(dep)
                if mark is None:
                    state[dep] = _VISITING
                    stack.append((dep, iter(graph.dependencies(dep))))
                    break
                if mark == _VISITING:
                    path = [name for name, _ in stack]
                    raise CycleDetectedError(path[path.index(dep) :] + [dep])
            else:
                stack.pop()
                state[node] = _DONE
                ordered.append(node)

    logger.debug("Package order: %s", ", ".join(ordered))
    return ordered


__all__ = ["order_packages"]
