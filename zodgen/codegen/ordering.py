"""Ordering of generated models within one entity."""

import heapq
import logging
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


def strongly_connected_components(graph: Mapping[str, set[str]]) -> dict[str, int]:
    """Label every node with the id of its strongly connected component.

    Iterative Tarjan, so long reference chains do not hit the recursion limit.
    Edges to nodes outside ``graph`` must already be removed.
    """
    index: dict[str, int] = {}
    low: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    component: dict[str, int] = {}

    def visit(node: str) -> None:
        index[node] = low[node] = len(index)
        stack.append(node)
        on_stack.add(node)

    for root in sorted(graph):
        if root in index:
            continue
        visit(root)
        work = [(root, iter(sorted(graph[root])))]
        while work:
            node, successors = work[-1]
            for successor in successors:
                if successor not in index:
                    visit(successor)
                    work.append((successor, iter(sorted(graph[successor]))))
                    break
                if successor in on_stack:
                    low[node] = min(low[node], index[successor])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] == index[node]:
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component[member] = index[node]
                        if member == node:
                            break
    return component


def order_models(dependencies: Mapping[str, Sequence[str]]) -> list[str]:
    """Order models so that a model follows the siblings it references.

    Models with no dependency on a sibling come first, sorted by name. The
    rest follow in topological order, taking the smallest ready name each
    time. When only cycles remain, the smallest name on a cycle whose unmet
    dependencies all lie inside that cycle is emitted next, so mutual
    references never fail and models that merely use a cycle still follow it.

    Args:
        dependencies: Model name to the names it references. References to
            names outside the mapping, and self references, are ignored.

    Returns:
        Every model name exactly once.

    Example:
        >>> order_models({'Order': ['Line'], 'Line': ['Product'], 'Product': []})
        ['Product', 'Line', 'Order']
    """
    members = set(dependencies)
    depends_on: dict[str, set[str]] = {
        name: {ref for ref in refs if ref in members and ref != name}
        for name, refs in dependencies.items()
    }
    component = strongly_connected_components(depends_on)

    independent = sorted(name for name, refs in depends_on.items() if not refs)
    ordered: list[str] = list(independent)
    placed = set(independent)

    dependents: dict[str, set[str]] = {name: set() for name in members}
    remaining: dict[str, int] = {}
    for name, refs in depends_on.items():
        if name in placed:
            continue
        unresolved = refs - placed
        remaining[name] = len(unresolved)
        for ref in unresolved:
            dependents[ref].add(name)

    ready = [name for name, count in remaining.items() if count == 0]
    heapq.heapify(ready)

    def place(name: str) -> None:
        ordered.append(name)
        placed.add(name)
        del remaining[name]
        for dependent in dependents[name]:
            if dependent in remaining:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, dependent)

    def breaks_cycle(name: str) -> bool:
        return all(
            component[ref] == component[name]
            for ref in depends_on[name]
            if ref not in placed
        )

    while remaining:
        if ready:
            name = heapq.heappop(ready)
            if name in remaining:
                place(name)
            continue
        name = min(name for name in remaining if breaks_cycle(name))
        logger.debug('Dependency cycle; placing %s before its dependencies', name)
        place(name)

    return ordered
