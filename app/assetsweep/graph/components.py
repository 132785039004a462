"""Strongly connected components over id-keyed adjacency lists.

Tarjan's algorithm, written iteratively so that long dependency chains
cannot hit the interpreter recursion limit.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


def strongly_connected_components(
    nodes: Iterable[T],
    edges: Mapping[T, Sequence[T]],
) -> list[tuple[T, ...]]:
    """Compute the strongly connected components of a directed graph.

    Components are emitted in the order Tarjan's algorithm completes them
    (reverse topological order of the condensation). Members of a component
    keep the order in which they were first visited.

    Args:
        nodes: All graph nodes, in the order the search should start from.
        edges: Adjacency list; every target must itself be a node.

    Returns:
        List of components, each a tuple of member nodes.
    """
    index: dict[T, int] = {}
    low: dict[T, int] = {}
    stack: list[T] = []
    on_stack: set[T] = set()
    result: list[tuple[T, ...]] = []
    counter = 0

    for start in nodes:
        if start in index:
            continue

        # Each frame is (node, position of the next edge to explore)
        work: list[tuple[T, int]] = [(start, 0)]
        index[start] = low[start] = counter
        counter += 1
        stack.append(start)
        on_stack.add(start)

        while work:
            node, pos = work[-1]
            targets = edges.get(node, ())

            if pos < len(targets):
                work[-1] = (node, pos + 1)
                target = targets[pos]
                if target not in index:
                    index[target] = low[target] = counter
                    counter += 1
                    stack.append(target)
                    on_stack.add(target)
                    work.append((target, 0))
                elif target in on_stack:
                    low[node] = min(low[node], index[target])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])

            if low[node] == index[node]:
                component: list[T] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                component.reverse()
                result.append(tuple(component))

    return result


def cyclic_components(
    nodes: Iterable[T],
    edges: Mapping[T, Sequence[T]],
) -> list[tuple[T, ...]]:
    """Return only the components that contain a cycle.

    A component is cyclic when it has more than one member, or when its
    single member has an edge to itself.

    Args:
        nodes: All graph nodes.
        edges: Adjacency list.

    Returns:
        Cyclic components in discovery order.
    """
    cyclic: list[tuple[T, ...]] = []
    for component in strongly_connected_components(nodes, edges):
        if len(component) > 1:
            cyclic.append(component)
            continue
        (only,) = component
        if only in edges.get(only, ()):
            cyclic.append(component)
    return cyclic
