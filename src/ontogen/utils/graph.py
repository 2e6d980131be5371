#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Graph helpers operating on index-based arenas.

Nodes are identified by their position in an arena (a sorted list of
resources); edges are adjacency lists of indices. Nothing in here holds a
reference to an rdflib term, which keeps cycle handling free of aliasing.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

NodeT = TypeVar("NodeT", bound=Hashable)


@dataclass(frozen=True)
class Arena(Generic[NodeT]):
    """Directed graph over an ordered set of nodes.

    Attributes:
        nodes: Nodes in arena order. A node's index is its identity.
        adjacency: For each node index, the sorted indices of its successors.
    """

    nodes: tuple[NodeT, ...]
    adjacency: tuple[tuple[int, ...], ...]

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[NodeT],
        edges: Iterable[tuple[NodeT, NodeT]],
        *,
        key: Callable[[NodeT], Any] = str,
    ) -> Arena[NodeT]:
        """Build an arena from nodes and edges.

        Nodes are ordered by `key`. Edges with an endpoint outside `nodes`
        are ignored; self-loops are dropped.
        """
        ordered = tuple(sorted(set(nodes), key=key))
        index = {node: position for position, node in enumerate(ordered)}

        successors: list[set[int]] = [set() for _ in ordered]
        for source, target in edges:
            source_index = index.get(source)
            target_index = index.get(target)
            if source_index is None or target_index is None or source_index == target_index:
                continue
            successors[source_index].add(target_index)

        return cls(
            nodes=ordered,
            adjacency=tuple(tuple(sorted(targets)) for targets in successors),
        )

    def __len__(self) -> int:
        return len(self.nodes)


def strongly_connected_components(adjacency: Sequence[Sequence[int]]) -> list[list[int]]:
    """Compute the strongly connected components of an index graph.

    Iterative Tarjan: O(V + E), no recursion, so deep subclass chains do not
    hit the interpreter's recursion limit.

    Args:
        adjacency: For each node index, the indices of its successors.

    Returns:
        Components in reverse topological order of the condensation. Members of
        each component are sorted by index.
    """
    size = len(adjacency)
    indices: NDArray[np.int64] = np.full(size, -1, dtype=np.int64)
    lowlinks: NDArray[np.int64] = np.zeros(size, dtype=np.int64)
    on_stack: NDArray[np.bool_] = np.zeros(size, dtype=np.bool_)

    stack: list[int] = []
    components: list[list[int]] = []
    counter = 0

    for start in range(size):
        if indices[start] != -1:
            continue

        # Each frame is (node, position of the next successor to visit).
        work: list[tuple[int, int]] = [(start, 0)]
        while work:
            node, position = work.pop()

            if position == 0:
                indices[node] = counter
                lowlinks[node] = counter
                counter += 1
                stack.append(node)
                on_stack[node] = True

            successors = adjacency[node]
            descended = False
            while position < len(successors):
                successor = successors[position]
                position += 1
                if indices[successor] == -1:
                    work.append((node, position))
                    work.append((successor, 0))
                    descended = True
                    break
                if on_stack[successor]:
                    lowlinks[node] = min(lowlinks[node], indices[successor])

            if descended:
                continue

            if lowlinks[node] == indices[node]:
                component: list[int] = []
                while True:
                    member = stack.pop()
                    on_stack[member] = False
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component))

            if work:
                parent = work[-1][0]
                lowlinks[parent] = min(lowlinks[parent], lowlinks[node])

    return components


def nontrivial_components(arena: Arena[NodeT]) -> list[list[NodeT]]:
    """Return the components of more than one node, as arena nodes in arena order."""
    return [
        [arena.nodes[index] for index in component]
        for component in strongly_connected_components(arena.adjacency)
        if len(component) > 1
    ]
