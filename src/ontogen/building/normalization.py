#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Collapse of subClassOf cycles into single representative classes.

Equivalent classes end up in a subClassOf cycle once the closure has run.
This module finds every strongly connected component of the subClassOf
graph and merges each nontrivial one into its representative: a reserved
vocabulary class if the component holds one, otherwise the member with the
lexicographically smallest IRI. Every other member has its
statements copied onto the representative and is then removed from the
store entirely.

The whole pass runs in one `StatementStore.batch`. On the default
in-memory store that batch is not atomic: a failure part way through
leaves some members merged and others untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from rdflib import RDF, RDFS, URIRef
from rdflib.term import Node

from ontogen.utils.graph import Arena, nontrivial_components
from ontogen.vocabulary import is_reserved

if TYPE_CHECKING:
    from ontogen.building.store import StatementStore

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Summary of one normalization pass.

    Attributes:
        components: Number of nontrivial components collapsed.
        merged: Maps each removed class to the representative it was merged into.
        statements_removed: Total statements deleted while merging.
    """

    components: int = 0
    merged: dict[Node, Node] = field(default_factory=dict)
    statements_removed: int = 0

    def representative(self, cls: Node) -> Node:
        """Return the surviving class for `cls` (itself if it was not merged)."""
        return self.merged.get(cls, cls)


def representative_order(node: Node) -> tuple[int, str]:
    """Sort key choosing component representatives.

    Reserved vocabulary wins over schema IRIs, which win over blank nodes;
    ties are broken lexicographically.
    """
    if isinstance(node, URIRef):
        rank = 0 if is_reserved(node) else 1
    else:
        rank = 2
    return rank, str(node)


def build_subclass_arena(store: StatementStore) -> Arena[Node]:
    """Index every rdfs:Class of the store and its subClassOf edges."""
    graph = store.graph
    classes = set(graph.subjects(RDF.type, RDFS.Class))
    return Arena.from_edges(
        classes,
        graph.subject_objects(RDFS.subClassOf),
        key=representative_order,
    )


def normalize_equivalences(store: StatementStore) -> NormalizationResult:
    """Merge every subClassOf cycle into its representative member.

    Complexity:
        O(V + E) for component detection, plus O(statements touched) per
        merged member.
    """
    arena = build_subclass_arena(store)
    components = nontrivial_components(arena)
    result = NormalizationResult()

    with store.batch("equivalence normalization"):
        for component in components:
            root, *members = component
            for member in members:
                result.statements_removed += store.replace_resource(member, root)
                result.merged[member] = root
                logger.debug("Merged class %s into %s", member, root)
            result.components += 1

    logger.info(
        "Found and reduced %d rdfs:subClassOf cycle(s) over %d classes",
        result.components,
        len(arena),
    )
    return result
