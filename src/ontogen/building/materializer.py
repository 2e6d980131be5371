#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Read-only projections of the closed store into class and property descriptors.

Descriptors are transient: they are rebuilt on every call and never written
back. All collections are sorted by identifier so that code generation is
deterministic for a given store.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from rdflib import OWL, RDF, RDFS, XSD, Literal, URIRef
from rdflib.term import Node

from ontogen.building.rules import properties

if TYPE_CHECKING:
    from rdflib import Graph as RDFGraph

    from ontogen.building.store import StatementStore

logger = logging.getLogger(__name__)

_INIT_NS = {"rdfs": RDFS, "owl": OWL}

CLASSES_QUERY = """
SELECT DISTINCT ?c WHERE {
    ?c rdfs:subClassOf+ owl:Thing .
    FILTER(isIRI(?c))
}
"""

# Of two classes still linked by owl:equivalentClass, keep the lexicographically first.
DISTINCT_CLASSES_QUERY = """
SELECT DISTINCT ?c WHERE {
    ?c rdfs:subClassOf+ owl:Thing .
    FILTER(isIRI(?c))
    MINUS {
        ?e owl:equivalentClass ?c .
        FILTER(str(?e) < str(?c))
    }
}
"""


# ================================================================================================ #
# Descriptors                                                                                      #
# ================================================================================================ #


@dataclass(frozen=True)
class ClassDescriptor:
    """Final closed-and-normalized view of one class."""

    iri: URIRef
    label: str | None
    comment: str | None
    superclasses: tuple[URIRef, ...]
    subclasses: tuple[URIRef, ...]
    equivalent_classes: tuple[URIRef, ...]
    disjoint_with: tuple[URIRef, ...]
    is_literal: bool


@dataclass(frozen=True)
class PropertyDescriptor:
    """Final closed view of one property."""

    iri: URIRef
    label: str | None
    comment: str | None
    domains: tuple[URIRef, ...]
    ranges: tuple[URIRef, ...]
    superproperties: tuple[URIRef, ...]
    inverse_of: URIRef | None
    kind: str
    functional: bool = False

    @property
    def domain(self) -> URIRef | None:
        return self.domains[0] if self.domains else None

    @property
    def is_datatype(self) -> bool:
        return self.kind == "datatype"


# ================================================================================================ #
# Queries                                                                                          #
# ================================================================================================ #


def get_classes(store: StatementStore) -> list[ClassDescriptor]:
    """Return every IRI class reachable from owl:Thing via subClassOf+."""
    return _describe_all(store, CLASSES_QUERY)


def get_distinct_classes(store: StatementStore) -> list[ClassDescriptor]:
    """Return one descriptor per surviving equivalence class."""
    return _describe_all(store, DISTINCT_CLASSES_QUERY)


def get_properties(store: StatementStore) -> list[PropertyDescriptor]:
    """Return a descriptor for every resource typed rdf:Property."""
    return [
        describe_property(store.graph, prop)
        for prop in properties(store)
        if isinstance(prop, URIRef)
    ]


def describe_class(graph: RDFGraph, cls: URIRef) -> ClassDescriptor:
    return ClassDescriptor(
        iri=cls,
        label=_first_text(graph, cls, RDFS.label),
        comment=_first_text(graph, cls, RDFS.comment),
        superclasses=_iris(graph.objects(cls, RDFS.subClassOf), exclude=cls),
        subclasses=_iris(graph.subjects(RDFS.subClassOf, cls), exclude=cls),
        equivalent_classes=_iris(graph.objects(cls, OWL.equivalentClass), exclude=cls),
        disjoint_with=_iris(
            list(graph.objects(cls, OWL.disjointWith)) + list(graph.subjects(OWL.disjointWith, cls)),
            exclude=cls,
        ),
        is_literal=is_literal_class(graph, cls),
    )


def describe_property(graph: RDFGraph, prop: URIRef) -> PropertyDescriptor:
    if (prop, RDF.type, OWL.DatatypeProperty) in graph:
        kind = "datatype"
    elif (prop, RDF.type, OWL.ObjectProperty) in graph:
        kind = "object"
    else:
        kind = "plain"

    inverses = _iris(
        list(graph.objects(prop, OWL.inverseOf)) + list(graph.subjects(OWL.inverseOf, prop)),
        exclude=prop,
    )
    return PropertyDescriptor(
        iri=prop,
        label=_first_text(graph, prop, RDFS.label),
        comment=_first_text(graph, prop, RDFS.comment),
        domains=_iris(graph.objects(prop, RDFS.domain)),
        ranges=_iris(graph.objects(prop, RDFS.range)),
        superproperties=_iris(graph.objects(prop, RDFS.subPropertyOf), exclude=prop),
        inverse_of=inverses[0] if inverses else None,
        kind=kind,
        functional=(prop, RDF.type, OWL.FunctionalProperty) in graph,
    )


def is_literal_class(graph: RDFGraph, cls: Node) -> bool:
    """True for rdfs:Literal, XSD datatypes, declared datatypes and their subclasses."""
    if cls == RDFS.Literal or str(cls).startswith(str(XSD)):
        return True
    if (cls, RDF.type, RDFS.Datatype) in graph:
        return True
    return RDFS.Literal in set(graph.transitive_objects(cls, RDFS.subClassOf))


# ================================================================================================ #
# Internal helpers                                                                                 #
# ================================================================================================ #


def _describe_all(store: StatementStore, sparql: str) -> list[ClassDescriptor]:
    rows = store.query(sparql, initNs=_INIT_NS)
    classes = sorted({row[0] for row in rows}, key=str)
    logger.debug("Materialized %d class descriptor(s)", len(classes))
    return [describe_class(store.graph, cls) for cls in classes]


def _iris(nodes, *, exclude: Node | None = None) -> tuple[URIRef, ...]:
    return tuple(
        sorted({node for node in nodes if isinstance(node, URIRef) and node != exclude}, key=str)
    )


def _first_text(graph: RDFGraph, subject: Node, predicate: URIRef) -> str | None:
    """Return the first literal value, preferring untagged then English text."""
    literals = [obj for obj in graph.objects(subject, predicate) if isinstance(obj, Literal)]
    if not literals:
        return None
    literals.sort(key=lambda lit: (lit.language not in (None, "en"), lit.language or "", str(lit)))
    return str(literals[0])
