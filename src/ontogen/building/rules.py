#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Forward-chaining rule passes materializing the schema closure.

Every rule is a pure function from a store to the statements it would
insert. The store applies a rule with `StatementStore.insert_where`, which
evaluates the whole match before writing and skips statements already
present. Running a rule a second time therefore inserts nothing.

Two ordered pipelines are exposed:

- `ENTAILMENT_RULES` materialize the statements a full reasoner would have
  derived from the raw schema (equivalence as mutual subsumption, named
  classes under owl:Thing). They run right after the bulk copy.
- `CLOSURE_RULES` are the fixed closure passes: class and property
  membership, domain/range propagation through inverses and
  super-properties, defaults and literal ranges.

The order of each tuple is the execution order. This is a bounded sequence
of passes, not a general fixpoint.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import itertools
import logging
from typing import TYPE_CHECKING

from rdflib import OWL, RDF, RDFS, Literal, URIRef
from rdflib.term import Node

from ontogen.vocabulary import is_reserved

if TYPE_CHECKING:
    from ontogen.building.store import StatementProducer, StatementStore
    from ontogen.types import Statement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InferenceRule:
    """A named pattern-match-and-insert pass."""

    name: str
    produce: StatementProducer

    def apply(self, store: StatementStore) -> int:
        """Insert the statements this rule matches. Returns the number inserted."""
        inserted = store.insert_where(self.produce)
        logger.debug("Rule %s inserted %d statement(s)", self.name, inserted)
        return inserted


def run_rules(store: StatementStore, rules: Sequence[InferenceRule]) -> dict[str, int]:
    """Apply `rules` in order and return the insert count of each one."""
    return {rule.name: rule.apply(store) for rule in rules}


# ================================================================================================ #
# Store Patterns                                                                                   #
# ================================================================================================ #


def properties(store: StatementStore) -> list[Node]:
    """Return every resource typed rdf:Property, in identifier order."""
    return sorted(set(store.graph.subjects(RDF.type, RDF.Property)), key=str)


def is_datatype_property(store: StatementStore, prop: Node) -> bool:
    return (prop, RDF.type, OWL.DatatypeProperty) in store.graph


def super_properties(store: StatementStore, prop: Node) -> set[Node]:
    """Return the proper super-properties of `prop` along subPropertyOf+."""
    ancestors = set(store.graph.transitive_objects(prop, RDFS.subPropertyOf))
    ancestors.discard(prop)
    return ancestors


def _inverses(store: StatementStore, prop: Node) -> set[Node]:
    graph = store.graph
    return set(graph.objects(prop, OWL.inverseOf)) | set(graph.subjects(OWL.inverseOf, prop))


def _has_value(store: StatementStore, prop: Node, attribute: URIRef) -> bool:
    return next(store.graph.objects(prop, attribute), None) is not None


# ================================================================================================ #
# Entailment Rules                                                                                 #
# ================================================================================================ #


def equivalence_expansion(store: StatementStore) -> Iterator[Statement]:
    """A owl:equivalentClass B entails the symmetric edge and mutual subsumption."""
    for first, second in store.graph.subject_objects(OWL.equivalentClass):
        if first == second:
            continue
        yield second, OWL.equivalentClass, first
        yield first, RDFS.subClassOf, second
        yield second, RDFS.subClassOf, first


def thing_subsumption(store: StatementStore) -> Iterator[Statement]:
    """Every named schema class is a subclass of owl:Thing.

    Named classes are IRIs outside the reserved vocabularies that are typed
    as a class, appear on either side of subClassOf or equivalentClass, or
    are the domain of a property or the range of a non-datatype property.
    Datatypes and subclasses of rdfs:Literal are left out.
    """
    graph = store.graph
    candidates: set[Node] = set()

    for cls_type in (OWL.Class, RDFS.Class):
        candidates.update(graph.subjects(RDF.type, cls_type))
    for predicate in (RDFS.subClassOf, OWL.equivalentClass):
        for subject, obj in graph.subject_objects(predicate):
            candidates.update((subject, obj))
    candidates.update(graph.objects(None, RDFS.domain))
    for prop, value in graph.subject_objects(RDFS.range):
        if (prop, RDF.type, OWL.DatatypeProperty) not in graph:
            candidates.add(value)

    for cls in sorted(candidates, key=str):
        if not isinstance(cls, URIRef) or is_reserved(cls):
            continue
        if (cls, RDF.type, RDFS.Datatype) in graph:
            continue
        if RDFS.Literal in set(graph.transitive_objects(cls, RDFS.subClassOf)):
            continue
        yield cls, RDFS.subClassOf, OWL.Thing


# ================================================================================================ #
# Closure Rules                                                                                    #
# ================================================================================================ #


def class_membership(store: StatementStore) -> Iterator[Statement]:
    """Domains, ranges, both sides of subClassOf and Thing descendants are classes."""
    graph = store.graph
    classes: Iterable[Node] = itertools.chain(
        graph.objects(None, RDFS.domain),
        graph.objects(None, RDFS.range),
        graph.subjects(RDFS.subClassOf, None),
        graph.objects(None, RDFS.subClassOf),
        graph.transitive_subjects(RDFS.subClassOf, OWL.Thing),
    )
    for cls in set(classes):
        if isinstance(cls, Literal):
            continue
        yield cls, RDF.type, RDFS.Class


def property_membership(store: StatementStore) -> Iterator[Statement]:
    """Typed properties, domain/range subjects, inverses and sub-properties are properties."""
    graph = store.graph
    found: Iterable[Node] = itertools.chain(
        graph.subjects(RDF.type, OWL.DatatypeProperty),
        graph.subjects(RDF.type, OWL.ObjectProperty),
        graph.subjects(RDF.type, RDF.Property),
        graph.subjects(RDFS.domain, None),
        graph.subjects(RDFS.range, None),
        graph.subjects(OWL.inverseOf, None),
        graph.objects(None, OWL.inverseOf),
        graph.subjects(RDFS.subPropertyOf, None),
        graph.objects(None, RDFS.subPropertyOf),
    )
    for prop in set(found):
        if isinstance(prop, Literal):
            continue
        yield prop, RDF.type, RDF.Property


def inverse_domain_range(store: StatementStore) -> Iterator[Statement]:
    """A property without domain (range) takes one of its inverses' ranges (domains)."""
    graph = store.graph
    for prop in properties(store):
        missing_domain = not _has_value(store, prop, RDFS.domain)
        missing_range = not _has_value(store, prop, RDFS.range)
        if not (missing_domain or missing_range):
            continue

        inverses = _inverses(store, prop)
        if missing_domain:
            candidates = {value for inverse in inverses for value in graph.objects(inverse, RDFS.range)}
            if candidates:
                yield prop, RDFS.domain, min(candidates, key=str)
        if missing_range:
            candidates = {value for inverse in inverses for value in graph.objects(inverse, RDFS.domain)}
            if candidates:
                yield prop, RDFS.range, min(candidates, key=str)


def subproperty_inheritance(store: StatementStore) -> Iterator[Statement]:
    """A property missing domain or range inherits one value from its nearest defining ancestors.

    An ancestor `m` is a source unless an intermediate `m2` (with
    `p < m2 < m` along subPropertyOf+, `m2` distinct from `p` and `m`)
    already defines the same attribute.
    """
    graph = store.graph
    for prop in properties(store):
        missing = [
            attribute
            for attribute in (RDFS.domain, RDFS.range)
            if not _has_value(store, prop, attribute)
        ]
        if not missing:
            continue

        ancestors = super_properties(store, prop)
        if not ancestors:
            continue
        ancestor_closure = {ancestor: super_properties(store, ancestor) for ancestor in ancestors}

        for attribute in missing:
            defining = {ancestor for ancestor in ancestors if _has_value(store, ancestor, attribute)}
            candidates = {
                value
                for source in defining
                if not any(
                    source in ancestor_closure[intermediate]
                    for intermediate in defining
                    if intermediate not in (source, prop)
                )
                for value in graph.objects(source, attribute)
            }
            # Exactly one value per attribute, the first in identifier order.
            if candidates:
                yield prop, attribute, min(candidates, key=str)


def default_domain(store: StatementStore) -> Iterator[Statement]:
    """Properties still without a domain get owl:Thing."""
    for prop in properties(store):
        if not _has_value(store, prop, RDFS.domain):
            yield prop, RDFS.domain, OWL.Thing


def default_range(store: StatementStore) -> Iterator[Statement]:
    """Properties still without a range get rdfs:Literal (datatype) or owl:Thing."""
    for prop in properties(store):
        if _has_value(store, prop, RDFS.range):
            continue
        fallback = RDFS.Literal if is_datatype_property(store, prop) else OWL.Thing
        yield prop, RDFS.range, fallback


def literal_range(store: StatementStore) -> Iterator[Statement]:
    """Ranges of datatype properties are classes below rdfs:Literal."""
    graph = store.graph
    for prop in graph.subjects(RDF.type, OWL.DatatypeProperty):
        for value in graph.objects(prop, RDFS.range):
            yield value, RDF.type, RDFS.Class
            if value != RDFS.Literal:
                yield value, RDFS.subClassOf, RDFS.Literal


# ================================================================================================ #
# Pipelines                                                                                        #
# ================================================================================================ #

ENTAILMENT_RULES: tuple[InferenceRule, ...] = (
    InferenceRule("EquivalenceExpansion", equivalence_expansion),
    InferenceRule("ThingSubsumption", thing_subsumption),
)

CLOSURE_RULES: tuple[InferenceRule, ...] = (
    InferenceRule("ClassMembership", class_membership),
    InferenceRule("PropertyMembership", property_membership),
    InferenceRule("InverseDomainRange", inverse_domain_range),
    InferenceRule("SubpropertyInheritance", subproperty_inheritance),
    InferenceRule("DefaultDomain", default_domain),
    InferenceRule("DefaultRange", default_range),
    InferenceRule("LiteralRange", literal_range),
)
