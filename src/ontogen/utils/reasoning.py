"""Consistency checks run over the raw schema graph before a build.

This module provides the pluggable validator used by the model builder. A
consistency check is any callable taking an rdflib graph and returning a
`ValidityReport`. Three checks ship with OntoGen:

- `check_consistency_hermit`: a thin, typed wrapper around Owlready2's
  HermiT integration (requires a Java runtime).
- `check_consistency_structural`: an rdflib-only check for disjointness
  clashes on individuals. Approximate, but needs no external process.
- `skip_consistency_check`: always reports a valid graph.

Design
------
- Function-oriented: checks are plain callables, selected by name through
  `resolve_consistency_check`.
- Checks never mutate the graph they are given.
- Uses the shared logging infrastructure; no direct printing.

Performance
-----------
The HermiT check is dominated by the reasoner itself. The structural check
is linear in the number of typing statements times the depth of the class
hierarchy.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
import itertools
import logging
from pathlib import Path
import tempfile
from typing import Any, cast

import owlready2
from rdflib import OWL, RDF, RDFS, Graph as RDFGraph, URIRef
from rdflib.collection import Collection
from rdflib.term import Node

from ontogen.vocabulary import is_reserved

logger = logging.getLogger(__name__)

# ================================================================================================ #
# Owlready2 / HermiT Type Aliases                                                                  #
# ================================================================================================ #

OntologyHandle = Any

WorldFactory = Callable[[], Any]
new_world: WorldFactory = cast(WorldFactory, owlready2.World)

SyncReasonerCallable = Callable[..., None]
sync_reasoner_hermit: SyncReasonerCallable = cast(
    SyncReasonerCallable,
    owlready2.sync_reasoner_hermit,
)

OwlReadyInconsistentOntologyError = owlready2.OwlReadyInconsistentOntologyError


# ================================================================================================ #
# Report                                                                                           #
# ================================================================================================ #


@dataclass(frozen=True)
class ValidityReport:
    """Outcome of a consistency check.

    Attributes:
        valid: False if the graph is inconsistent.
        violations: Human-readable descriptions of what makes it inconsistent.
        warnings: Problems that do not make the graph inconsistent, such as
            unsatisfiable classes.
        check_method: Name of the check that produced the report.
    """

    valid: bool
    violations: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    check_method: str = "unknown"


ConsistencyCheck = Callable[[RDFGraph], ValidityReport]


# ================================================================================================ #
# Public Checks                                                                                    #
# ================================================================================================ #


def check_consistency_hermit(graph: RDFGraph, *, debug: bool = False) -> ValidityReport:
    """Run the HermiT reasoner over an rdflib graph.

    The graph is serialized to a temporary RDF/XML file, loaded in a private
    Owlready2 world and reasoned over. The temporary file is always deleted.

    Args:
        graph: The raw schema graph.
        debug: Enable Owlready2 internal debugging.

    Returns:
        An invalid report if HermiT finds the ontology inconsistent, otherwise a
        valid report listing unsatisfiable classes as warnings.
    """
    with tempfile.NamedTemporaryFile(suffix=".rdf", delete=False) as handle:
        tmp_path = Path(handle.name)

    ontology: OntologyHandle | None = None
    try:
        graph.serialize(str(tmp_path), format="xml")
        logger.debug("Serialized raw schema graph for reasoning to: %s", tmp_path)

        world = new_world()
        ontology = world.get_ontology(tmp_path.as_uri()).load()
        sync_reasoner_hermit(ontology, infer_property_values=False, debug=debug)
    except OwlReadyInconsistentOntologyError as exc:
        logger.warning("(HermiT) Inconsistent schema")
        return ValidityReport(
            valid=False,
            violations=(str(exc) or "HermiT reported an inconsistent ontology",),
            check_method="hermit",
        )
    else:
        unsatisfiable = tuple(
            f"Unsatisfiable class: {cls.iri}" for cls in world.inconsistent_classes()
        )
        logger.info("(HermiT) Consistent schema")
        return ValidityReport(valid=True, warnings=unsatisfiable, check_method="hermit")
    finally:
        if ontology is not None:
            ontology.destroy()
        try:
            tmp_path.unlink(missing_ok=True)
            logger.debug("Deleted temporary reasoner input file: %s", tmp_path)
        except OSError:
            logger.warning("Failed to delete temporary reasoner input file: %s", tmp_path)


def check_consistency_structural(graph: RDFGraph) -> ValidityReport:
    """Detect disjointness clashes without an external reasoner.

    Violations:
        - an individual whose types (closed under subClassOf and
          equivalentClass) contain two classes declared disjoint;
        - an individual typed owl:Nothing.

    Warnings:
        - a class whose ancestors contain two disjoint classes, a class
          disjoint with itself, or owl:Nothing.
    """
    disjoint_pairs = _collect_disjoint_pairs(graph)
    ancestors_cache: dict[Node, frozenset[Node]] = {}

    def ancestors(node: Node) -> frozenset[Node]:
        if node not in ancestors_cache:
            ancestors_cache[node] = _class_ancestors(graph, node)
        return ancestors_cache[node]

    violations: list[str] = []
    for individual in sorted(set(graph.subjects(RDF.type, None)), key=str):
        declared = [
            cls
            for cls in graph.objects(individual, RDF.type)
            if cls == OWL.Nothing or not is_reserved(cls)
        ]
        if not declared:
            continue

        types: set[Node] = set()
        for cls in declared:
            types |= ancestors(cls)

        if OWL.Nothing in types:
            violations.append(f"Individual {individual} is an instance of {OWL.Nothing}")
        for first, second in _clashes(types, disjoint_pairs):
            violations.append(
                f"Individual {individual} is an instance of disjoint classes {first} and {second}"
            )

    warnings: list[str] = []
    for cls in sorted(_named_classes(graph), key=str):
        types = set(ancestors(cls))
        if OWL.Nothing in types or any(True for _ in _clashes(types, disjoint_pairs)):
            warnings.append(f"Unsatisfiable class: {cls}")

    report = ValidityReport(
        valid=not violations,
        violations=tuple(violations),
        warnings=tuple(warnings),
        check_method="structural",
    )
    if report.valid:
        logger.info("(structural) Consistent schema")
    else:
        logger.warning("(structural) Inconsistent schema: %d violation(s)", len(violations))
    return report


def skip_consistency_check(graph: RDFGraph) -> ValidityReport:
    """Accept any graph."""
    logger.info("Skipped schema consistency check (%d statements)", len(graph))
    return ValidityReport(valid=True, check_method="none")


CONSISTENCY_CHECKS: dict[str, ConsistencyCheck] = {
    "hermit": check_consistency_hermit,
    "structural": check_consistency_structural,
    "none": skip_consistency_check,
}


def resolve_consistency_check(name: str) -> ConsistencyCheck:
    """Return the consistency check registered under `name`.

    Raises:
        ValueError: If no check is registered under that name.
    """
    try:
        return CONSISTENCY_CHECKS[name]
    except KeyError:
        allowed = ", ".join(sorted(CONSISTENCY_CHECKS))
        message = f"Unknown consistency check {name!r}. Expected one of: {allowed}."
        raise ValueError(message) from None


# ================================================================================================ #
# Internal helpers                                                                                 #
# ================================================================================================ #


def _collect_disjoint_pairs(graph: RDFGraph) -> set[frozenset[Node]]:
    """Return every pair of classes declared disjoint, as unordered pairs."""
    pairs: set[frozenset[Node]] = {
        frozenset((first, second)) for first, second in graph.subject_objects(OWL.disjointWith)
    }

    for axiom in graph.subjects(RDF.type, OWL.AllDisjointClasses):
        members_head = graph.value(axiom, OWL.members)
        if members_head is None:
            continue
        members = list(Collection(graph, members_head))
        pairs.update(frozenset(pair) for pair in itertools.combinations(members, 2))

    return pairs


def _clashes(
    types: set[Node],
    disjoint_pairs: Iterable[frozenset[Node]],
) -> Iterable[tuple[Node, Node]]:
    """Yield the disjoint pairs fully contained in `types`."""
    for pair in disjoint_pairs:
        if pair <= types:
            members = sorted(pair, key=str)
            yield members[0], members[-1]


def _class_ancestors(graph: RDFGraph, cls: Node) -> frozenset[Node]:
    """Return `cls` and every class reachable through subClassOf or equivalentClass."""
    seen: set[Node] = {cls}
    frontier = [cls]
    while frontier:
        current = frontier.pop()
        neighbours = itertools.chain(
            graph.objects(current, RDFS.subClassOf),
            graph.objects(current, OWL.equivalentClass),
            graph.subjects(OWL.equivalentClass, current),
        )
        for neighbour in neighbours:
            if neighbour not in seen:
                seen.add(neighbour)
                frontier.append(neighbour)
    return frozenset(seen)


def _named_classes(graph: RDFGraph) -> set[Node]:
    """Return the IRI classes mentioned by the schema outside reserved vocabularies."""
    classes: set[Node] = set()
    for cls_type in (OWL.Class, RDFS.Class):
        classes.update(graph.subjects(RDF.type, cls_type))
    for subject, obj in graph.subject_objects(RDFS.subClassOf):
        classes.update((subject, obj))
    return {cls for cls in classes if isinstance(cls, URIRef) and not is_reserved(cls)}
