#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Ontology Model Builder Module.

=================================
This module turns a raw RDFS/OWL schema into a closed, normalized model
ready for code generation.

High-Level Purpose
------------------
Schemas rarely state everything a code generator needs: properties lack
domains, classes are only implied by their use, equivalent classes are
spread over several IRIs. The builder materializes those implicit
statements into a store so that later stages can read them with plain
queries.

Main abstractions:

- OntologyModelBuilder:
    Orchestrator that:
      - accumulates schema sources into a raw graph
      - validates the raw graph with a pluggable consistency check
      - seeds the baseline vocabulary and copies the raw statements
      - runs the entailment and closure rule pipelines in order
      - collapses subClassOf cycles into single representatives
      - exposes class and property descriptors of the final state

Module Invariants
-----------------
After a successful `build()`:

- every property has a domain and at least one range;
- every class reachable from owl:Thing via subClassOf+ is an rdfs:Class;
- no subClassOf cycle remains between two distinct classes.

Failure Semantics
-----------------
`build()` raises `ConsistencyError` before touching the store if the raw
graph is invalid. Any later fault raises `ModelBuildingError`; statements
already written are not rolled back, and the builder refuses further use.

Intended Use
------------
    builder = OntologyModelBuilder(consistency_check=check_consistency_structural)
    builder.add_schema("schema.ttl")
    builder.build()
    classes = builder.get_distinct_classes()

This class assumes exclusive write access to its store for the duration of
`build()`. It is single-threaded and performs no internal timeouts.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import TYPE_CHECKING

from rdflib import RDF, RDFS, Graph as RDFGraph

from ontogen.building import materializer
from ontogen.building.ingestion import RawSchema
from ontogen.building.normalization import NormalizationResult, normalize_equivalences
from ontogen.building.rules import CLOSURE_RULES, ENTAILMENT_RULES, run_rules
from ontogen.building.store import StatementStore
from ontogen.errors import ConsistencyError, ModelBuildingError
from ontogen.utils.reasoning import check_consistency_hermit
from ontogen.vocabulary import BASELINE_CLASSES, BASELINE_PROPERTIES

if TYPE_CHECKING:
    from ontogen.building.ingestion import SchemaSource
    from ontogen.building.materializer import ClassDescriptor, PropertyDescriptor
    from ontogen.utils.reasoning import ConsistencyCheck, ValidityReport
    from ontogen.vocabulary import SchemaFormat

logger = logging.getLogger(__name__)


class BuildState(Enum):
    PENDING = "pending"
    BUILT = "built"
    FAILED = "failed"


# ================================================================================================ #
# Ontology Model Builder                                                                           #
# ================================================================================================ #


class OntologyModelBuilder:
    """Close and normalize an RDFS/OWL schema inside a statement store.

    Notes:
        - The store may be shared with a persistence runtime, which then sees
          the closed model once `build()` returns.
        - Readers must not query the store while `build()` runs.
    """

    def __init__(
        self,
        *,
        store: StatementStore | RDFGraph | None = None,
        consistency_check: ConsistencyCheck = check_consistency_hermit,
    ) -> None:
        """Initialize the builder.

        Args:
            store: Store (or bare rdflib graph) receiving the closed model. A
                fresh in-memory store is used when None.
            consistency_check: Callable validating the raw graph before a build.
        """
        if isinstance(store, RDFGraph):
            store = StatementStore(store)
        self._store: StatementStore = store if store is not None else StatementStore()
        self._raw = RawSchema()
        self._consistency_check = consistency_check
        self._state = BuildState.PENDING
        self._last_normalization: NormalizationResult | None = None

    def __repr__(self) -> str:
        return (
            "OntologyModelBuilder("
            f"sources={self._raw.source_count}, "
            f"raw_statements={len(self._raw)}, "
            f"store_statements={len(self._store)}, "
            f"state={self._state.value!r}, "
            f"consistency_check={getattr(self._consistency_check, '__name__', repr(self._consistency_check))}"
            ")"
        )

    # ------------------------------------------------------------------------------------------------ #
    # Public API                                                                                       #
    # ------------------------------------------------------------------------------------------------ #

    @property
    def store(self) -> StatementStore:
        """The store receiving the closed model."""
        return self._store

    @property
    def raw_graph(self) -> RDFGraph:
        """The accumulated, unprocessed schema graph."""
        return self._raw.graph

    @property
    def is_built(self) -> bool:
        return self._state is BuildState.BUILT

    @property
    def last_normalization(self) -> NormalizationResult | None:
        return self._last_normalization

    def add_schema(
        self,
        source: SchemaSource,
        base_iri: str | None = None,
        schema_format: str | SchemaFormat | None = None,
    ) -> int:
        """Add a schema source to the raw graph. See `RawSchema.add_schema`."""
        return self._raw.add_schema(source, base_iri=base_iri, schema_format=schema_format)

    def validate(self) -> ValidityReport:
        """Run the consistency check over the raw graph.

        Raises:
            ConsistencyError: If the check itself cannot run.
        """
        try:
            return self._consistency_check(self._raw.graph)
        except Exception as exc:
            message = f"Consistency check could not be completed: {exc}"
            raise ConsistencyError(message) from exc

    def build(self) -> None:
        """Validate, copy and close the raw schema into the store.

        Steps:
            1. Validate the raw graph (fails before any write).
            2. Seed the baseline vocabulary.
            3. Bulk-copy the raw statements.
            4. Run the entailment rules, then the closure rules, in order.
            5. Collapse subClassOf cycles.

        Raises:
            ConsistencyError: If the raw graph is invalid.
            ModelBuildingError: If any later step fails. The store is left in
                an unspecified state.
        """
        self._ensure_usable()

        report = self.validate()
        if not report.valid:
            message = (
                f"The schema is not consistent ({report.check_method}): "
                + "; ".join(report.violations or ("no details reported",))
            )
            raise ConsistencyError(message, report=report)
        for warning in report.warnings:
            logger.warning("%s", warning)

        logger.info("[Model Building] started")
        try:
            self._seed_baseline()

            transferred = self._store.copy_from(self._raw.graph)
            logger.info("Transferred %d schema statements to the store", transferred)

            for name, inserted in run_rules(self._store, ENTAILMENT_RULES).items():
                logger.info("Entailment %s: %d statement(s) inserted", name, inserted)
            for name, inserted in run_rules(self._store, CLOSURE_RULES).items():
                logger.info("Rule %s: %d statement(s) inserted", name, inserted)

            self._last_normalization = normalize_equivalences(self._store)
        except Exception as exc:
            self._state = BuildState.FAILED
            message = f"Building the ontology model failed: {exc}"
            raise ModelBuildingError(message) from exc

        self._state = BuildState.BUILT
        logger.info("[Model Building] finished (%d statements)", len(self._store))

    def get_classes(self) -> list[ClassDescriptor]:
        """Return every class reachable from owl:Thing in the built model."""
        self._ensure_usable()
        return materializer.get_classes(self._store)

    def get_distinct_classes(self) -> list[ClassDescriptor]:
        """Return one class per equivalence class of the built model."""
        self._ensure_usable()
        return materializer.get_distinct_classes(self._store)

    def get_properties(self) -> list[PropertyDescriptor]:
        """Return every property of the built model."""
        self._ensure_usable()
        return materializer.get_properties(self._store)

    # ------------------------------------------------------------------------------------------------ #
    # Internals                                                                                        #
    # ------------------------------------------------------------------------------------------------ #

    def _ensure_usable(self) -> None:
        if self._state is BuildState.FAILED:
            message = "A previous build failed; the store is in an unspecified state and cannot be reused."
            raise ModelBuildingError(message)

    def _seed_baseline(self) -> None:
        """Declare the fixed properties and classes every model relies on."""
        for prop in BASELINE_PROPERTIES:
            self._store.declare(prop, RDF.Property)
        for cls in BASELINE_CLASSES:
            self._store.declare(cls, RDFS.Class)
        logger.debug(
            "Seeded %d baseline properties and %d baseline classes",
            len(BASELINE_PROPERTIES),
            len(BASELINE_CLASSES),
        )
