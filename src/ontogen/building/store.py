#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Statement store handle threaded through every build stage.

`StatementStore` wraps an externally owned rdflib graph and exposes the
narrow contract the builder relies on: bulk copy, pattern-match-and-insert,
query, resource rewrite and batch scoping. It holds no other state, so the
same graph can be inspected directly once a build has returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING

from rdflib import RDF, Graph as RDFGraph
from rdflib.term import Node
from tqdm.auto import tqdm

if TYPE_CHECKING:
    from rdflib.query import Result

    from ontogen.types import Statement

logger = logging.getLogger(__name__)

StatementProducer = Callable[["StatementStore"], Iterable["Statement"]]


class StatementStore:
    """Write-capable view over an rdflib graph.

    Args:
        graph: Graph receiving the closed model. A fresh in-memory graph is
            created when None.
    """

    def __init__(self, graph: RDFGraph | None = None) -> None:
        self.graph: RDFGraph = graph if graph is not None else RDFGraph()

    def __len__(self) -> int:
        return len(self.graph)

    def __contains__(self, statement: Statement) -> bool:
        return statement in self.graph

    def __repr__(self) -> str:
        return f"StatementStore(statements={len(self.graph)}, store={type(self.graph.store).__name__})"

    # ------------------------------------------------------------------------------------------------ #
    # Writes                                                                                           #
    # ------------------------------------------------------------------------------------------------ #

    def add(self, statement: Statement) -> bool:
        """Add one statement. Returns False if it was already present."""
        if statement in self.graph:
            return False
        self.graph.add(statement)
        return True

    def declare(self, resource: Node, rdf_type: Node) -> bool:
        """Type a resource, e.g. as rdfs:Class or rdf:Property."""
        return self.add((resource, RDF.type, rdf_type))

    def copy_from(self, source: RDFGraph) -> int:
        """Bulk-copy every statement of `source` into the store.

        Returns:
            The number of statements transferred (including ones already present).
        """
        transferred = 0
        for statement in tqdm(
            source,
            total=len(source),
            desc="Copying schema statements",
            unit="statements",
            colour="red",
        ):
            self.graph.add(statement)
            transferred += 1
        return transferred

    def insert_where(self, producer: StatementProducer) -> int:
        """Run a pattern-match-and-insert rule.

        The producer is evaluated to completion before anything is written, so
        matches never observe the rule's own insertions.

        Returns:
            The number of statements that were not already present.
        """
        candidates = list(producer(self))
        inserted = 0
        for statement in candidates:
            if self.add(statement):
                inserted += 1
        return inserted

    def replace_resource(self, old: Node, new: Node) -> int:
        """Rewrite every statement mentioning `old` to mention `new`, then drop `old`.

        Statements with `old` as subject are copied with `new` as subject,
        statements with `old` as object are copied with `new` as object, then
        every statement mentioning `old` as subject or object is deleted.

        Returns:
            The number of statements deleted.
        """
        as_subject = list(self.graph.triples((old, None, None)))
        for _, predicate, obj in as_subject:
            self.graph.add((new, predicate, obj))

        as_object = list(self.graph.triples((None, None, old)))
        for subject, predicate, _ in as_object:
            self.graph.add((subject, predicate, new))

        doomed = set(self.graph.triples((old, None, None))) | set(self.graph.triples((None, None, old)))
        for statement in doomed:
            self.graph.remove(statement)
        return len(doomed)

    # ------------------------------------------------------------------------------------------------ #
    # Reads                                                                                            #
    # ------------------------------------------------------------------------------------------------ #

    def query(self, sparql: str, **kwargs: object) -> Result:
        """Evaluate a SPARQL query against the store."""
        return self.graph.query(sparql, **kwargs)

    # ------------------------------------------------------------------------------------------------ #
    # Batches                                                                                          #
    # ------------------------------------------------------------------------------------------------ #

    @property
    def transactional(self) -> bool:
        """True if the underlying rdflib store supports commit/rollback."""
        return bool(getattr(self.graph.store, "transaction_aware", False))

    @contextmanager
    def batch(self, name: str) -> Iterator[StatementStore]:
        """Group writes into one atomic batch when the store supports it.

        On a transaction-aware store the batch is committed on success and
        rolled back on failure. Otherwise (e.g. the default in-memory store)
        writes are applied immediately and stay visible after a failure.
        """
        if not self.transactional:
            logger.debug("Store is not transaction-aware, running %s unbatched", name)
            yield self
            return

        try:
            yield self
        except BaseException:
            logger.warning("Rolling back %s", name)
            self.graph.rollback()
            raise
        self.graph.commit()
        logger.debug("Committed %s", name)
