#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Fixed vocabulary used throughout the closure and generation stages.

Holds the baseline descriptors seeded into every store, the reserved
namespaces that are never emitted as Python code, and the closed set of
schema serialization formats accepted at ingestion.
"""

from __future__ import annotations

from enum import Enum

from rdflib import OWL, RDF, RDFS, XSD, URIRef
from rdflib.term import Node

# ================================================================================================ #
# Baseline Vocabulary                                                                              #
# ================================================================================================ #

BASELINE_PROPERTIES: tuple[URIRef, ...] = (
    RDF.type,
    RDFS.label,
    RDFS.comment,
    RDFS.domain,
    RDFS.range,
    RDFS.subClassOf,
    OWL.equivalentClass,
    OWL.disjointWith,
    OWL.complementOf,
)

BASELINE_CLASSES: tuple[URIRef, ...] = (
    OWL.Thing,
    RDFS.Literal,
    RDFS.Datatype,
    OWL.Nothing,
    OWL.Class,
)

# ================================================================================================ #
# Reserved Namespaces                                                                              #
# ================================================================================================ #

RESERVED_NAMESPACES: tuple[str, ...] = (
    str(RDF),
    str(RDFS),
    str(XSD),
    str(OWL),
)


def is_reserved(node: Node) -> bool:
    """Return True if the node belongs to the RDF, RDFS, XSD or OWL vocabulary."""
    return isinstance(node, URIRef) and str(node).startswith(RESERVED_NAMESPACES)


# ================================================================================================ #
# Schema Formats                                                                                   #
# ================================================================================================ #


class SchemaFormat(str, Enum):
    """Closed set of serializations accepted by `add_schema`.

    Values are the rdflib parser names.
    """

    RDF_XML = "xml"
    N_TRIPLES = "nt"
    TURTLE = "turtle"
    N3 = "n3"

    @classmethod
    def from_token(cls, token: str | SchemaFormat) -> SchemaFormat:
        """Resolve a user-facing format token such as "RDF/XML" or "TTL".

        Raises:
            ValueError: If the token is not part of the enumeration.
        """
        if isinstance(token, SchemaFormat):
            return token

        normalized = token.strip().upper()
        member = _FORMAT_TOKENS.get(normalized)
        if member is None:
            allowed = ", ".join(sorted(_FORMAT_TOKENS))
            message = f"Unknown schema format {token!r}. Expected one of: {allowed}."
            raise ValueError(message)
        return member


_FORMAT_TOKENS: dict[str, SchemaFormat] = {
    "RDF/XML": SchemaFormat.RDF_XML,
    "XML": SchemaFormat.RDF_XML,
    "N-TRIPLE": SchemaFormat.N_TRIPLES,
    "N-TRIPLES": SchemaFormat.N_TRIPLES,
    "NT": SchemaFormat.N_TRIPLES,
    "TURTLE": SchemaFormat.TURTLE,
    "TTL": SchemaFormat.TURTLE,
    "N3": SchemaFormat.N3,
}
