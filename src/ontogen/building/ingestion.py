#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Accumulation of schema sources into one raw graph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

from rdflib import Graph as RDFGraph
from rdflib.util import guess_format

from ontogen.errors import ModelBuildingError
from ontogen.vocabulary import SchemaFormat

logger = logging.getLogger(__name__)

SchemaSource = Union[str, Path, IO[bytes], IO[str]]


class RawSchema:
    """Monotonic union of every schema source added so far.

    Sources are parsed immediately; nothing is deduplicated beyond what the
    graph's set semantics already provide.
    """

    def __init__(self) -> None:
        self.graph = RDFGraph()
        self._source_count = 0

    def __len__(self) -> int:
        return len(self.graph)

    @property
    def source_count(self) -> int:
        return self._source_count

    def add_schema(
        self,
        source: SchemaSource,
        base_iri: str | None = None,
        schema_format: str | SchemaFormat | None = None,
    ) -> int:
        """Parse a schema source and merge it into the raw graph.

        Args:
            source: Path, URL, binary/text stream, or raw serialized data.
            base_iri: Base IRI used to resolve relative references.
            schema_format: A `SchemaFormat` or a token such as "RDF/XML",
                "N-TRIPLE", "TURTLE"/"TTL" or "N3". Guessed from the source
                suffix when omitted, falling back to RDF/XML.

        Returns:
            The number of new statements contributed by this source.

        Raises:
            ValueError: If `schema_format` is not a known token.
            ModelBuildingError: If the source cannot be read or parsed.
        """
        resolved = (
            SchemaFormat.from_token(schema_format)
            if schema_format is not None
            else _guess_schema_format(source)
        )

        before = len(self.graph)
        parse_kwargs: dict[str, object] = {"format": resolved.value, "publicID": base_iri}
        if isinstance(source, Path):
            parse_kwargs["source"] = str(source)
        elif isinstance(source, str) and _looks_like_data(source):
            parse_kwargs["data"] = source
        else:
            parse_kwargs["source"] = source

        try:
            self.graph.parse(**parse_kwargs)
        except Exception as exc:
            message = f"Could not parse schema source {_describe(source)} as {resolved.name}: {exc}"
            raise ModelBuildingError(message) from exc

        self._source_count += 1
        added = len(self.graph) - before
        logger.info(
            "Added schema source %s (%s): %d new statements, %d total",
            _describe(source),
            resolved.name,
            added,
            len(self.graph),
        )
        return added


# ================================================================================================ #
# Internal helpers                                                                                 #
# ================================================================================================ #


def _guess_schema_format(source: SchemaSource) -> SchemaFormat:
    """Guess the format of a path or URL from its suffix, defaulting to RDF/XML."""
    if isinstance(source, (str, Path)) and not (isinstance(source, str) and _looks_like_data(source)):
        guessed = guess_format(str(source))
        for member in SchemaFormat:
            if member.value == guessed:
                return member
    return SchemaFormat.RDF_XML


def _looks_like_data(source: str) -> bool:
    """Return True if a string is serialized RDF rather than a path or URL."""
    return "\n" in source or source.lstrip().startswith(("<", "@", "#"))


def _describe(source: SchemaSource) -> str:
    if isinstance(source, (str, Path)):
        text = str(source)
        return text if len(text) <= 80 and "\n" not in text else "<inline data>"
    return str(getattr(source, "name", "<stream>"))
