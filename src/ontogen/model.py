#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Base class of every generated type.

Generated classes only declare accessors; values live in a per-instance
mapping from predicate IRI to values. `to_statements` renders an instance
as the triples a persistence runtime would store.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, ClassVar
import uuid

from rdflib import OWL, RDF, Literal, URIRef

from ontogen.types import Statement

RESOURCE_PREFIX = "urn:ontogen:"


class ResourceObject:
    """A resource identified by an IRI and typed by its class hierarchy."""

    __iri__: ClassVar[str] = str(OWL.Thing)

    def __init__(self, resource: str | None = None) -> None:
        self.resource: str = resource or f"{RESOURCE_PREFIX}{uuid.uuid4()}"
        self._values: dict[str, set[Any]] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(resource={self.resource!r})"

    def _get_values(self, predicate: str) -> set[Any]:
        return set(self._values.get(predicate, ()))

    def _get_value(self, predicate: str) -> Any:
        values = self._values.get(predicate)
        if not values:
            return None
        return next(iter(values))

    def _set_values(self, predicate: str, values: Iterable[Any] | None) -> None:
        if values is None:
            self._values.pop(predicate, None)
            return
        self._values[predicate] = set(values)

    def _set_value(self, predicate: str, value: Any) -> None:
        self._set_values(predicate, None if value is None else (value,))

    def to_statements(self) -> Iterator[Statement]:
        """Yield the type statements of every generated class in the MRO, then the values."""
        subject = URIRef(self.resource)
        for cls in type(self).__mro__:
            cls_iri = cls.__dict__.get("__iri__")
            if cls_iri is not None:
                yield subject, RDF.type, URIRef(cls_iri)

        for predicate, values in sorted(self._values.items()):
            for value in values:
                if isinstance(value, ResourceObject):
                    obj = URIRef(value.resource)
                else:
                    obj = Literal(value)
                yield subject, URIRef(predicate), obj
