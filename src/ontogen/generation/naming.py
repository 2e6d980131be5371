#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""IRI to Python name mapping.

Turns class and property IRIs into importable Python namespaces, class
names, module names and attribute names. All functions are pure and
deterministic.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
import keyword
import re
from urllib.parse import urlsplit

from ontogen.paths import slugify_identifier

# Attribute names used by the generated runtime base class.
RESERVED_ATTRIBUTES = frozenset({"resource", "to_statements"})

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


class NamespacePolicy(str, Enum):
    """How the namespace of a class is derived from its IRI."""

    IRI = "iri"
    FLAT = "flat"


@dataclass(frozen=True)
class NamespaceResolver:
    """Resolve the dotted Python namespace a class is generated into.

    Attributes:
        base_namespace: Dotted prefix for every generated namespace. May be empty.
        policy: `iri` derives the namespace from the IRI (reversed host labels
            plus path segments) unless `mapping` matches; `flat` puts every
            class directly into `base_namespace`.
        mapping: IRI prefix to dotted namespace overrides. The longest
            matching prefix wins.
    """

    base_namespace: str = ""
    policy: NamespacePolicy = NamespacePolicy.IRI
    mapping: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.policy, NamespacePolicy):
            object.__setattr__(self, "policy", NamespacePolicy(self.policy))
        for part in dotted_parts(self.base_namespace):
            if not part.isidentifier() or keyword.iskeyword(part):
                message = f"base_namespace {self.base_namespace!r} is not a dotted Python name."
                raise ValueError(message)

    def resolve(self, iri: str) -> str:
        """Return the dotted namespace for the class identified by `iri`."""
        if self.policy is NamespacePolicy.FLAT:
            derived: list[str] = []
        else:
            derived = self._mapped_parts(iri)
            if derived is None:
                derived = iri_namespace_parts(iri)
        return ".".join([*dotted_parts(self.base_namespace), *derived])

    def _mapped_parts(self, iri: str) -> list[str] | None:
        matches = [prefix for prefix in self.mapping if iri.startswith(prefix)]
        if not matches:
            return None
        target = self.mapping[max(matches, key=len)]
        return [sanitize_namespace_part(part) for part in dotted_parts(target)]


# ================================================================================================ #
# IRI Helpers                                                                                      #
# ================================================================================================ #


def split_iri(iri: str) -> tuple[str, str]:
    """Split an IRI into its namespace and local name.

    The split happens after the last '#', else the last '/', else the last ':'.
    """
    for separator in ("#", "/", ":"):
        position = iri.rfind(separator)
        if position != -1 and position < len(iri) - 1:
            return iri[: position + 1], iri[position + 1 :]
    return iri, ""


def iri_namespace_parts(iri: str) -> list[str]:
    """Derive namespace parts from an IRI: reversed host labels, then path segments.

    `http://example.org/ns/animals#Dog` gives `["org", "example", "ns", "animals"]`.
    File suffixes on the last path segment are dropped (`onto.owl` gives `onto`).
    """
    namespace, _ = split_iri(iri)
    parts = urlsplit(namespace)

    raw: list[str] = []
    if parts.netloc:
        host = (parts.hostname or "").split(".")
        raw.extend(label for label in reversed(host) if label and label != "www")
        segments = [segment for segment in parts.path.split("/") if segment]
    else:
        # URNs and other opaque IRIs, e.g. urn:example:animals:Dog
        segments = [segment for segment in parts.path.split(":") if segment]

    if segments and "." in segments[-1]:
        segments[-1] = segments[-1].rsplit(".", 1)[0]
    raw.extend(segments)

    return [part for part in (sanitize_namespace_part(item) for item in raw) if part]


def dotted_parts(namespace: str) -> list[str]:
    return [part for part in namespace.split(".") if part]


def sanitize_namespace_part(part: str) -> str:
    """Make one namespace segment a valid, lower-case Python package name."""
    name = slugify_identifier(part)
    if not name:
        return ""
    return _escape(name)


# ================================================================================================ #
# Python Names                                                                                     #
# ================================================================================================ #


def class_name(iri: str) -> str:
    """PascalCase class name from the local name of `iri`."""
    _, local = split_iri(iri)
    words = [word for word in _WORD_SPLIT.split(_ascii(local)) if word]
    name = "".join(word[0].upper() + word[1:] for word in words) or "Resource"
    return _escape(name)


def attribute_name(iri: str) -> str:
    """snake_case attribute name from the local name of `iri`."""
    _, local = split_iri(iri)
    name = to_snake_case(local) or "value"
    if name in RESERVED_ATTRIBUTES:
        return f"{name}_"
    return _escape(name)


def module_name(name: str) -> str:
    """snake_case module name for a generated class name."""
    return _escape(to_snake_case(name) or "resource")


def to_snake_case(text: str) -> str:
    text = _CAMEL_BOUNDARY.sub("_", _ascii(text))
    return slugify_identifier(text)


def _ascii(text: str) -> str:
    return slugify_identifier(text, lowercase=False)


def _escape(name: str) -> str:
    """Make `name` a valid identifier that does not shadow a keyword."""
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        name = f"{name}_"
    return name
