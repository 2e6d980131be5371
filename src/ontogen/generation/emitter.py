#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Code Emitter Module.

======================
Renders one type module and one support module per distinct class of a
built ontology model.

High-Level Purpose
------------------
The type module declares a class deriving from the generated classes of its
direct superclasses (or `ontogen.model.ResourceObject`), with one property
getter/setter pair per property whose domain is the class or one of its
ancestors. The support module declares a subclass with a keyword
constructor for those properties.

Layout
------
Modules are written below an output root, one directory per namespace part.
Each namespace directory receives an empty `__init__.py` so the tree is
importable once the output root is on `sys.path`.

Failure Semantics
-----------------
A failure while rendering or writing any class aborts the whole run with
`CodeGenerationError`. Files written before the failure stay on disk.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError
from rdflib import OWL, RDFS, XSD, URIRef
from tqdm.auto import tqdm

from ontogen.errors import CodeGenerationError, ConsistencyError, ModelBuildingError
from ontogen.generation.naming import (
    NamespaceResolver,
    attribute_name,
    class_name,
    module_name,
)
from ontogen.paths import ensure_output_directory, namespace_directory, resolve_output_root
from ontogen.vocabulary import is_reserved

if TYPE_CHECKING:
    from ontogen.building.builder import OntologyModelBuilder
    from ontogen.building.materializer import ClassDescriptor, PropertyDescriptor

logger = logging.getLogger(__name__)

RUNTIME_BASE_MODULE = "ontogen.model"
RUNTIME_BASE_CLASS = "ResourceObject"
SUPPORT_SUFFIX = "Support"

# XSD datatype -> (python type expression, import line or None)
XSD_TYPES: dict[URIRef, tuple[str, str | None]] = {
    XSD.string: ("str", None),
    XSD.normalizedString: ("str", None),
    XSD.token: ("str", None),
    XSD.language: ("str", None),
    XSD.anyURI: ("str", None),
    XSD.boolean: ("bool", None),
    XSD.integer: ("int", None),
    XSD.int: ("int", None),
    XSD.long: ("int", None),
    XSD.short: ("int", None),
    XSD.byte: ("int", None),
    XSD.nonNegativeInteger: ("int", None),
    XSD.positiveInteger: ("int", None),
    XSD.nonPositiveInteger: ("int", None),
    XSD.negativeInteger: ("int", None),
    XSD.unsignedInt: ("int", None),
    XSD.unsignedLong: ("int", None),
    XSD.float: ("float", None),
    XSD.double: ("float", None),
    XSD.decimal: ("decimal.Decimal", "import decimal"),
    XSD.dateTime: ("datetime.datetime", "import datetime"),
    XSD.date: ("datetime.date", "import datetime"),
    XSD.time: ("datetime.time", "import datetime"),
    RDFS.Literal: ("str", None),
}


# ================================================================================================ #
# Emission Plan                                                                                    #
# ================================================================================================ #


@dataclass(frozen=True)
class ClassTarget:
    """Where and under which names a class is generated."""

    iri: URIRef
    namespace: str
    class_name: str
    module_name: str

    @property
    def import_path(self) -> str:
        return f"{self.namespace}.{self.module_name}" if self.namespace else self.module_name

    @property
    def support_class_name(self) -> str:
        return f"{self.class_name}{SUPPORT_SUFFIX}"

    @property
    def support_module_name(self) -> str:
        return f"{self.module_name}_support"


@dataclass(frozen=True)
class EmittedClass:
    """Files produced for one class."""

    target: ClassTarget
    type_path: Path
    support_path: Path


@dataclass
class _ImportSet:
    """Imports of one generated module, with alias allocation on name clashes."""

    owner: str
    runtime: set[str] = field(default_factory=set)
    stdlib: set[str] = field(default_factory=set)
    type_checking: set[str] = field(default_factory=set)
    _bound: dict[str, str] = field(default_factory=dict)

    def bind(self, module: str, name: str, *, runtime: bool) -> str:
        """Import `name` from `module` and return the local name to use."""
        key = f"{module}:{name}"
        for local, bound_key in self._bound.items():
            if bound_key == key:
                return local

        local = name
        counter = 2
        while local in self._bound or local == self.owner:
            local = f"{name}{counter}"
            counter += 1
        self._bound[local] = key

        line = f"from {module} import {name}" if local == name else f"from {module} import {name} as {local}"
        (self.runtime if runtime else self.type_checking).add(line)
        return local


# ================================================================================================ #
# Code Emitter                                                                                     #
# ================================================================================================ #


class CodeEmitter:
    """Render and write the Python modules of a set of class descriptors."""

    def __init__(self, *, resolver: NamespaceResolver | None = None) -> None:
        self._resolver = resolver or NamespaceResolver()
        self._environment = Environment(
            loader=PackageLoader("ontogen", "resources/templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._environment.filters["pyrepr"] = repr
        self._environment.filters["docstring"] = format_docstring

    @property
    def resolver(self) -> NamespaceResolver:
        return self._resolver

    def plan(self, classes: Iterable[ClassDescriptor]) -> dict[URIRef, ClassTarget]:
        """Assign a namespace, class name and module name to every eligible class.

        Classes from reserved vocabularies and literal types are skipped.
        Name clashes inside a namespace get a numeric suffix in identifier order.
        """
        targets: dict[URIRef, ClassTarget] = {}
        taken: set[tuple[str, str]] = set()

        for cls in sorted(classes, key=lambda descriptor: str(descriptor.iri)):
            if not is_eligible(cls):
                continue
            namespace = self._resolver.resolve(str(cls.iri))
            base_name = class_name(str(cls.iri))

            name = base_name
            counter = 2
            while {(namespace, module_name(name)), (namespace, f"{module_name(name)}_support")} & taken:
                name = f"{base_name}{counter}"
                counter += 1
            taken.update({(namespace, module_name(name)), (namespace, f"{module_name(name)}_support")})

            targets[cls.iri] = ClassTarget(
                iri=cls.iri,
                namespace=namespace,
                class_name=name,
                module_name=module_name(name),
            )
        return targets

    def emit(
        self,
        classes: Sequence[ClassDescriptor],
        properties: Sequence[PropertyDescriptor],
        output_root: Path,
    ) -> list[EmittedClass]:
        """Write the type and support modules of every eligible class.

        Args:
            classes: Distinct class descriptors of the built model.
            properties: Property descriptors of the built model.
            output_root: Directory the namespace tree is written below.

        Returns:
            The emitted classes, in identifier order.

        Raises:
            CodeGenerationError: If rendering or writing any class fails.
        """
        targets = self.plan(classes)
        superclasses = {cls.iri: cls.superclasses for cls in classes}
        descriptors = {cls.iri: cls for cls in classes}
        emitted: list[EmittedClass] = []

        for index, target in enumerate(
            tqdm(list(targets.values()), desc="Generating classes", unit="classes", colour="green"),
            start=1,
        ):
            cls = descriptors[target.iri]
            try:
                emitted.append(self._emit_class(cls, target, targets, superclasses, properties, output_root))
            except (OSError, TemplateError) as exc:
                message = f"Generating code for {cls.iri} failed: {exc}"
                raise CodeGenerationError(message) from exc

            logger.debug(
                "Generated Python class %s for RDF class %s (%d of %d)",
                target.class_name,
                cls.iri,
                index,
                len(targets),
            )

        logger.info("Generated %d class(es) below %s", len(emitted), output_root)
        return emitted

    # ------------------------------------------------------------------------------------------------ #
    # Internals                                                                                        #
    # ------------------------------------------------------------------------------------------------ #

    def _emit_class(
        self,
        cls: ClassDescriptor,
        target: ClassTarget,
        targets: dict[URIRef, ClassTarget],
        superclasses: dict[URIRef, tuple[URIRef, ...]],
        properties: Sequence[PropertyDescriptor],
        output_root: Path,
    ) -> EmittedClass:
        ancestors = collect_ancestors(cls.iri, superclasses)
        imports = _ImportSet(owner=target.class_name)

        bases = [
            imports.bind(targets[base].import_path, targets[base].class_name, runtime=True)
            for base in direct_bases(cls, targets, superclasses)
        ]
        if not bases:
            bases = [imports.bind(RUNTIME_BASE_MODULE, RUNTIME_BASE_CLASS, runtime=True)]

        fields = self._fields_for(cls, ancestors, properties, targets, imports)

        context: dict[str, Any] = {
            "cls": cls,
            "iri": str(cls.iri),
            "target": target,
            "bases": bases,
            "fields": fields,
            "runtime_imports": sorted(imports.runtime),
            "stdlib_imports": sorted(imports.stdlib),
            "type_checking_imports": sorted(imports.type_checking),
        }

        directory = namespace_directory(output_root, target.namespace)
        directory.mkdir(parents=True, exist_ok=True)
        _ensure_package_markers(output_root, directory)

        type_path = directory / f"{target.module_name}.py"
        support_path = directory / f"{target.support_module_name}.py"
        type_path.write_text(self._render("type_module.py.jinja", context), encoding="utf-8")
        support_path.write_text(self._render("support_module.py.jinja", context), encoding="utf-8")

        return EmittedClass(target=target, type_path=type_path, support_path=support_path)

    def _fields_for(
        self,
        cls: ClassDescriptor,
        ancestors: set[URIRef],
        properties: Sequence[PropertyDescriptor],
        targets: dict[URIRef, ClassTarget],
        imports: _ImportSet,
    ) -> list[dict[str, Any]]:
        scope = {cls.iri, OWL.Thing} | ancestors
        applicable = [
            prop
            for prop in properties
            if not is_reserved(prop.iri) and scope.intersection(prop.domains)
        ]
        applicable.sort(key=lambda prop: (attribute_name(str(prop.iri)), str(prop.iri)))

        fields: list[dict[str, Any]] = []
        used: set[str] = set()
        for prop in applicable:
            base_name = attribute_name(str(prop.iri))
            name = base_name
            counter = 2
            while name in used:
                name = f"{base_name}_{counter}"
                counter += 1
            used.add(name)

            value_type = self._value_type(prop, cls, targets, imports)
            hint = f"{value_type} | None" if prop.functional else f"set[{value_type}]"
            fields.append(
                {
                    "name": name,
                    "predicate": str(prop.iri),
                    "hint": hint,
                    "functional": prop.functional,
                    "doc": prop.comment or prop.label or f"Values of <{prop.iri}>.",
                }
            )
        return fields

    def _value_type(
        self,
        prop: PropertyDescriptor,
        cls: ClassDescriptor,
        targets: dict[URIRef, ClassTarget],
        imports: _ImportSet,
    ) -> str:
        """Python type expression of a property's values."""
        names: set[str] = set()
        for range_iri in prop.ranges:
            if range_iri in XSD_TYPES:
                expression, import_line = XSD_TYPES[range_iri]
                if import_line:
                    imports.stdlib.add(import_line)
                names.add(expression)
            elif range_iri == cls.iri:
                names.add(targets[cls.iri].class_name)
            elif range_iri in targets:
                target = targets[range_iri]
                names.add(imports.bind(target.import_path, target.class_name, runtime=False))
            elif str(range_iri).startswith(str(XSD)):
                names.add("str")
            else:
                names.add(imports.bind(RUNTIME_BASE_MODULE, RUNTIME_BASE_CLASS, runtime=False))

        if not names:
            names.add(imports.bind(RUNTIME_BASE_MODULE, RUNTIME_BASE_CLASS, runtime=False))
        return " | ".join(sorted(names))

    def _render(self, template_name: str, context: dict[str, Any]) -> str:
        return self._environment.get_template(template_name).render(**context)


# ================================================================================================ #
# Public Helpers                                                                                   #
# ================================================================================================ #


def generate_python_files(
    builder: OntologyModelBuilder,
    output_dir: str | Path,
    *,
    resolver: NamespaceResolver | None = None,
) -> list[EmittedClass]:
    """Build the model held by `builder` and generate its Python modules.

    Steps:
        1. Validate (and create) the output directory.
        2. Build the model.
        3. Resolve the output root against the base namespace.
        4. Emit every distinct, non-reserved, non-literal class.

    Raises:
        CodeGenerationError: For an invalid output directory, a failed build
            or a failed emission.
    """
    resolver = resolver or NamespaceResolver()
    directory = ensure_output_directory(output_dir)

    logger.debug("Building ontology model...")
    try:
        builder.build()
    except (ConsistencyError, ModelBuildingError) as exc:
        raise CodeGenerationError(f"The ontology model could not be built: {exc}") from exc

    output_root = resolve_output_root(directory, resolver.base_namespace)
    logger.info(
        "Generated files will be written to %s with base namespace %r",
        output_root,
        resolver.base_namespace,
    )

    emitter = CodeEmitter(resolver=resolver)
    return emitter.emit(builder.get_distinct_classes(), builder.get_properties(), output_root)


def is_eligible(cls: ClassDescriptor) -> bool:
    """Classes from reserved vocabularies and literal types are never generated."""
    return not is_reserved(cls.iri) and not cls.is_literal


def collect_ancestors(
    iri: URIRef,
    superclasses: dict[URIRef, tuple[URIRef, ...]],
) -> set[URIRef]:
    """Return every proper ancestor of `iri` reachable through `superclasses`."""
    seen: set[URIRef] = set()
    frontier = list(superclasses.get(iri, ()))
    while frontier:
        current = frontier.pop()
        if current in seen or current == iri:
            continue
        seen.add(current)
        frontier.extend(superclasses.get(current, ()))
    return seen


def direct_bases(
    cls: ClassDescriptor,
    targets: dict[URIRef, ClassTarget],
    superclasses: dict[URIRef, tuple[URIRef, ...]],
) -> list[URIRef]:
    """Generated direct superclasses of `cls`, minus those implied by another base.

    Dropping redundant bases keeps the method resolution order consistent.
    """
    candidates = [base for base in cls.superclasses if base in targets and base != cls.iri]
    return [
        base
        for base in candidates
        if not any(
            base in collect_ancestors(other, superclasses)
            for other in candidates
            if other != base
        )
    ]


def format_docstring(text: str, indent: int = 4) -> str:
    """Escape `text` for a triple-quoted docstring and indent continuation lines."""
    escaped = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if escaped.endswith('"'):
        head = escaped[:-1]
        # A quote right before the closing delimiter must itself be escaped.
        if (len(head) - len(head.rstrip("\\"))) % 2 == 0:
            escaped = head + '\\"'
    lines = [line.rstrip() for line in escaped.splitlines()] or [""]
    padding = " " * indent
    return "\n".join([lines[0], *[f"{padding}{line}" if line else "" for line in lines[1:]]])


def _ensure_package_markers(output_root: Path, directory: Path) -> None:
    """Create an empty `__init__.py` in every namespace directory below the output root."""
    current = directory
    while current != output_root and output_root in current.parents:
        marker = current / "__init__.py"
        if not marker.exists():
            marker.touch()
        current = current.parent
