#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Shared type aliases and TypedDict shapes for configuration files."""

from __future__ import annotations

from typing import TypedDict

from rdflib.term import Node

Statement = tuple[Node, Node, Node]


class GeneralConfigDict(TypedDict):
    consistency_check: str


class SourceConfigDict(TypedDict, total=False):
    path: str
    base_iri: str | None
    format: str | None


class GenerationConfigDict(TypedDict):
    base_namespace: str
    namespace_policy: str
    namespace_mapping: dict[str, str]
    output_dir: str


class OntoGenConfigDict(TypedDict):
    general: GeneralConfigDict
    sources: list[SourceConfigDict]
    generation: GenerationConfigDict
