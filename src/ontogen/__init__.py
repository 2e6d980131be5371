#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Top-level package for OntoGen."""

from __future__ import annotations

import logging
import importlib.metadata as importlib_metadata

from ontogen.building.builder import OntologyModelBuilder
from ontogen.building.store import StatementStore
from ontogen.errors import CodeGenerationError, ConsistencyError, ModelBuildingError, OntoGenError
from ontogen.generation.emitter import CodeEmitter, generate_python_files
from ontogen.generation.naming import NamespacePolicy, NamespaceResolver
from ontogen.model import ResourceObject
from ontogen.ontogen import build_model, create_config, generate_code

__all__ = [
    "CodeEmitter",
    "CodeGenerationError",
    "ConsistencyError",
    "ModelBuildingError",
    "NamespacePolicy",
    "NamespaceResolver",
    "OntoGenError",
    "OntologyModelBuilder",
    "ResourceObject",
    "StatementStore",
    "build_model",
    "create_config",
    "generate_code",
    "generate_python_files",
]

try:
    __version__ = importlib_metadata.version("ontogen")
except importlib_metadata.PackageNotFoundError:
    __version__ = "unknown"


logging.getLogger(__name__).addHandler(logging.NullHandler())
