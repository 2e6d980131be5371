#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""OntoGen: close RDFS/OWL schemas and generate Python classes from them.

This module provides the main API functions for creating configuration
templates, building ontology models and generating code from user
configuration files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ontogen.building.builder import OntologyModelBuilder
from ontogen.generation.emitter import generate_python_files
from ontogen.utils.config import load_config, resolver_from_config, validate_user_config
from ontogen.utils.reasoning import resolve_consistency_check
from ontogen.utils.templates import create_config as _create_config

if TYPE_CHECKING:
    from ontogen.building.store import StatementStore
    from ontogen.generation.emitter import EmittedClass
    from ontogen.types import OntoGenConfigDict

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------------------------ #
# Load Config                                                                                      #
# ------------------------------------------------------------------------------------------------ #

def create_config(
    *,
    config_format: str = "json",
    output_dir: str | Path | None = None,
) -> Path:
    """Create an OntoGen configuration file.

    Args:
        config_format:
            Configuration format. Must be one of: "json", "yml", "yaml".
            Defaults to "json".
        output_dir:
            Optional destination directory. If None, the current working
            directory is used.

    Returns:
        Path to the created configuration file.
    """
    output_dir_path = Path(output_dir).expanduser().resolve() if output_dir is not None else None
    return _create_config(config_format=config_format, output_dir=output_dir_path)


def _load(config_path: str | Path) -> tuple[Path, OntoGenConfigDict]:
    config_file = Path(config_path).expanduser().resolve()
    config = load_config(config_file)
    validate_user_config(config)
    return config_file, config


def _prepare_builder(
    config_file: Path,
    config: OntoGenConfigDict,
    store: StatementStore | None,
) -> OntologyModelBuilder:
    """Create a builder holding every configured schema source."""
    builder = OntologyModelBuilder(
        store=store,
        consistency_check=resolve_consistency_check(config["general"]["consistency_check"]),
    )
    for source in config["sources"]:
        # Relative source paths are resolved against the config file.
        source_path = (config_file.parent / Path(source["path"]).expanduser()).resolve()
        builder.add_schema(
            source_path,
            base_iri=source.get("base_iri"),
            schema_format=source.get("format"),
        )
    return builder


# ------------------------------------------------------------------------------------------------ #
# Build Model                                                                                      #
# ------------------------------------------------------------------------------------------------ #

def build_model(
    config_path: str | Path,
    *,
    store: StatementStore | None = None,
) -> OntologyModelBuilder:
    """Load the configured schemas and build their closed model.

    Args:
        config_path:
            Path to the user's configuration file (JSON or YAML).
        store:
            Optional store receiving the model, e.g. one shared with a
            persistence runtime. A fresh in-memory store is used when None.

    Returns:
        The built `OntologyModelBuilder`.

    Raises:
        ValueError: If the configuration is invalid.
        ConsistencyError: If the schema is inconsistent.
        ModelBuildingError: If a source cannot be parsed or the build fails.
    """
    config_file, config = _load(config_path)

    logger.info("[Model Building] using configuration at %s", config_file)
    builder = _prepare_builder(config_file, config, store)
    builder.build()
    return builder


# ------------------------------------------------------------------------------------------------ #
# Generate Code                                                                                    #
# ------------------------------------------------------------------------------------------------ #

def generate_code(
    config_path: str | Path,
    *,
    output_dir: str | Path | None = None,
) -> list[EmittedClass]:
    """Generate Python modules for the schemas named in the configuration file.

    This function is the high-level entry point for code generation, used by
    both the CLI and Python callers.

    Args:
        config_path:
            Path to the user's configuration file (JSON or YAML).
        output_dir:
            Optional output directory overriding `generation.output_dir`.
            Relative paths resolve against the current working directory.

    Returns:
        The emitted classes.

    Raises:
        ValueError: If the configuration is invalid.
        ModelBuildingError: If a source cannot be parsed.
        CodeGenerationError: If the build or the emission fails.
    """
    config_file, config = _load(config_path)
    target = Path(output_dir if output_dir is not None else config["generation"]["output_dir"])

    logger.info("[Code Generation] started")
    builder = _prepare_builder(config_file, config, None)
    emitted = generate_python_files(builder, target, resolver=resolver_from_config(config))
    logger.info("[Code Generation] finished (%d classes)", len(emitted))
    return emitted
