"""Configuration loading and validation for OntoGen.

Configuration files are JSON or YAML documents with three sections:
`general`, `sources` and `generation`. Loading only parses the file;
`validate_user_config` checks the shape and fills in defaults so that callers
can index the dictionary without further checks.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, cast

import yaml

from ontogen.generation.naming import NamespacePolicy, NamespaceResolver
from ontogen.types import OntoGenConfigDict
from ontogen.utils.reasoning import CONSISTENCY_CHECKS
from ontogen.vocabulary import SchemaFormat

logger = logging.getLogger(__name__)

CONFIG_EXTENSIONS = (".json", ".yml", ".yaml")

DEFAULT_GENERAL: dict[str, Any] = {
    "consistency_check": "hermit",
}
DEFAULT_GENERATION: dict[str, Any] = {
    "base_namespace": "",
    "namespace_policy": NamespacePolicy.IRI.value,
    "namespace_mapping": {},
    "output_dir": "generated",
}


# ================================================================================================ #
# Loading                                                                                          #
# ================================================================================================ #


def load_config(path: str | Path) -> OntoGenConfigDict:
    """Parse a JSON or YAML configuration file.

    Args:
        path: Path to a `.json`, `.yml` or `.yaml` file.

    Returns:
        The raw configuration mapping (not yet validated).

    Raises:
        ValueError: If the extension is unsupported or the document is not a mapping.
        OSError: If the file cannot be read.
    """
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in CONFIG_EXTENSIONS:
        message = f"Unsupported config file extension {suffix!r}. Expected .json, .yaml, or .yml."
        raise ValueError(message)

    with config_path.open(encoding="utf-8") as handle:
        if suffix == ".json":
            data = json.load(handle)
        else:
            data = yaml.safe_load(handle)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level.")

    logger.debug("Loaded configuration from %s", config_path)
    return cast(OntoGenConfigDict, data)


# ================================================================================================ #
# Validation                                                                                       #
# ================================================================================================ #


def validate_user_config(config: OntoGenConfigDict) -> None:
    """Validate `config` in place, filling in defaults for optional keys.

    Raises:
        ValueError: On the first invalid section or value.
    """
    raw = cast(dict[str, Any], config)

    general = raw.setdefault("general", {})
    if not isinstance(general, dict):
        raise ValueError("'general' must be a mapping.")
    for key, value in DEFAULT_GENERAL.items():
        general.setdefault(key, value)
    if general["consistency_check"] not in CONSISTENCY_CHECKS:
        allowed = ", ".join(sorted(CONSISTENCY_CHECKS))
        raise ValueError(f"general.consistency_check must be one of: {allowed}.")

    sources = raw.get("sources")
    if not isinstance(sources, list) or not sources:
        raise ValueError("'sources' must be a non-empty list.")
    for index, source in enumerate(sources):
        _validate_source(index, source)

    generation = raw.setdefault("generation", {})
    if not isinstance(generation, dict):
        raise ValueError("'generation' must be a mapping.")
    for key, value in DEFAULT_GENERATION.items():
        generation.setdefault(key, value)

    if not isinstance(generation["namespace_mapping"], dict) or not all(
        isinstance(key, str) and isinstance(value, str)
        for key, value in generation["namespace_mapping"].items()
    ):
        raise ValueError("generation.namespace_mapping must map IRI prefixes to dotted namespaces.")
    if not isinstance(generation["output_dir"], str) or not generation["output_dir"]:
        raise ValueError("generation.output_dir must be a non-empty string.")

    # Builds and discards a resolver so policy and namespace errors surface here.
    resolver_from_config(config)


def resolver_from_config(config: OntoGenConfigDict) -> NamespaceResolver:
    """Build the namespace resolver described by the `generation` section."""
    generation = config["generation"]
    try:
        return NamespaceResolver(
            base_namespace=generation["base_namespace"] or "",
            policy=NamespacePolicy(generation["namespace_policy"]),
            mapping=dict(generation["namespace_mapping"]),
        )
    except ValueError as exc:
        raise ValueError(f"Invalid generation config: {exc}") from exc


def _validate_source(index: int, source: Any) -> None:
    if not isinstance(source, dict) or not isinstance(source.get("path"), str):
        raise ValueError(f"sources[{index}] must be a mapping with a 'path' string.")

    schema_format = source.get("format")
    if schema_format is not None:
        if not isinstance(schema_format, str):
            raise ValueError(f"sources[{index}].format must be a string or null.")
        try:
            SchemaFormat.from_token(schema_format)
        except ValueError as exc:
            raise ValueError(f"sources[{index}].format: {exc}") from exc

    base_iri = source.get("base_iri")
    if base_iri is not None and not isinstance(base_iri, str):
        raise ValueError(f"sources[{index}].base_iri must be a string or null.")
