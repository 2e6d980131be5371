"""Template file helpers for OntoGen.

This module copies the packaged example configuration files into a target
directory. It is a thin wrapper around importlib.resources and shutil used
by the high-level OntoGen API function that creates starter configurations.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
import logging
import shutil

logger = logging.getLogger(__name__)

_TEMPLATE_FILES = {
    "json": "ontogen_config.json",
    "yml": "ontogen_config.yml",
    "yaml": "ontogen_config.yml",
}


def create_config(*, config_format: str = "json", output_dir: Path | None = None) -> Path:
    """Copy the packaged configuration template in the requested format.

    Args:
        config_format: One of "json", "yml", "yaml" (case-insensitive).
        output_dir: Destination directory, created if missing. Defaults to the CWD.

    Returns:
        Path to the created configuration file.

    Raises:
        ValueError: If `config_format` is not supported.
    """
    file_name = _TEMPLATE_FILES.get(config_format.lower().lstrip("."))
    if file_name is None:
        raise ValueError(f"Unsupported config format {config_format!r}. Options: json | yaml | yml")

    src = resources.files("ontogen") / "resources" / "templates" / file_name
    destination = output_dir if output_dir is not None else Path.cwd()
    destination.mkdir(parents=True, exist_ok=True)

    dst = destination / file_name
    shutil.copy(str(src), dst)
    logger.info("Created configuration file at: %s", dst)
    return dst
