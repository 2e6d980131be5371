#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

from __future__ import annotations

from pathlib import Path
import logging
import os
import re
import unicodedata

from ontogen.errors import CodeGenerationError

logger = logging.getLogger(__name__)

# Public constant: default directory for generated code when none is configured.
OUTPUT_ROOT: Path = Path("generated")


# ========================================================================== #
# PUBLIC API                                                                 #
# ========================================================================== #

def ensure_output_directory(directory: str | Path) -> Path:
    """Create (if needed) and return the absolute output directory.

    Args:
        directory:
            Requested output directory. Missing parents are created.

    Returns:
        The resolved directory path.

    Raises:
        CodeGenerationError: If the path exists but is not a directory, if it
            cannot be created, or if it is not writable.
    """
    path = Path(directory).expanduser().resolve()

    if path.exists():
        if not path.is_dir():
            raise CodeGenerationError(f"{path} must be a directory.")
        _check_writable(path)
        logger.info("Reused output folder at: %s", path)
        return path

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CodeGenerationError(f"The output directory {path} could not be created: {exc}") from exc
    _check_writable(path)

    logger.info("Created output folder at: %s", path)
    return path


def _check_writable(path: Path) -> None:
    if not os.access(path, os.W_OK | os.X_OK):
        raise CodeGenerationError(f"The output directory {path} is not writable.")


def resolve_output_root(directory: str | Path, base_namespace: str) -> Path:
    """Return the directory that generated namespaces are rooted at.

    A user may point the output at a directory that already spells out part
    of the base namespace, e.g. `out/com/example` with base namespace
    `com.example.model`. Writing `com/example/model/...` below it would
    duplicate the nesting, so the longest leading portion of the base
    namespace found at the end of the directory is stripped.

    Args:
        directory:
            Requested output directory.
        base_namespace:
            Dotted base namespace, possibly empty.

    Returns:
        The directory holding the topmost base namespace package, or
        `directory` unchanged if there is no overlap.
    """
    path = Path(directory)
    namespace_parts = [part for part in base_namespace.split(".") if part]
    directory_parts = path.parts

    for length in range(len(namespace_parts), 0, -1):
        portion = tuple(namespace_parts[:length])
        if len(directory_parts) > length and directory_parts[-length:] == portion:
            root = Path(*directory_parts[:-length])
            logger.debug("Base namespace %r overlaps %s, rooting output at %s", base_namespace, path, root)
            return root

    return path


def namespace_directory(output_root: Path, namespace: str) -> Path:
    """Return the directory of a dotted namespace below `output_root`."""
    return output_root.joinpath(*[part for part in namespace.split(".") if part])


# ========================================================================== #
# INTERNAL HELPERS (private)                                                 #
# ========================================================================== #

def slugify_identifier(name: str, *, lowercase: bool = True) -> str:
    """Convert an arbitrary string into an ASCII identifier fragment.

    Rules:
        - Remove accents/diacritics.
        - Lowercase everything (unless `lowercase` is False).
        - Replace all non-alphanumeric characters with underscores.
        - Collapse multiple underscores.
        - Strip leading/trailing underscores.
    """
    # Normalize Unicode -> remove accents
    name = unicodedata.normalize("NFKD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))

    if lowercase:
        name = name.lower()

    # Replace non-alphanumeric with underscores
    name = re.sub(r"[^A-Za-z0-9]+", "_", name)

    # Collapse multiple underscores
    name = re.sub(r"_+", "_", name)

    # Strip leading/trailing underscores
    return name.strip("_")
