"""CLI-facing helpers for OntoGen.

Logging setup, the --log level parser and the ASCII banner shown before a
run. Nothing here is used by the library API.
"""

from __future__ import annotations

from collections.abc import Callable
import argparse
import logging
import random
from typing import cast

from art import text2art as _text2art  # pyright: ignore[reportUnknownVariableType]

logger = logging.getLogger(__name__)

# ================================================================================================ #
# Third-Party Wrappers to please Pyright/BasedPyright                                              #
# ================================================================================================ #

TextToArtCallable = Callable[..., str]
text2art: TextToArtCallable = cast(TextToArtCallable, _text2art)

# ================================================================================================ #
# Logging Configuration                                                                            #
# ================================================================================================ #

LOG_FORMAT = (
    "%(asctime)s.%(msecs)03d | %(levelname)-8s | "
    "%(name)s:%(funcName)s:%(lineno)d - %(message)s"
)
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    # Aliases
    "warn": logging.WARNING,
    "err": logging.ERROR,
    "crit": logging.CRITICAL,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure the root logger for a CLI run.

    rdflib and owlready2 log verbosely at DEBUG; they are kept at WARNING
    unless the requested level is stricter.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for noisy in ("rdflib", "owlready2"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


def parse_log_level(value: str) -> int:
    """Parse the value of the --log argument.

    Accepts level names (case-insensitive, with the aliases warn, err and
    crit) and the numeric levels 10, 20, 30, 40 and 50.

    Raises:
        argparse.ArgumentTypeError: If the value names no known level.
    """
    value = value.strip()

    if value.isdigit():
        numeric = int(value)
        if numeric in set(LOG_LEVELS.values()):
            return numeric
        raise argparse.ArgumentTypeError(
            f"Invalid numeric log level: {numeric}. Allowed values: 10, 20, 30, 40, 50."
        )

    level = LOG_LEVELS.get(value.lower())
    if level is not None:
        return level

    raise argparse.ArgumentTypeError(
        f"Invalid log level '{value}'. "
        "Use names (debug, info, warning, error, critical), "
        "aliases (warn, err, crit) or numeric values (10, 20, 30, 40, 50)."
    )


# ================================================================================================ #
# ASCII Header                                                                                     #
# ================================================================================================ #

_FONT_STYLES = ["standard", "small", "doom", "slant", "big"]


def print_ascii_header(title: str = "OntoGen") -> None:
    """Print an ASCII-art banner using a randomly selected font."""
    header = text2art(title, font=random.choice(_FONT_STYLES))

    # Explicitly user-facing CLI output; prints are intentional here.
    print("\n")  # noqa: T201
    print(header)  # noqa: T201
