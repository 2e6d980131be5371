#  Software Name: OntoGen
#  SPDX-FileCopyrightText: Copyright (c) Orange SA
#  SPDX-License-Identifier: MIT
#
#  This software is distributed under the MIT license, the text of which is available at https://opensource.org/license/MIT/ or see the "LICENSE" file for more details.
#
#  Authors: See CONTRIBUTORS.txt
#  Software description: An RDFS/OWL schema closure and Python code generation solution.
#

"""Exception hierarchy shared by the building and generation stages."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ontogen.utils.reasoning import ValidityReport


class OntoGenError(Exception):
    """Base class for all OntoGen failures."""


class ConsistencyError(OntoGenError):
    """The raw schema graph failed the consistency check.

    Raised before any statement is copied into the store.
    """

    def __init__(self, message: str, report: ValidityReport | None = None) -> None:
        super().__init__(message)
        self.report = report


class ModelBuildingError(OntoGenError):
    """Seeding, copying, rule execution or normalization failed.

    The store is left in an unspecified state and must not be reused.
    """


class CodeGenerationError(OntoGenError):
    """The output path is invalid or emitting a class failed."""
