#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/options/base.py
"""Base classes for parser options.

This module defines the foundation classes for the frozen option dataclasses
used throughout bbtree.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from bbtree.constants import DEFAULT_STRICT_MODE


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> list[str]:
        """Return the names of all option fields."""
        return [f.name for f in fields(cls)]  # type: ignore[arg-type]


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Parameters
    ----------
    strict_mode : bool, default False
        Raise ``StructuralError`` when the document is structurally invalid
        instead of returning a failed result.

    """

    strict_mode: bool = field(
        default=DEFAULT_STRICT_MODE,
        metadata={"help": "Raise an error on unbalanced or mismatched tags", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is invalid.

        """
        if not isinstance(self.strict_mode, bool):
            raise ValueError(f"strict_mode must be a boolean, got {self.strict_mode!r}")
