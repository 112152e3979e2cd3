#  Copyright (c) 2025 Tom Villani, Ph.D.

# bbtree/options/bbcode.py
"""Configuration options for BBCode parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from bbtree.constants import DEFAULT_ENFORCE_ALLOWED_ATTRIBUTES, DEFAULT_MAX_NESTING_DEPTH
from bbtree.options.base import BaseParserOptions


@dataclass(frozen=True)
class BBCodeParserOptions(BaseParserOptions):
    """Configuration options for BBCode-to-tree parsing.

    Parameters
    ----------
    strict_mode : bool, default False
        Raise ``StructuralError`` for structurally invalid documents instead
        of returning a result with ``is_valid == False``.
    max_nesting_depth : int or None, default 256
        Maximum number of simultaneously open tags. Deeper input fails with
        ``FailureReason.MAX_DEPTH_EXCEEDED``. ``None`` removes the bound.
    enforce_allowed_attributes : bool, default False
        Drop start-tag attributes that the vocabulary does not declare for
        the tag. When False they are kept as opaque key/value pairs.

    Examples
    --------
        >>> from bbtree.parser import BBCodeParser
        >>> options = BBCodeParserOptions(max_nesting_depth=32)
        >>> result = BBCodeParser(options=options).parse("[b]Bold text[/b]")

    """

    max_nesting_depth: Optional[int] = field(
        default=DEFAULT_MAX_NESTING_DEPTH,
        metadata={"help": "Maximum tag nesting depth (None for unlimited)", "type": int, "importance": "security"},
    )
    enforce_allowed_attributes: bool = field(
        default=DEFAULT_ENFORCE_ALLOWED_ATTRIBUTES,
        metadata={"help": "Drop attributes not declared by the tag vocabulary", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate options by calling parent validation."""
        super().__post_init__()
        depth = self.max_nesting_depth
        if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 1):
            raise ValueError(f"max_nesting_depth must be a positive integer or None, got {depth!r}")
