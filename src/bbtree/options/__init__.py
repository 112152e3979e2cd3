#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for bbtree parsing.

Options are frozen dataclasses; use ``create_updated`` to derive modified
copies.
"""

from __future__ import annotations

from bbtree.options.base import BaseParserOptions, CloneFrozenMixin
from bbtree.options.bbcode import BBCodeParserOptions

__all__ = [
    "BaseParserOptions",
    "BBCodeParserOptions",
    "CloneFrozenMixin",
]
