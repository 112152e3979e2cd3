#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the bbtree library.

This module centralizes the regular expression fragments, limits and default
configuration values used across bbtree. Constants are organized by category:

1. Type Definitions - Literal types and type aliases
2. Lexer Grammar - Character classes for tag names, attributes and values
3. Parsing Behavior - Default limits and option values
4. Default Vocabulary - The tag table recognized out of the box
5. Configuration Files - Config discovery names
6. CLI - Output formats and exit codes
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

OutputFormat = Literal["tree", "tokens", "json", "text"]

# =============================================================================
# Lexer Grammar
# =============================================================================

# Characters allowed in an attribute name: [A-Za-z0-9._:;/-]
ATTRIBUTE_NAME_CHARS = r"[a-zA-Z0-9.\-_:;/]"

# Characters allowed in an attribute value, including whitespace and '#'
ATTRIBUTE_VALUE_CHARS = r"[a-zA-Z0-9.\-_:;#/\s]"

# Unquoted default values ([size=2]) stop at whitespace
BARE_VALUE_CHARS = r"[a-zA-Z0-9.\-_:;#/]"

# Tag names are one or more word characters
TAG_NAME_PATTERN = r"\w+"

# =============================================================================
# Parsing Behavior
# =============================================================================

# Maximum nesting depth accepted by the tree builder. ``None`` disables the bound.
DEFAULT_MAX_NESTING_DEPTH: int | None = 256

DEFAULT_STRICT_MODE = False
DEFAULT_ENFORCE_ALLOWED_ATTRIBUTES = False

# Encoding detection for bytes and file input
DEFAULT_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")
DEFAULT_CHARDET_SAMPLE_SIZE = 8192
DEFAULT_CHARDET_CONFIDENCE_THRESHOLD = 0.7

# =============================================================================
# Default Vocabulary
# =============================================================================

# name -> (no_nesting, allowed attribute names)
DEFAULT_TAG_DEFINITIONS: dict[str, tuple[bool, tuple[str, ...]]] = {
    "b": (False, ()),
    "i": (False, ()),
    "u": (False, ()),
    "s": (False, ()),
    "samp": (False, ()),
    "code": (True, ()),
    "pre": (True, ()),
    "noparse": (True, ()),
    "color": (False, ("color",)),
    "colour": (False, ("colour",)),
    "size": (False, ("size",)),
    "url": (False, ("url",)),
    "img": (False, ("img", "width", "height", "alt")),
    "q": (False, ("q",)),
    "blockquote": (False, ("blockquote",)),
}

# =============================================================================
# Configuration Files
# =============================================================================

CONFIG_FILENAMES = (".bbtree.toml", ".bbtree.yaml", ".bbtree.yml", ".bbtree.json")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_SECTION = "bbtree"
VOCABULARY_ENV_VAR = "BBTREE_VOCAB"

# Keys accepted in vocabulary configuration entries
NO_NESTING_KEYS = ("no_nesting", "noNesting")
ALLOWED_ATTRIBUTES_KEYS = ("allowed_attributes", "allowedAttributes")

# =============================================================================
# CLI
# =============================================================================

DEFAULT_OUTPUT_FORMAT: OutputFormat = "tree"
OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("tree", "tokens", "json", "text")

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
