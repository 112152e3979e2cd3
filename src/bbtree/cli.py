#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/cli.py
"""Command line interface for bbtree.

Reads BBCode from a file or stdin and prints the parse tree, the normalized
token stream, the JSON-serialized tree or the plain text content.

Usage
-----
    bbtree post.bbcode
    bbtree --format tokens --vocab tags.yaml post.bbcode
    cat post.bbcode | bbtree --format json --out tree.json

"""

from __future__ import annotations

import argparse
import logging
import sys
from io import TextIOWrapper
from pathlib import Path
from typing import Optional

from bbtree import __version__
from bbtree.ast.nodes import Root
from bbtree.ast.serialization import tree_to_json
from bbtree.ast.utils import walk_with_depth
from bbtree.ast.visitors import TreeFormatter
from bbtree.config import resolve_vocabulary
from bbtree.constants import (
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_OUTPUT_FORMAT,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    OUTPUT_FORMATS,
)
from bbtree.exceptions import BBTreeError, FileAccessError, FileError, ParsingError, ValidationError
from bbtree.logging_utils import configure_logging
from bbtree.options.bbcode import BBCodeParserOptions
from bbtree.parser import BBCodeParser, ParseResult
from bbtree.tokens import Token

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``bbtree`` command."""
    parser = argparse.ArgumentParser(
        prog="bbtree",
        description="Parse BBCode markup into a tree.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input file, or '-' for stdin (default)")
    parser.add_argument("--vocab", metavar="FILE", help="Tag vocabulary file (.json, .yaml, .yml or .toml)")
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output format (default: {DEFAULT_OUTPUT_FORMAT})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_NESTING_DEPTH,
        metavar="N",
        help=f"Maximum tag nesting depth, 0 for unlimited (default: {DEFAULT_MAX_NESTING_DEPTH})",
    )
    parser.add_argument("--strict", action="store_true", help="Treat structural problems as errors")
    parser.add_argument(
        "--enforce-attributes", action="store_true", help="Drop attributes the vocabulary does not declare"
    )
    parser.add_argument("--rich", action="store_true", help="Render the tree with rich when writing to a terminal")
    parser.add_argument("--out", "-o", metavar="FILE", help="Write output to FILE instead of stdout")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write log output to FILE")
    parser.add_argument("--trace", action="store_true", help="Verbose logging with timestamps")
    parser.add_argument("--version", action="version", version=f"bbtree {__version__}")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, (ValidationError, ValueError)):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    return EXIT_ERROR


def should_use_rich_output(args: argparse.Namespace, stream: TextIOWrapper | None = None) -> bool:
    """Return True when ``--rich`` is set and output goes to a terminal."""
    if not args.rich or args.out:
        return False
    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def format_tokens(tokens: list[Token]) -> str:
    """Render one token per line: type, content and attributes."""
    lines = []
    for token in tokens:
        line = f"{token.token_type.name:<9} {token.content!r}"
        if token.attributes:
            line += f" {token.attributes.to_dict()!r}"
        lines.append(line)
    return "\n".join(lines)


def render_output(result: ParseResult, output_format: str) -> Optional[str]:
    """Render a parse result in ``output_format``.

    Returns None for tree-based formats when the document has no tree.
    """
    if output_format == "tokens":
        return format_tokens(result.tokens)
    if result.tree is None:
        return None
    if output_format == "json":
        return tree_to_json(result.tree, indent=2)
    if output_format == "text":
        return result.text_content()
    return TreeFormatter().format(result.tree)


def print_rich_tree(tree: Root) -> None:
    """Print ``tree`` as a ``rich`` tree."""
    from rich.console import Console
    from rich.text import Text
    from rich.tree import Tree

    formatter = TreeFormatter()
    branches: list[Tree] = []
    for node, depth in walk_with_depth(tree):
        # Text labels keep BBCode brackets from being read as rich markup
        label = Text(node.accept(formatter))
        if depth == 0:
            branches = [Tree(label, guide_style="dim")]
            continue
        del branches[depth:]
        branches.append(branches[-1].add(label))

    Console().print(branches[0])


def _read_input(parser: BBCodeParser, input_arg: str) -> ParseResult:
    if input_arg == "-":
        return parser.parse(getattr(sys.stdin, "buffer", sys.stdin))
    return parser.parse(Path(input_arg))


def _write_output(text: str, out_path: Optional[str]) -> None:
    if out_path:
        try:
            Path(out_path).write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            raise FileAccessError(out_path, f"Cannot write output file {out_path}: {e}", original_error=e) from e
        logger.info(f"Wrote output to {out_path}")
    else:
        print(text)


def main(args: list[str] | None = None) -> int:
    """Run the ``bbtree`` command and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        vocabulary = resolve_vocabulary(parsed_args.vocab)
        options = BBCodeParserOptions(
            strict_mode=parsed_args.strict,
            max_nesting_depth=parsed_args.max_depth or None,
            enforce_allowed_attributes=parsed_args.enforce_attributes,
        )
        bbcode_parser = BBCodeParser(vocabulary=vocabulary, options=options)
        result = _read_input(bbcode_parser, parsed_args.input)

        if parsed_args.format == "tree" and result.tree is not None and should_use_rich_output(parsed_args):
            print_rich_tree(result.tree)
        else:
            rendered = render_output(result, parsed_args.format)
            if rendered is not None:
                _write_output(rendered, parsed_args.out)
    except (BBTreeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if result.failure is not None:
        print(f"Invalid document: {result.failure.message}", file=sys.stderr)
        return EXIT_PARSING_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
