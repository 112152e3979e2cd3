#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/treebuilder.py
"""Parse tree construction from normalized tokens.

The builder consumes the token stream front to back and nests tags by
matching each end tag against the innermost open tag:

- TEXT tokens become ``TextNode`` leaves of the innermost open scope.
- A START_TAG opens a new scope. The finished ``TagNode`` is attached to its
  parent only when its END_TAG arrives.
- An END_TAG must name the innermost open tag exactly (case-sensitive).

Structural problems are returned as a ``BuildFailure`` value rather than
raised. A failure anywhere invalidates the whole document; a malformed
subtree is never dropped silently.

Scopes are kept on an explicit stack instead of the Python call stack, so
input nesting depth cannot cause a ``RecursionError``. A configurable depth
limit makes pathological input fail fast.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NoReturn, Optional, Union

from bbtree.ast.nodes import Root, TagNode, TextNode
from bbtree.constants import DEFAULT_MAX_NESTING_DEPTH
from bbtree.exceptions import StructuralError, ValidationError
from bbtree.tokens import Token, TokenType

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    """Why a token stream could not be built into a tree."""

    UNCLOSED_TAG = "unclosed_tag"
    MISMATCHED_END_TAG = "mismatched_end_tag"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"


@dataclass(frozen=True)
class BuildSuccess:
    """Successful build result.

    Parameters
    ----------
    tree : Root
        The complete parse tree

    """

    tree: Root

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class BuildFailure:
    """Structural failure result.

    Parameters
    ----------
    reason : FailureReason
        Kind of failure
    tag_name : str
        The offending tag: the unclosed tag, the mismatched end tag, or the
        start tag that exceeded the depth limit
    token_index : int
        Position of the offending token in the normalized stream; for
        unclosed tags this is the position of the unclosed start tag
    expected : str or None, default = None
        Name of the innermost open tag when the failure occurred, if any

    """

    reason: FailureReason
    tag_name: str
    token_index: int
    expected: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        """Human-readable description of the failure."""
        if self.reason is FailureReason.UNCLOSED_TAG:
            return f"Tag [{self.tag_name}] opened at token {self.token_index} is never closed"
        if self.reason is FailureReason.MISMATCHED_END_TAG:
            if self.expected is None:
                return f"End tag [/{self.tag_name}] at token {self.token_index} has no matching start tag"
            return (
                f"End tag [/{self.tag_name}] at token {self.token_index} does not match "
                f"the open tag [{self.expected}]"
            )
        return f"Tag [{self.tag_name}] at token {self.token_index} exceeds the maximum nesting depth"

    def raise_error(self) -> NoReturn:
        """Raise this failure as a ``StructuralError``."""
        raise StructuralError(self)


BuildResult = Union[BuildSuccess, BuildFailure]


@dataclass
class _Scope:
    """An open tag awaiting its end tag."""

    node: TagNode
    token_index: int


class TreeBuilder:
    """Build parse trees from normalized token streams.

    Parameters
    ----------
    max_depth : int or None, default = 256
        Maximum number of simultaneously open tags. ``None`` removes the
        limit; the builder still never recurses.

    Raises
    ------
    ValidationError
        If ``max_depth`` is not a positive integer or None

    Examples
    --------
        >>> from bbtree.tokens import end_tag_token, start_tag_token, text_token
        >>> tokens = [start_tag_token("b"), text_token("bold"), end_tag_token("b")]
        >>> result = TreeBuilder().build(tokens, source_text="[b]bold[/b]")
        >>> result.ok, result.tree.children[0].name
        (True, 'b')

    """

    def __init__(self, max_depth: Optional[int] = DEFAULT_MAX_NESTING_DEPTH):
        """Initialize the builder with a nesting limit."""
        if max_depth is not None and (isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1):
            raise ValidationError(
                f"max_depth must be a positive integer or None, got {max_depth!r}",
                parameter_name="max_depth",
                parameter_value=max_depth,
            )
        self.max_depth = max_depth

    def build(self, tokens: list[Token], source_text: str = "") -> BuildResult:
        """Build a tree from ``tokens``.

        Parameters
        ----------
        tokens : list of Token
            Normalized tokens in document order. The list is not modified.
        source_text : str, default = ""
            Source text recorded on the ``Root``

        Returns
        -------
        BuildSuccess or BuildFailure
            The tree, or a description of the first structural problem

        """
        root = Root(source_text=source_text)
        # Reversed so that pop() yields the next token in document order
        stack = list(reversed(tokens))
        scopes: list[_Scope] = []
        index = -1

        while stack:
            token = stack.pop()
            index += 1

            if token.token_type is TokenType.TEXT:
                (scopes[-1].node.children if scopes else root.children).append(TextNode(token.content))

            elif token.token_type is TokenType.START_TAG:
                if self.max_depth is not None and len(scopes) >= self.max_depth:
                    return self._fail(FailureReason.MAX_DEPTH_EXCEEDED, token.content, index, scopes)
                scopes.append(_Scope(TagNode(name=token.content, attributes=token.attributes), index))

            else:
                open_name = scopes[-1].node.name if scopes else None
                if token.content != open_name:
                    return self._fail(FailureReason.MISMATCHED_END_TAG, token.content, index, scopes)
                closed = scopes.pop()
                (scopes[-1].node.children if scopes else root.children).append(closed.node)

        if scopes:
            unclosed = scopes[-1]
            return self._fail(FailureReason.UNCLOSED_TAG, unclosed.node.name, unclosed.token_index, scopes)

        return BuildSuccess(root)

    @staticmethod
    def _fail(reason: FailureReason, tag_name: str, index: int, scopes: list[_Scope]) -> BuildFailure:
        expected = scopes[-1].node.name if scopes else None
        failure = BuildFailure(reason=reason, tag_name=tag_name, token_index=index, expected=expected)
        logger.debug(f"Tree build failed: {failure.message}")
        return failure


def build_tree(
    tokens: list[Token], source_text: str = "", max_depth: Optional[int] = DEFAULT_MAX_NESTING_DEPTH
) -> BuildResult:
    """Build a tree from normalized tokens with a one-off ``TreeBuilder``."""
    return TreeBuilder(max_depth=max_depth).build(tokens, source_text=source_text)
