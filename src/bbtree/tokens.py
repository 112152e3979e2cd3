#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/tokens.py
"""Token types produced by the BBCode tokenizer.

A token is the smallest lexical unit of BBCode: a literal text run, a start
tag such as ``[url="http://example.com"]``, or an end tag such as ``[/url]``.
Every token remembers its literal source form, so a token stream can always
be turned back into the text it came from.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


class TokenType(Enum):
    """Kinds of BBCode tokens."""

    TEXT = "text"
    START_TAG = "start_tag"
    END_TAG = "end_tag"


class TagAttributes(Mapping[str, str]):
    """Immutable attribute mapping of a start tag.

    An unnamed attribute such as the ``"2"`` in ``[size="2"]`` is the tag's
    default attribute. It is stored under a reserved key equal to the tag's
    own name, so ``attributes["size"] == "2"``, and is also available as
    :attr:`default`.

    Parameters
    ----------
    tag_name : str
        Name of the owning tag; doubles as the default attribute key
    values : Mapping or iterable of (str, str) pairs, optional
        Attribute values. Later pairs overwrite earlier ones.

    """

    def __init__(self, tag_name: str, values: Mapping[str, str] | Iterable[tuple[str, str]] = ()):
        """Create the attribute mapping for ``tag_name``."""
        self._tag_name = tag_name
        self._values: Mapping[str, str] = MappingProxyType(dict(values))

    @property
    def default_key(self) -> str:
        """Reserved key holding the tag's default attribute."""
        return self._tag_name

    @property
    def default(self) -> Optional[str]:
        """Value of the default ``[tag="value"]`` attribute, if present."""
        return self._values.get(self._tag_name)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagAttributes):
            return self._tag_name == other._tag_name and dict(self._values) == dict(other._values)
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TagAttributes({self._tag_name!r}, {dict(self._values)!r})"

    def filtered(self, keep: Iterable[str]) -> TagAttributes:
        """Return a copy restricted to the given keys."""
        allowed = set(keep)
        return TagAttributes(self._tag_name, {k: v for k, v in self._values.items() if k in allowed})

    def to_dict(self) -> dict[str, str]:
        """Return the attributes as a plain dictionary."""
        return dict(self._values)


@dataclass(frozen=True, eq=False)
class Token:
    """A single BBCode token.

    Parameters
    ----------
    token_type : TokenType
        Kind of token
    content : str
        Literal text for TEXT tokens, the tag name for START_TAG and END_TAG
    attributes : TagAttributes or None, default = None
        Attributes of a START_TAG; None for other token types
    raw_text : str or None, default = None
        Exact source text of a START_TAG, e.g. ``[size="2"]``

    Notes
    -----
    Tokens compare equal when their type and content match; attributes and
    raw text do not take part in equality.

    """

    token_type: TokenType
    content: str
    attributes: Optional[TagAttributes] = field(default=None, repr=False)
    raw_text: Optional[str] = field(default=None, repr=False)

    @property
    def is_text(self) -> bool:
        """Return True for literal text tokens."""
        return self.token_type is TokenType.TEXT

    @property
    def is_tag(self) -> bool:
        """Return True for start and end tag tokens."""
        return self.token_type is not TokenType.TEXT

    @property
    def name(self) -> str:
        """Tag name of a tag token.

        Raises
        ------
        AttributeError
            If called on a TEXT token

        """
        if self.token_type is TokenType.TEXT:
            raise AttributeError("Text tokens have no tag name")
        return self.content

    @property
    def source_text(self) -> str:
        """Literal form of the token as it appeared in the input."""
        if self.token_type is TokenType.START_TAG:
            return self.raw_text if self.raw_text is not None else f"[{self.content}]"
        if self.token_type is TokenType.END_TAG:
            return f"[/{self.content}]"
        return self.content

    def as_text(self) -> Token:
        """Return a TEXT token carrying this token's literal form."""
        if self.token_type is TokenType.TEXT:
            return self
        return text_token(self.source_text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.token_type is other.token_type and self.content == other.content

    def __hash__(self) -> int:
        return hash((self.token_type, self.content))

    def __str__(self) -> str:
        return f"{self.content} ({self.token_type.name})"


def text_token(content: str) -> Token:
    """Create a TEXT token."""
    return Token(TokenType.TEXT, content)


def start_tag_token(
    name: str, attributes: Mapping[str, str] | None = None, raw_text: str | None = None, **extra: Any
) -> Token:
    """Create a START_TAG token.

    Parameters
    ----------
    name : str
        Tag name
    attributes : Mapping, optional
        Attribute values; use the tag name as key for the default attribute
    raw_text : str, optional
        Source text of the tag. Defaults to ``[name]``.
    **extra
        Additional attributes, merged after ``attributes``

    """
    values = dict(attributes or {})
    values.update(extra)
    return Token(
        TokenType.START_TAG,
        name,
        attributes=TagAttributes(name, values),
        raw_text=raw_text if raw_text is not None else f"[{name}]",
    )


def end_tag_token(name: str) -> Token:
    """Create an END_TAG token."""
    return Token(TokenType.END_TAG, name)


def tokens_to_text(tokens: Iterable[Token]) -> str:
    """Concatenate the literal source form of every token."""
    return "".join(token.source_text for token in tokens)
