#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/vocabulary.py
"""Tag vocabulary for BBCode parsing.

A vocabulary describes which tag names the tokenizer recognizes, whether a
tag forbids nested markup ("no-nesting" tags such as ``[code]``), and which
attribute names the tag declares. Vocabularies are immutable once built and
can be shared freely between parsers and threads.

Examples
--------
Build a vocabulary from a configuration mapping:

    >>> from bbtree.vocabulary import TagVocabulary
    >>> vocab = TagVocabulary.from_mapping({"b": {}, "code": {"no_nesting": True}})
    >>> vocab.is_no_nesting("code")
    True
    >>> "i" in vocab
    False

"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from bbtree.constants import (
    ALLOWED_ATTRIBUTES_KEYS,
    DEFAULT_TAG_DEFINITIONS,
    NO_NESTING_KEYS,
    TAG_NAME_PATTERN,
)
from bbtree.exceptions import VocabularyError

logger = logging.getLogger(__name__)

_TAG_NAME_RE = re.compile(TAG_NAME_PATTERN)


@dataclass(frozen=True)
class BBTag:
    """A recognized BBCode tag.

    Parameters
    ----------
    name : str
        Tag name as written between the brackets (e.g., 'b', 'url')
    no_nesting : bool, default False
        Whether the tag body is opaque text that must never be parsed as markup
    allowed_attributes : frozenset of str, default empty
        Attribute names the tag declares. Not enforced unless the parser is
        configured to do so.

    """

    name: str
    no_nesting: bool = False
    allowed_attributes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate the tag name and normalize the attribute collection."""
        if not isinstance(self.name, str) or not _TAG_NAME_RE.fullmatch(self.name):
            raise VocabularyError(f"Invalid tag name: {self.name!r}", tag_name=str(self.name))
        if not isinstance(self.allowed_attributes, frozenset):
            object.__setattr__(self, "allowed_attributes", frozenset(self.allowed_attributes))

    def allows_attribute(self, attribute_name: str) -> bool:
        """Return True if the tag declares the given attribute.

        The tag's own name always counts as declared, since that is the key
        holding its default ``[tag="value"]`` attribute.
        """
        return attribute_name == self.name or attribute_name in self.allowed_attributes


class TagVocabulary(Mapping[str, BBTag]):
    """Read-only mapping of tag name to ``BBTag``.

    Parameters
    ----------
    tags : iterable of BBTag, optional
        Tags to include. Names must be unique.

    Raises
    ------
    VocabularyError
        If two tags share a name

    """

    def __init__(self, tags: Iterable[BBTag] = ()):
        """Build the vocabulary from an iterable of tags."""
        entries: dict[str, BBTag] = {}
        for tag in tags:
            if not isinstance(tag, BBTag):
                raise VocabularyError(f"Vocabulary entries must be BBTag instances, got {type(tag).__name__}")
            if tag.name in entries:
                raise VocabularyError(f"Duplicate tag in vocabulary: {tag.name!r}", tag_name=tag.name)
            entries[tag.name] = tag
        self._tags: Mapping[str, BBTag] = MappingProxyType(entries)

    def __getitem__(self, name: str) -> BBTag:
        return self._tags[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"TagVocabulary({sorted(self._tags)!r})"

    def is_no_nesting(self, name: str) -> bool:
        """Return True if ``name`` is a recognized no-nesting tag."""
        tag = self._tags.get(name)
        return tag is not None and tag.no_nesting

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TagVocabulary:
        """Build a vocabulary from a configuration mapping.

        Parameters
        ----------
        config : Mapping
            Mapping of tag name to an entry mapping with optional
            ``no_nesting`` (bool) and ``allowed_attributes`` (list of str)
            keys. The camelCase spellings ``noNesting`` and
            ``allowedAttributes`` are accepted as well. An entry of ``None``
            is treated as an empty mapping.

        Returns
        -------
        TagVocabulary
            The vocabulary described by ``config``

        Raises
        ------
        VocabularyError
            If the mapping or any entry is malformed

        """
        if not isinstance(config, Mapping):
            raise VocabularyError(f"Vocabulary configuration must be a mapping, got {type(config).__name__}")

        tags = [_tag_from_entry(name, entry) for name, entry in config.items()]
        logger.debug(f"Built vocabulary with {len(tags)} tags")
        return cls(tags)


def _first_present(entry: Mapping[str, Any], keys: tuple[str, ...], default: Any) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return default


def _tag_from_entry(name: Any, entry: Any) -> BBTag:
    """Convert one configuration entry into a ``BBTag``."""
    if not isinstance(name, str):
        raise VocabularyError(f"Tag names must be strings, got {type(name).__name__}")
    if entry is None:
        entry = {}
    if not isinstance(entry, Mapping):
        raise VocabularyError(f"Definition of tag {name!r} must be a mapping", tag_name=name)

    no_nesting = _first_present(entry, NO_NESTING_KEYS, False)
    if not isinstance(no_nesting, bool):
        raise VocabularyError(f"'no_nesting' of tag {name!r} must be a boolean", tag_name=name)

    attributes = _first_present(entry, ALLOWED_ATTRIBUTES_KEYS, ())
    if isinstance(attributes, str) or not isinstance(attributes, Iterable):
        raise VocabularyError(f"'allowed_attributes' of tag {name!r} must be a list of strings", tag_name=name)
    attributes = list(attributes)
    if not all(isinstance(attr, str) for attr in attributes):
        raise VocabularyError(f"'allowed_attributes' of tag {name!r} must be a list of strings", tag_name=name)

    return BBTag(name=name, no_nesting=no_nesting, allowed_attributes=frozenset(attributes))


def default_vocabulary() -> TagVocabulary:
    """Return the built-in vocabulary.

    Recognizes ``b i u s samp code pre noparse color colour size url img q
    blockquote``; ``code``, ``pre`` and ``noparse`` are no-nesting tags.
    """
    return TagVocabulary(
        BBTag(name=name, no_nesting=no_nesting, allowed_attributes=frozenset(attributes))
        for name, (no_nesting, attributes) in DEFAULT_TAG_DEFINITIONS.items()
    )
