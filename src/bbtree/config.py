#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/config.py
"""Vocabulary configuration file discovery and loading.

Tag vocabularies can be stored in JSON, YAML or TOML files. The tag mapping
may sit at the top level of the file or under a ``tags`` key; in
``pyproject.toml`` it is read from the ``[tool.bbtree]`` table, e.g.::

    [tool.bbtree.tags]
    b = {}
    code = { no_nesting = true }
    url = { allowed_attributes = ["url"] }

"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from bbtree.constants import (
    CONFIG_FILENAMES,
    PYPROJECT_FILENAME,
    PYPROJECT_TOOL_SECTION,
    VOCABULARY_ENV_VAR,
)
from bbtree.exceptions import ConfigFormatError, FileAccessError, FileNotFoundError, VocabularyError
from bbtree.vocabulary import TagVocabulary, default_vocabulary

logger = logging.getLogger(__name__)

TAGS_KEY = "tags"


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.bbtree]`` table from a pyproject.toml file.

    Returns an empty dict when the table is absent.

    Raises
    ------
    ConfigFormatError
        If the file is not valid TOML or the table is not a table

    """
    config = _load_toml_config(pyproject_path)
    section = config.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigFormatError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, "
            f"got {type(section).__name__}",
            file_path=str(pyproject_path),
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a vocabulary file by searching parent directories.

    Walks from ``start_dir`` up to the filesystem root. In each directory
    the dedicated files (``.bbtree.toml``, ``.bbtree.yaml``, ``.bbtree.yml``,
    ``.bbtree.json``) are checked first, then a ``pyproject.toml`` that has a
    ``[tool.bbtree]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found, or None

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigFormatError as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration file into a dictionary.

    The format is chosen by extension: ``.json``, ``.yaml``/``.yml`` or
    ``.toml``. A ``pyproject.toml`` yields only its ``[tool.bbtree]`` table.

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ConfigFormatError
        If the extension is unsupported or the content cannot be decoded

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileNotFoundError(str(config_path), f"Config file not found: {config_path}")

    ext = config_path.suffix.lower()
    if config_path.name == PYPROJECT_FILENAME:
        return _load_pyproject_section(config_path)
    if ext == ".toml":
        return _load_toml_config(config_path)
    if ext == ".json":
        return _load_json_config(config_path)
    if ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    raise ConfigFormatError(
        f"Unsupported config file format: {ext or config_path.name}. Use .json, .toml, or .yaml",
        file_path=str(config_path),
    )


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFormatError(f"Invalid TOML in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise FileAccessError(str(config_path), original_error=e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigFormatError(f"Invalid JSON in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise FileAccessError(str(config_path), original_error=e) from e

    if not isinstance(config, dict):
        raise ConfigFormatError(
            f"JSON config file must contain an object, got {type(config).__name__}", file_path=str(config_path)
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise FileAccessError(str(config_path), original_error=e) from e

    # An empty YAML document describes an empty vocabulary
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigFormatError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", file_path=str(config_path)
        )
    return config


def _unwrap_tags(config: Dict[str, Any]) -> Any:
    """Return the tag mapping, unwrapping a lone ``tags`` table.

    ``tags`` is a wrapper only when it is the sole top-level key and holds a
    mapping of tag definitions. Otherwise the top level is the tag mapping,
    in which a tag may itself be named ``tags``.
    """
    wrapped = config.get(TAGS_KEY)
    if set(config) != {TAGS_KEY} or not isinstance(wrapped, dict):
        return config
    if all(entry is None or isinstance(entry, dict) for entry in wrapped.values()):
        return wrapped
    return config


def load_vocabulary(config_path: Path | str) -> TagVocabulary:
    """Load a tag vocabulary from a configuration file.

    The tags may sit at the top level of the file or under a ``tags`` key
    that is the only top-level key; see :func:`_unwrap_tags`.

    Parameters
    ----------
    config_path : Path or str
        Path to a ``.json``, ``.yaml``/``.yml``, ``.toml`` or
        ``pyproject.toml`` file

    Returns
    -------
    TagVocabulary
        The vocabulary described by the file

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ConfigFormatError
        If the file cannot be decoded
    VocabularyError
        If the decoded tag mapping is malformed

    """
    config = load_config_file(config_path)
    tags = _unwrap_tags(config)
    try:
        vocabulary = TagVocabulary.from_mapping(tags)
    except VocabularyError as e:
        raise VocabularyError(f"{e.message} (in {config_path})", tag_name=e.tag_name, original_error=e) from e

    logger.info(f"Loaded vocabulary with {len(vocabulary)} tags from {config_path}")
    return vocabulary


def resolve_vocabulary(
    config_path: Path | str | None = None,
    start_dir: Optional[Path] = None,
) -> TagVocabulary:
    """Resolve the vocabulary to use, honoring the lookup order.

    1. ``config_path`` when given
    2. The file named by the ``BBTREE_VOCAB`` environment variable
    3. A file found by ``find_config_in_parents(start_dir)``
    4. ``default_vocabulary()``
    """
    if config_path is not None:
        return load_vocabulary(config_path)

    env_path = os.environ.get(VOCABULARY_ENV_VAR)
    if env_path:
        logger.debug(f"Using vocabulary from ${VOCABULARY_ENV_VAR}: {env_path}")
        return load_vocabulary(env_path)

    discovered = find_config_in_parents(start_dir)
    if discovered is not None:
        logger.debug(f"Discovered vocabulary file: {discovered}")
        return load_vocabulary(discovered)

    return default_vocabulary()
