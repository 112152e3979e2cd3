#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/utils/encoding.py
"""Character encoding detection for BBCode input.

Forum exports and saved posts are often not UTF-8. These helpers decode raw
bytes using chardet-based detection with ordered fallback encodings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import IO

import chardet

from bbtree.constants import (
    DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
    DEFAULT_CHARDET_SAMPLE_SIZE,
    DEFAULT_FALLBACK_ENCODINGS,
)

logger = logging.getLogger(__name__)


def detect_encoding(
    data: bytes,
    sample_size: int = DEFAULT_CHARDET_SAMPLE_SIZE,
    confidence_threshold: float = DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
) -> str | None:
    """Detect the character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of leading bytes to sample
    confidence_threshold : float, default 0.7
        Minimum confidence (0.0-1.0) required to trust the detection

    Returns
    -------
    str | None
        Detected encoding name, or None if detection fails or confidence
        is below the threshold

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)

    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
    if confidence < confidence_threshold:
        logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
        return None
    return encoding


def read_text_with_encoding_detection(
    data: bytes,
    fallback_encodings: Sequence[str] | None = None,
    use_chardet: bool = True,
) -> str:
    """Decode binary data as text.

    Strategies, in order:

    1. chardet-based detection (if enabled)
    2. Fallback encodings (``utf-8``, ``utf-8-sig``, ``latin-1`` by default)
    3. UTF-8 with replacement characters

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : sequence of str, optional
        Encodings to try in order after detection
    use_chardet : bool, default True
        Whether to attempt detection first

    Returns
    -------
    str
        Decoded text

    Examples
    --------
    >>> from bbtree.utils.encoding import read_text_with_encoding_detection
    >>> read_text_with_encoding_detection(b"[b]Hello[/b]")
    '[b]Hello[/b]'

    """
    if fallback_encodings is None:
        fallback_encodings = DEFAULT_FALLBACK_ENCODINGS

    if use_chardet and data:
        detected = detect_encoding(data)
        if detected:
            try:
                return data.decode(detected)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug(f"Failed to decode with chardet-detected encoding {detected}: {e}")

    for encoding in fallback_encodings:
        try:
            text = data.decode(encoding)
            logger.debug(f"Successfully decoded with encoding: {encoding}")
            return text
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def normalize_stream_to_text(stream: IO[bytes] | IO[str]) -> str:
    """Read a binary or text stream and return its content as text.

    Raises
    ------
    TypeError
        If ``stream.read()`` returns something other than bytes or str

    """
    content = stream.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    if isinstance(content, str):
        return content
    raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
