#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/progress.py
"""Progress callback system for BBCode parsing.

Embedders can pass a callback to ``BBCodeParser`` to observe the parsing
stages, for example to report timings or surface structural failures in a UI.

Examples
--------
    >>> from bbtree import BBCodeParser
    >>> from bbtree.progress import ProgressEvent
    >>>
    >>> def on_progress(event: ProgressEvent):
    ...     print(f"{event.event_type}: {event.message}")
    >>>
    >>> result = BBCodeParser(progress_callback=on_progress).parse("[b]x[/b]")

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

EventType = Literal["started", "item_done", "finished", "error"]


@dataclass
class ProgressEvent:
    """Progress event emitted while parsing.

    Parameters
    ----------
    event_type : EventType
        - "started": parsing has begun
        - "item_done": a stage completed; ``metadata["item_type"]`` is
          ``"tokenization"`` or ``"tree"``
        - "finished": parsing completed (the document may still be invalid)
        - "error": the document is structurally invalid;
          ``metadata["reason"]`` holds the ``FailureReason`` value
    message : str
        Human-readable description of the event
    current : int, default 0
        Current progress position
    total : int, default 0
        Total progress positions; 0 if unknown
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """Return string representation of the event."""
        return (
            f"ProgressEvent(type={self.event_type!r}, message={self.message!r}, "
            f"progress={self.current}/{self.total})"
        )


ProgressCallback = Callable[[ProgressEvent], None]


__all__ = ["ProgressEvent", "ProgressCallback", "EventType"]
