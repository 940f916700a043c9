"""Exception classes for boardmark.

Malformed user markup never raises: it degrades to literal text. The
exceptions here signal internal invariant violations (a tokenizer and
mapping-table mismatch) and rendering of unknown node types.

Errors raised by lookup collaborators during post-processing are not
wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations


class BoardmarkError(Exception):
    """Base exception for all boardmark errors.

    Subclass this for specific error categories.
    """

    pass


class MarkupInvariantError(BoardmarkError):
    """Internal invariant of the markup pipeline was violated.

    Raised when an end tag reaches the span resolver without a matching
    open entry, or when a tag or symbol has no entry in the style tables.
    Both mean the tokenizer and the style mapping disagree.
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        """Initialize invariant error with the offending token index.

        Args:
            message: Error description
            index: Ordinal index of the token being processed (optional)
        """
        self.message = message
        self.index = index

        location = f"token {index}: " if index is not None else ""
        super().__init__(f"{location}{message}")


class RenderError(BoardmarkError):
    """Error during HTML rendering.

    Raised when the renderer encounters a node it does not know.
    """

    pass
