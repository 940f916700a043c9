"""Parsing stages for boardmark.

- spans: marker tokens to sorted, overlap-fixed style spans
- tree: content tokens to leaf nodes wrapped in their styles
- normalize: merge adjacent identical nodes
"""

from boardmark.parsing.normalize import normalize
from boardmark.parsing.spans import Span, build_spans, fix_overlaps
from boardmark.parsing.tree import build_leaf, build_tree

__all__ = [
    "Span",
    "build_leaf",
    "build_spans",
    "build_tree",
    "fix_overlaps",
    "normalize",
]
