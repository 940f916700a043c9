"""Utility modules for boardmark.

Provides:
- text: escape_html, is_safe_url for rendering
- logger: get_logger for logging
"""

from boardmark.utils.logger import get_logger
from boardmark.utils.text import escape_html, is_safe_url

__all__ = [
    "escape_html",
    "get_logger",
    "is_safe_url",
]
