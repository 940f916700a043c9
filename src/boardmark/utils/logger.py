"""Logger lookup for boardmark modules.

All loggers live under the ``boardmark`` namespace, so an application
can tune the whole markup pipeline with one ``logging.getLogger("boardmark")``.

Example:
    >>> from boardmark.utils.logger import get_logger
    >>> log = get_logger(__name__)
    >>> log.debug("Reflink target %d not found", 999)
"""

from __future__ import annotations

import logging

_NAMESPACE = "boardmark"


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name`` inside the boardmark namespace.

    Names already under ``boardmark`` (such as a module's ``__name__``)
    are used unchanged; anything else gets the prefix.

    Example:
        >>> get_logger("postprocess").name
        'boardmark.postprocess'
    """
    if name != _NAMESPACE and not name.startswith(f"{_NAMESPACE}."):
        name = f"{_NAMESPACE}.{name}"
    return logging.getLogger(name)
