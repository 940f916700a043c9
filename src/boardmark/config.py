"""ContextVar-based markup configuration for boardmark.

Configuration only affects post-processing; tokenizing and parsing are
fixed by the markup dialects. Config is set once per ``Markup`` instance
(or per context) and read by the post-processor.

Thread Safety:
    ContextVars are thread-local and task-local. Concurrent
    asyncio tasks each see the config of the context they were created in.

Usage:
    from boardmark.config import MarkupConfig, markup_config_context

    with markup_config_context(MarkupConfig(resolve_embeds=False)):
        nodes = await post_process(nodes, lookups)

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType

# Embed types that render with a provider icon
DEFAULT_EMBED_ICONS: Mapping[str, str] = MappingProxyType({"video/x-youtube": "youtube"})


@dataclass(frozen=True, slots=True)
class MarkupConfig:
    """Immutable post-processing configuration.

    Attributes:
        resolve_reflinks: Look up >>id targets; unresolved ones become text
        resolve_embeds: Look up embed metadata for links
        roll_dice: Attach results to dice nodes
        max_concurrent_lookups: Upper bound on in-flight lookups (None = unbounded)
        lookup_timeout: Seconds allowed per lookup (None = no timeout)
        embed_icons: Embed type to icon name

    """

    resolve_reflinks: bool = True
    resolve_embeds: bool = True
    roll_dice: bool = True
    max_concurrent_lookups: int | None = None
    lookup_timeout: float | None = None
    embed_icons: Mapping[str, str] = field(default_factory=lambda: DEFAULT_EMBED_ICONS)

    def __post_init__(self) -> None:
        if self.max_concurrent_lookups is not None and self.max_concurrent_lookups < 1:
            msg = f"max_concurrent_lookups must be positive, got {self.max_concurrent_lookups}"
            raise ValueError(msg)
        if self.lookup_timeout is not None and self.lookup_timeout <= 0:
            msg = f"lookup_timeout must be positive, got {self.lookup_timeout}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "MarkupConfig":
        """Create MarkupConfig from dictionary.

        Useful when settings come from the surrounding application's
        environment or a config file. Unknown keys are silently ignored.

        Example:
            >>> config = MarkupConfig.from_dict({
            ...     "resolve_embeds": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.resolve_embeds
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "embed_icons" in filtered:
            filtered["embed_icons"] = MappingProxyType(dict(filtered["embed_icons"]))
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: MarkupConfig = MarkupConfig()

_markup_config: ContextVar[MarkupConfig] = ContextVar(
    "markup_config",
    default=_DEFAULT_CONFIG,
)


def get_markup_config() -> MarkupConfig:
    """Get the markup configuration of the current context."""
    return _markup_config.get()


def set_markup_config(config: MarkupConfig) -> None:
    """Set markup configuration for the current context."""
    _markup_config.set(config)


def reset_markup_config() -> None:
    """Reset to the default configuration."""
    _markup_config.set(_DEFAULT_CONFIG)


@contextmanager
def markup_config_context(config: MarkupConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with markup_config_context(MarkupConfig(roll_dice=False)):
        ...     get_markup_config().roll_dice
        False

    """
    previous = _markup_config.get()
    _markup_config.set(config)
    try:
        yield
    finally:
        _markup_config.set(previous)


__all__ = [
    "DEFAULT_EMBED_ICONS",
    "MarkupConfig",
    "get_markup_config",
    "markup_config_context",
    "reset_markup_config",
    "set_markup_config",
]
