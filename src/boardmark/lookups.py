"""Lookup contracts used by post-processing.

The post-processor resolves reflinks and links against two collaborators
supplied by the surrounding application: the post store and the embed
resolver. Both answer "not found" with ``None``; any exception they
raise is treated as a transport failure and propagates to the caller.

``MemoryLookups`` is an in-memory implementation for tests and for
re-processing messages offline.

Example:
    >>> lookups = MemoryLookups(posts=[PostRef(id=1, parent_id=None, slug="b")])
    >>> nodes = await post_process(parse(tokenize(">>1")), lookups)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class PostRef:
    """What post-processing needs to know about a referenced post.

    Attributes:
        id: Post id
        parent_id: Id of the thread's opening post; None for a thread root
        slug: Slug of the board the post belongs to

    """

    id: int
    parent_id: int | None
    slug: str

    @property
    def thread_id(self) -> int:
        """Id of the thread containing the post."""
        return self.id if self.parent_id is None else self.parent_id


@dataclass(frozen=True, slots=True)
class EmbedInfo:
    """oEmbed metadata for a linked resource.

    Attributes:
        type: Media type, e.g. ``video/x-youtube``
        name: Title of the resource
        url: URL the embed was resolved from
        width, height: Player size
        thumbnail_url, thumbnail_width, thumbnail_height: Preview image

    """

    type: str
    name: str
    url: str
    width: int = 0
    height: int = 0
    thumbnail_url: str = ""
    thumbnail_width: int = 0
    thumbnail_height: int = 0

    @property
    def title(self) -> str:
        return self.name


class Lookups(Protocol):
    """Protocol for the collaborators post-processing calls.

    Implementations may be called concurrently for different nodes of
    the same message.
    """

    async def find_post(self, post_id: int) -> PostRef | None:
        """Return the referenced post, or None if it does not exist."""
        ...

    async def resolve_embed(self, url: str) -> EmbedInfo | None:
        """Return embed metadata for ``url``, or None if it has none."""
        ...


class MemoryLookups:
    """Dict-backed lookups.

    Records every requested post id and URL, in call order, so callers
    can check which lookups a message triggered.
    """

    __slots__ = ("_embeds", "_posts", "requested_posts", "requested_urls")

    def __init__(
        self,
        posts: Iterable[PostRef] = (),
        embeds: Iterable[EmbedInfo] = (),
    ) -> None:
        self._posts: dict[int, PostRef] = {post.id: post for post in posts}
        self._embeds: dict[str, EmbedInfo] = {embed.url: embed for embed in embeds}
        self.requested_posts: list[int] = []
        self.requested_urls: list[str] = []

    def add_post(self, post: PostRef) -> None:
        self._posts[post.id] = post

    def add_embed(self, embed: EmbedInfo) -> None:
        self._embeds[embed.url] = embed

    async def find_post(self, post_id: int) -> PostRef | None:
        """Return the stored post, if any."""
        self.requested_posts.append(post_id)
        return self._posts.get(post_id)

    async def resolve_embed(self, url: str) -> EmbedInfo | None:
        """Return the stored embed, if any."""
        self.requested_urls.append(url)
        return self._embeds.get(url)


__all__ = [
    "EmbedInfo",
    "Lookups",
    "MemoryLookups",
    "PostRef",
]
