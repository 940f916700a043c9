"""Asynchronous post-processing of parsed trees.

Rewrites the three node kinds that depend on the outside world:

- Dice: rolled with the injected random generator
- RefLink: resolved through ``Lookups.find_post``; a dead reference is
  replaced by the literal text ``>>id``
- Link: resolved through ``Lookups.resolve_embed``; a known embed replaces
  the link text with its title and may attach a provider icon

Lookups for sibling nodes run concurrently and the results are put back
in document order. The input tree is never modified. If a lookup raises,
or the calling task is cancelled, the remaining in-flight lookups are
cancelled and the exception propagates unchanged.

Example:
    >>> lookups = MemoryLookups(posts=[PostRef(id=1, parent_id=None, slug="b")])
    >>> await post_process([RefLink(1), RefLink(999)], lookups)
    [RefLink(post_id=1, thread_id=1, slug='b'), Text(text='>>999')]

"""

from __future__ import annotations

import asyncio
import dataclasses
import random
from collections.abc import Awaitable, Callable, Coroutine, Iterable, Sequence
from contextlib import nullcontext
from typing import Any

from boardmark.config import MarkupConfig, get_markup_config
from boardmark.lookups import Lookups
from boardmark.nodes import Dice, Link, Node, RefLink, Style, Text
from boardmark.utils.logger import get_logger

logger = get_logger(__name__)

# Process-wide generator used when none is injected
_RNG = random.Random()

# Shared by every lookup of one process() call; None means unbounded
type _Limiter = asyncio.Semaphore | None


class PostProcessor:
    """Resolves reflinks, links and dice in a parsed tree.

    Usage:
        >>> processor = PostProcessor(lookups, rng=random.Random(42))
        >>> nodes = await processor.process(parse(tokenize("##2d6## >>1")))

    A processor captures the config of the context it was created in.
    The concurrency limit applies across every lookup of one ``process``
    call, nested Style children included. Each call creates its own
    limiter, so one processor can be reused across event loops.

    """

    __slots__ = ("_config", "_lookups", "_rng")

    def __init__(
        self,
        lookups: Lookups,
        *,
        rng: random.Random | None = None,
        config: MarkupConfig | None = None,
    ) -> None:
        """Initialize the post-processor.

        Args:
            lookups: Post and embed collaborators
            rng: Random generator for dice (process-wide generator if None)
            config: Configuration (context config if None)
        """
        self._lookups = lookups
        self._rng = rng if rng is not None else _RNG
        self._config = config if config is not None else get_markup_config()

    async def process(self, nodes: Sequence[Node]) -> list[Node]:
        """Return a rewritten copy of ``nodes`` in the same order."""
        limit = self._config.max_concurrent_lookups
        limiter = asyncio.Semaphore(limit) if limit is not None else None
        return await self._process_all(nodes, limiter)

    async def _process_all(self, nodes: Sequence[Node], limiter: _Limiter) -> list[Node]:
        results = list(nodes)
        positions: list[int] = []
        pending: list[Coroutine[Any, Any, Node]] = []

        for position, node in enumerate(nodes):
            match node:
                case Dice():
                    results[position] = self.roll(node)
                case Style() | RefLink() | Link():
                    positions.append(position)
                    pending.append(self._process_node(node, limiter))

        for position, node in zip(positions, await _gather_ordered(pending), strict=True):
            results[position] = node
        return results

    async def _process_node(self, node: Node, limiter: _Limiter) -> Node:
        match node:
            case Style(children=children):
                children = tuple(await self._process_all(children, limiter))
                return dataclasses.replace(node, children=children)
            case RefLink() if self._config.resolve_reflinks:
                return await self._resolve_reflink(node, limiter)
            case Link() if self._config.resolve_embeds:
                return await self._resolve_link(node, limiter)
            case _:
                return node

    def roll(self, node: Dice) -> Dice:
        """Attach dice results; nodes that were already rolled keep theirs.

        A die with no faces (``max`` of 0) has nothing to roll, so its
        result is empty.
        """
        if not self._config.roll_dice or node.result is not None:
            return node
        if node.max < 1:
            return dataclasses.replace(node, result=())
        result = tuple(self._rng.randint(1, node.max) for _ in range(node.count))
        return dataclasses.replace(node, result=result)

    async def _resolve_reflink(self, node: RefLink, limiter: _Limiter) -> Node:
        post = await self._lookup(lambda: self._lookups.find_post(node.post_id), limiter)
        if post is None:
            logger.debug("Reflink target %d not found", node.post_id)
            return Text(f">>{node.post_id}")
        return dataclasses.replace(node, thread_id=post.thread_id, slug=post.slug)

    async def _resolve_link(self, node: Link, limiter: _Limiter) -> Node:
        embed = await self._lookup(lambda: self._lookups.resolve_embed(node.url), limiter)
        if embed is None:
            logger.debug("No embed for %s", node.url)
            return node
        icon = self._config.embed_icons.get(embed.type, node.icon)
        return dataclasses.replace(node, text=embed.title, icon=icon)

    async def _lookup[T](self, call: Callable[[], Awaitable[T]], limiter: _Limiter) -> T:
        """Run one collaborator call under the concurrency limit and timeout."""
        async with limiter if limiter is not None else nullcontext():
            async with asyncio.timeout(self._config.lookup_timeout):
                return await call()


async def _gather_ordered[T](coros: Iterable[Coroutine[Any, Any, T]]) -> list[T]:
    """Await coroutines concurrently, returning results in input order.

    On the first failure (or cancellation of the caller) the tasks still
    running are cancelled before the exception is re-raised.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def post_process(
    nodes: Sequence[Node],
    lookups: Lookups,
    *,
    rng: random.Random | None = None,
    config: MarkupConfig | None = None,
) -> list[Node]:
    """Resolve reflinks, links and dice in ``nodes``.

    Args:
        nodes: Parsed tree
        lookups: Post and embed collaborators
        rng: Random generator for dice (process-wide generator if None)
        config: Configuration (context config if None)

    Returns:
        New tree with the same top-level order.
    """
    return await PostProcessor(lookups, rng=rng, config=config).process(nodes)
