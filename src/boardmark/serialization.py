"""Tree serialization: the persisted and wire representation of a post.

Each node becomes a tagged object:

    {"type": "text", "text": ...}
    {"type": "newline"}
    {"type": "style", "style": ..., "value"?: ..., "children": [...]}
    {"type": "reflink", "postID": ..., "threadID"?: ..., "slug"?: ...}
    {"type": "link", "text": ..., "url": ..., "icon"?: ...}
    {"type": "dice", "count": ..., "max": ..., "result"?: [...]}

Optional keys are omitted when unset. JSON output is compact with sorted
keys, so equal trees serialize to equal strings.

Example:
    from boardmark import parse_message
    from boardmark.serialization import to_json, from_json

    nodes = parse_message("Hello [b]world[/b]")
    assert from_json(to_json(nodes)) == nodes

Thread Safety:
    All functions are pure.

"""

import json
from collections.abc import Iterable
from typing import Any

from boardmark.nodes import Dice, Link, NewLine, Node, RefLink, Style, Text
from boardmark.styles import STYLES


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to its JSON-compatible dict.

    Raises:
        TypeError: If ``node`` is not a boardmark node.
    """
    match node:
        case Text(text=text):
            return {"type": "text", "text": text}
        case NewLine():
            return {"type": "newline"}
        case Style(style=style, value=value, children=children):
            result: dict[str, Any] = {"type": "style", "style": style}
            if value is not None:
                result["value"] = value
            result["children"] = [to_dict(child) for child in children]
            return result
        case RefLink(post_id=post_id, thread_id=thread_id, slug=slug):
            result = {"type": "reflink", "postID": post_id}
            if thread_id is not None:
                result["threadID"] = thread_id
            if slug is not None:
                result["slug"] = slug
            return result
        case Link(text=text, url=url, icon=icon):
            result = {"type": "link", "text": text, "url": url}
            if icon is not None:
                result["icon"] = icon
            return result
        case Dice(count=count, max=max_, result=rolls):
            result = {"type": "dice", "count": count, "max": max_}
            if rolls is not None:
                result["result"] = list(rolls)
            return result
        case _:
            msg = f"Cannot serialize {type(node).__name__}"
            raise TypeError(msg)


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a node from its dict form.

    Raises:
        ValueError: If ``type`` is missing or unknown, a required field is
            missing, or a style node has an unknown style or its children
            are not a non-empty list.
    """
    if not isinstance(data, dict):
        msg = f"Expected a node object, got {type(data).__name__}"
        raise ValueError(msg)

    node_type = data.get("type")
    if node_type is None:
        msg = "Missing 'type' field in serialized node"
        raise ValueError(msg)

    try:
        match node_type:
            case "text":
                return Text(data["text"])
            case "newline":
                return NewLine()
            case "style":
                return _style_from_dict(data)
            case "reflink":
                return RefLink(data["postID"], data.get("threadID"), data.get("slug"))
            case "link":
                return Link(data["text"], data["url"], data.get("icon"))
            case "dice":
                rolls = data.get("result")
                return Dice(data["count"], data["max"], tuple(rolls) if rolls is not None else None)
            case _:
                msg = f"Unknown node type: {node_type!r}"
                raise ValueError(msg)
    except KeyError as e:
        msg = f"Missing field {e.args[0]!r} in serialized {node_type} node"
        raise ValueError(msg) from None


def _style_from_dict(data: dict[str, Any]) -> Style:
    style = data["style"]
    if not isinstance(style, str) or style not in STYLES:
        msg = f"Unknown style: {style!r}"
        raise ValueError(msg)
    raw_children = data["children"]
    if not isinstance(raw_children, list):
        msg = f"Style node {style!r} children must be a list, got {type(raw_children).__name__}"
        raise ValueError(msg)
    children = tuple(from_dict(child) for child in raw_children)
    if not children:
        msg = f"Style node {style!r} has no children"
        raise ValueError(msg)
    return Style(style, children, value=data.get("value"))


def to_json(nodes: Iterable[Node], *, indent: int | None = None) -> str:
    """Serialize a tree to a JSON array string.

    Args:
        nodes: Top-level nodes
        indent: JSON indentation level (None for compact)

    """
    separators = (",", ":") if indent is None else None
    return json.dumps(
        [to_dict(node) for node in nodes],
        sort_keys=True,
        indent=indent,
        separators=separators,
        ensure_ascii=False,
    )


def from_json(data: str) -> list[Node]:
    """Deserialize a tree from a JSON array string.

    Raises:
        ValueError: If the JSON is not an array of node objects.
    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a JSON array, got {type(raw).__name__}"
        raise ValueError(msg)
    return [from_dict(item) for item in raw]
