"""Renderers for boardmark node trees."""

from boardmark.renderers.html import HtmlRenderer, render

__all__ = ["HtmlRenderer", "render"]
