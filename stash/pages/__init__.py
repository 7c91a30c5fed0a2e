"""HTML documents served by the API."""

from stash.pages.embed import EmbedUrls, render_embed

__all__ = ["EmbedUrls", "render_embed"]
