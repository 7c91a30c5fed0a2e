"""Embed document served to crawlers/bots instead of raw resource bytes.

Open Graph and Twitter card tags plus an oEmbed discovery link; chat
clients build their link previews from these.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

from stash.domain.entities.resource import Resource
from stash.shared.utils.datetime import from_timestamp_ms_utc
from stash.shared.utils.formatting import format_bytes


@dataclass(frozen=True)
class EmbedUrls:
    """Absolute URLs an embed document links to."""

    resource: str
    direct: str
    thumbnail: str
    oembed: str


def _meta(prop: str, content: str | None, attr: str = "property") -> str:
    if not content:
        return ""
    return f'    <meta {attr}="{escape(prop)}" content="{escape(content)}">\n'


def render_embed(resource: Resource, urls: EmbedUrls, site_name: str) -> str:
    """Return the HTML embed document for resource."""
    og = resource.opengraph
    uploaded = from_timestamp_ms_utc(resource.timestamp).strftime("%Y-%m-%d %H:%M UTC")
    title = og.title or resource.original_name
    description = og.description or f"{format_bytes(resource.size)}, uploaded {uploaded}"
    color = og.color or resource.dominant_color
    media_url = urls.direct

    tags = "".join([
        _meta("og:type", "video.other" if resource.is_video else "website"),
        _meta("og:site_name", og.provider or site_name),
        _meta("og:title", title),
        _meta("og:description", description),
        _meta("og:url", urls.resource),
        _meta("theme-color", color, attr="name"),
    ])
    if resource.is_video:
        tags += "".join([
            _meta("og:video", media_url),
            _meta("og:video:secure_url", media_url if media_url.startswith("https") else None),
            _meta("og:video:type", resource.mime_type),
            _meta("og:image", urls.thumbnail),
            _meta("twitter:card", "player", attr="name"),
        ])
    elif resource.mime_type.startswith("image/"):
        tags += "".join([
            _meta("og:image", media_url),
            _meta("og:image:type", resource.mime_type),
            _meta("twitter:card", "summary_large_image", attr="name"),
        ])
    else:
        tags += "".join([
            _meta("og:image", urls.thumbnail),
            _meta("twitter:card", "summary", attr="name"),
        ])
    tags += _meta("twitter:title", title, attr="name")
    tags += _meta("twitter:image", urls.thumbnail, attr="name")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{escape(title)}</title>
{tags}    <link rel="alternate" type="application/json+oembed" href="{escape(urls.oembed)}" title="oEmbed">
    <link rel="canonical" href="{escape(urls.resource)}">
</head>
<body>
    <a href="{escape(urls.direct)}">{escape(resource.original_name)}</a>
</body>
</html>
"""
