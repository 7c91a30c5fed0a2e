"""Crawler / bot user-agent classification for embed delivery."""

import re

# Link-preview fetchers and generic crawlers. Matched case-insensitively anywhere in the UA.
_BOT_PATTERN = re.compile(
    r"bot|crawl|spider|slurp|preview|facebookexternalhit|facebookcatalog|"
    r"whatsapp|telegram|skypeuripreview|vkshare|w3c_validator|"
    r"mastodon|pleroma|misskey|akkoma|synapse|iframely",
    re.IGNORECASE,
)


def is_bot(user_agent: str | None) -> bool:
    """Return True when user_agent looks like an automated fetcher.

    An absent user agent is treated as a regular client.
    """
    if not user_agent:
        return False
    return _BOT_PATTERN.search(user_agent) is not None
