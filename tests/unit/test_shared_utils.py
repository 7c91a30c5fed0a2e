"""Tests for shared helpers: user agents, formatting, URLs, generators."""

import pytest

from stash.application.services import UrlBuilder
from stash.shared.utils.formatting import format_bytes
from stash.shared.utils.generators import generate_stored_filename, word_string
from stash.shared.utils.user_agents import is_bot


@pytest.mark.parametrize(
    "ua",
    [
        "Mozilla/5.0 (compatible; Discordbot/2.0; +https://discordapp.com)",
        "TelegramBot (like TwitterBot)",
        "facebookexternalhit/1.1",
        "Mozilla/5.0 (compatible; Googlebot/2.1)",
        "WhatsApp/2.23",
    ],
)
def test_bots_detected(ua: str) -> None:
    assert is_bot(ua)


@pytest.mark.parametrize(
    "ua",
    [
        None,
        "",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0",
        "python-httpx/0.27.0",
    ],
)
def test_humans_not_detected(ua: str | None) -> None:
    assert not is_bot(ua)


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0 Bytes"), (512, "512 Bytes"), (1536, "1.5 KB"), (1048576, "1 MB")],
)
def test_format_bytes(size: int, expected: str) -> None:
    assert format_bytes(size) == expected


class TestUrlBuilder:
    def test_port_kept_for_custom_port(self) -> None:
        assert UrlBuilder("h", 8080).resource("a.png") == "http://h:8080/a.png"

    def test_port_dropped_when_proxied_or_default(self) -> None:
        assert UrlBuilder("h", 8080, use_ssl=True, is_proxied=True).base() == "https://h"
        assert UrlBuilder("h", 443, use_ssl=True).base() == "https://h"

    def test_domain_override_and_quoting(self) -> None:
        urls = UrlBuilder("h", 80)
        assert urls.thumbnail("a b.png", "cdn") == "http://cdn/a%20b.png/thumbnail"
        assert urls.delete("f00d") == "http://h/delete/f00d"


def test_generators() -> None:
    assert len(generate_stored_filename()) == 32
    assert word_string(0)[0].isupper()
