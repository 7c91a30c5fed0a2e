"""Tests for webhook targets, payloads and DiscordWebhookNotifier (httpx.MockTransport)."""

import json

import httpx
import pytest

from stash.domain.entities.resource import Resource
from stash.domain.exceptions import NotifyFailedException
from stash.infrastructure.external.notifications import (
    DiscordWebhookNotifier,
    WebhookTarget,
    build_upload_payload,
)

TARGET = WebhookTarget(client_id="123", token="secret", username="stash", avatar_url="https://a/x.png")


def _resource(color: str | None = "#ff0000") -> Resource:
    return Resource(
        resource_id="abc.png",
        original_name="cat.png",
        stored_filename="f00d",
        storage_ref="f00d",
        mime_type="image/png",
        size=1536,
        timestamp=1_700_000_000_000,
        token="t1",
        dominant_color=color,
    )


class TestWebhookTarget:
    def test_requires_client_and_token(self) -> None:
        assert WebhookTarget.from_headers({"x-ass-webhook-client": "1"}, "stash") is None
        assert WebhookTarget.from_headers({}, "stash") is None

    def test_defaults_apply(self) -> None:
        target = WebhookTarget.from_headers(
            {"x-ass-webhook-client": "1", "x-ass-webhook-token": "t"}, "stash", "https://a/d.png"
        )
        assert target == WebhookTarget("1", "t", "stash", "https://a/d.png")


def test_payload_shape() -> None:
    payload = build_upload_payload(_resource(), TARGET, "https://s/abc.png", "https://s/abc.png/thumbnail", "https://s/delete/f00d")
    embed = payload["embeds"][0]
    assert payload["username"] == "stash"
    assert payload["avatar_url"] == "https://a/x.png"
    assert embed["title"] == "cat.png (image/png)"
    assert embed["color"] == 0xFF0000
    assert "1.5 KB" in embed["description"]
    assert "https://s/delete/f00d" in embed["description"]


def test_payload_without_color() -> None:
    payload = build_upload_payload(_resource(color=None), TARGET, "r", "t", "d")
    assert "color" not in payload["embeds"][0]


async def test_send_posts_to_target_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        notifier = DiscordWebhookNotifier(client, base_url="https://hooks.test/api/webhooks/")
        await notifier.send(TARGET, {"content": "hi"})

    assert str(seen[0].url) == "https://hooks.test/api/webhooks/123/secret"
    assert json.loads(seen[0].content) == {"content": "hi"}


async def test_send_raises_on_error_status() -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
        notifier = DiscordWebhookNotifier(client)
        with pytest.raises(NotifyFailedException) as exc_info:
            await notifier.send(TARGET, {})
    assert exc_info.value.details["reason"] == "status 500"


async def test_send_raises_on_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NotifyFailedException):
            await DiscordWebhookNotifier(client).send(TARGET, {})
