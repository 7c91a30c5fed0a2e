"""
Discord-compatible webhook notifications for new uploads.

The uploader supplies the webhook id/token per request
(x-ass-webhook-client / x-ass-webhook-token). Delivery is best effort:
failures raise NotifyFailedException for the caller to log, never retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from stash.domain.entities.resource import Resource
from stash.domain.exceptions import NotifyFailedException
from stash.shared.utils.datetime import from_timestamp_ms_utc
from stash.shared.utils.formatting import format_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookTarget:
    """Where and as whom to post one notification."""

    client_id: str
    token: str
    username: str
    avatar_url: str | None = None

    @classmethod
    def from_headers(
        cls,
        headers: Any,
        default_username: str,
        default_avatar: str | None = None,
    ) -> WebhookTarget | None:
        """Build from request headers; None unless both client id and token are present."""
        client_id = headers.get("x-ass-webhook-client")
        token = headers.get("x-ass-webhook-token")
        if not client_id or not token:
            return None
        return cls(
            client_id=client_id,
            token=token,
            username=headers.get("x-ass-webhook-username") or default_username,
            avatar_url=headers.get("x-ass-webhook-avatar") or default_avatar,
        )


def _hex_color(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.lstrip("#"), 16)
    except ValueError:
        return None


def build_upload_payload(
    resource: Resource,
    target: WebhookTarget,
    resource_url: str,
    thumbnail_url: str,
    delete_url: str,
) -> dict[str, Any]:
    """Embed payload announcing one upload."""
    embed: dict[str, Any] = {
        "title": f"{resource.original_name} ({resource.mime_type})",
        "url": resource_url,
        "description": f"**Size:** `{format_bytes(resource.size)}`\n**[Delete]({delete_url})**",
        "thumbnail": {"url": thumbnail_url},
        "timestamp": from_timestamp_ms_utc(resource.timestamp).isoformat(),
    }
    color = _hex_color(resource.dominant_color)
    if color is not None:
        embed["color"] = color
    payload: dict[str, Any] = {"username": target.username, "embeds": [embed]}
    if target.avatar_url:
        payload["avatar_url"] = target.avatar_url
    return payload


class DiscordWebhookNotifier:
    """Posts upload embeds to Discord-style webhooks over a shared httpx client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://discord.com/api/webhooks",
        timeout: float = 10.0,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def send(self, target: WebhookTarget, payload: dict[str, Any]) -> None:
        """POST payload to the target webhook.

        Raises:
            NotifyFailedException: Transport error or non-2xx response.
        """
        url = f"{self.base_url}/{target.client_id}/{target.token}"
        label = f"webhook {target.client_id}"
        try:
            response = await self.client.post(url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise NotifyFailedException(label, str(e)) from e
        if response.is_success:
            logger.debug("Webhook notification sent to %s", label)
            return
        raise NotifyFailedException(label, f"status {response.status_code}")
