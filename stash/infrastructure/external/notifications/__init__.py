"""Outbound upload notifications."""

from stash.infrastructure.external.notifications.discord_webhook import (
    DiscordWebhookNotifier,
    WebhookTarget,
    build_upload_payload,
)

__all__ = ["DiscordWebhookNotifier", "WebhookTarget", "build_upload_payload"]
