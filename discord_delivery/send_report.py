from __future__ import annotations

import json

import discord

from logger import get_logger

from .discord_client import DiscordResult, send_embeds, webhook_payload


_LOG = get_logger()


class WebhookSender:
    """Sends one embed per call to a Discord webhook, or logs it in dry-run mode."""

    def __init__(self, webhook_url: str, *, dry_run: bool = False) -> None:
        self.webhook_url = webhook_url
        self.dry_run = dry_run

    def __call__(self, embed: discord.Embed) -> DiscordResult:
        title = embed.title or "(untitled)"
        if self.dry_run:
            _LOG.info(
                "[DRY-RUN] would send embed title=%s payload=%s",
                title,
                json.dumps(webhook_payload([embed]), ensure_ascii=False),
            )
            return DiscordResult(ok=True, status_code=None, latency_ms=None, error=None)

        _LOG.info("[DISCORD DELIVERY] Sending: %s", title)
        return send_embeds(self.webhook_url, [embed])
