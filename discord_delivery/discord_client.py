from __future__ import annotations

import http.client
import json
import time
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import discord

from logger import get_logger


_LOG = get_logger()


@dataclass(frozen=True)
class DiscordResult:
    ok: bool
    status_code: int | None
    latency_ms: int | None
    error: str | None


def _request(
    *,
    url: str,
    body: bytes,
    timeout: int = 30,
) -> tuple[int, bytes]:
    headers = {
        "Content-Type": "application/json",
        "User-Agent": "algo-commit-bot/1.0",
    }
    req = Request(url, data=body, headers=headers, method="POST")
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read() or b""
            status = int(getattr(resp, "status", 200) or 200)
            return status, raw
    except HTTPError as e:
        raw = b""
        try:
            raw = e.read() or b""
        except OSError:
            raw = b""
        return int(getattr(e, "code", 0) or 0), raw


def webhook_payload(embeds: list[discord.Embed]) -> dict[str, Any]:
    return {"embeds": [embed.to_dict() for embed in embeds]}


def send_embeds(webhook_url: str, embeds: list[discord.Embed]) -> DiscordResult:
    """Post embeds to a webhook. One attempt only; failures are returned."""
    if not webhook_url:
        _LOG.warning("Discord webhook URL missing")
        return DiscordResult(ok=False, status_code=None, latency_ms=None, error="missing_webhook_url")

    body = json.dumps(webhook_payload(embeds)).encode("utf-8")
    t0 = time.perf_counter()
    try:
        status, raw = _request(url=webhook_url, body=body)
    except (URLError, OSError, http.client.HTTPException) as e:
        latency_ms = int((time.perf_counter() - t0) * 1000)
        _LOG.error("Discord send exception (latency_ms=%s): %s", latency_ms, e)
        return DiscordResult(ok=False, status_code=None, latency_ms=latency_ms, error=str(e))

    latency_ms = int((time.perf_counter() - t0) * 1000)
    if 200 <= status < 300:
        _LOG.info("Discord send success (status=%s latency_ms=%s)", status, latency_ms)
        return DiscordResult(ok=True, status_code=status, latency_ms=latency_ms, error=None)

    body_preview = (raw or b"")[:500].decode("utf-8", errors="replace")
    _LOG.error(
        "Discord send failed (status=%s latency_ms=%s body=%s)",
        status,
        latency_ms,
        body_preview,
    )
    return DiscordResult(
        ok=False,
        status_code=status,
        latency_ms=latency_ms,
        error=body_preview or f"http_{status}",
    )
