from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from logger import get_logger


_LOG = get_logger()


class ConfigurationError(RuntimeError):
    pass


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    webhook_url: str
    repositories: list[Repository]
    github_token: str | None = None
    target_count: int = 3
    display_cap: int = 10
    fetch_delay_ms: int = 300
    send_delay_ms: int = 1000
    dedupe_enabled: bool = False
    exclude_prefix: str = "delete"
    offset_minutes: int = 540
    page_size: int = 50


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _load_dotenv_vars() -> dict[str, str]:
    env_path = Path(__file__).resolve().parent / ".env"
    if not env_path.exists():
        return {}
    try:
        content = env_path.read_text(encoding="utf-8")
    except OSError:
        return {}
    out: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k:
            out[k] = v
    return out


_DOTENV = _load_dotenv_vars()


def env_any(name: str) -> str:
    # Prefer real environment; fallback to .env file.
    v = _env(name)
    if v:
        return v
    return (_DOTENV.get(name) or "").strip()


def env_int(name: str, default: int) -> int:
    raw = env_any(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _LOG.warning("Invalid integer for %s=%r, using default %s", name, raw, default)
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = env_any(name).lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def parse_repositories(raw: str) -> list[Repository]:
    repos: list[Repository] = []
    for item in (raw or "").split(","):
        entry = item.strip()
        if not entry:
            continue
        owner, _, name = entry.partition("/")
        owner = owner.strip()
        name = name.strip()
        if not owner or not name or "/" in name:
            _LOG.warning("Skipping malformed repository entry: %r", entry)
            continue
        repos.append(Repository(owner=owner, name=name))
    return repos


def load_config() -> BotConfig:
    webhook_url = env_any("DISCORD_WEBHOOK_URL")
    if not webhook_url:
        raise ConfigurationError("DISCORD_WEBHOOK_URL is not set")

    repositories = parse_repositories(env_any("REPOS"))
    if not repositories:
        raise ConfigurationError("REPOS is empty; expected comma-separated owner/repo entries")

    return BotConfig(
        webhook_url=webhook_url,
        repositories=repositories,
        github_token=env_any("GITHUB_TOKEN") or None,
        target_count=max(1, env_int("TARGET_COMMITS", 3)),
        display_cap=max(1, env_int("DISPLAY_CAP", 10)),
        fetch_delay_ms=max(0, env_int("FETCH_DELAY_MS", 300)),
        send_delay_ms=max(0, env_int("SEND_DELAY_MS", 1000)),
        dedupe_enabled=env_bool("DEDUPE_ENABLED", False),
        exclude_prefix=env_any("EXCLUDE_PREFIX") or "delete",
        offset_minutes=env_int("UTC_OFFSET_MINUTES", 540),
        page_size=min(100, max(1, env_int("PAGE_SIZE", 50))),
    )
