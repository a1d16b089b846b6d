from __future__ import annotations

from models import CommitRecord


# Suffix BaekjoonHub appends to every upload commit, e.g.
# "[Gold IV] Title: 미로 탐색, Time: 0 ms, Memory: 1234 KB -BaekjoonHub"
BAEKJOONHUB_MARKER = "-BaekjoonHub"
DEFAULT_EXCLUDE_PREFIX = "delete"


def exclude_by_prefix(commits: list[CommitRecord], prefix: str = DEFAULT_EXCLUDE_PREFIX) -> list[CommitRecord]:
    p = prefix.lower()
    if not p:
        return list(commits)
    return [c for c in commits if not c.message.lower().startswith(p)]


def group_key(commit: CommitRecord) -> str:
    first_line = commit.message_first_line
    if BAEKJOONHUB_MARKER in commit.message:
        return first_line.split(",", 1)[0].strip()
    return first_line


def dedupe_keep_latest(commits: list[CommitRecord]) -> list[CommitRecord]:
    latest: dict[str, CommitRecord] = {}
    for commit in commits:
        key = group_key(commit)
        current = latest.get(key)
        # Strictly later wins, so equal timestamps keep the first one seen.
        if current is None or commit.author_date > current.author_date:
            latest[key] = commit
    # sorted() is stable: ties stay in first-seen order.
    return sorted(latest.values(), key=lambda c: c.author_date, reverse=True)


def apply_filters(
    commits: list[CommitRecord],
    *,
    dedupe_enabled: bool,
    exclude_prefix: str = DEFAULT_EXCLUDE_PREFIX,
) -> list[CommitRecord]:
    if not dedupe_enabled:
        return list(commits)
    return dedupe_keep_latest(exclude_by_prefix(commits, exclude_prefix))
