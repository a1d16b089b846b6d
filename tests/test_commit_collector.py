import datetime as _dt
import http.client
import io
import json
import unittest
from urllib.error import HTTPError, URLError
from urllib.parse import parse_qs, urlparse
from unittest.mock import MagicMock, patch

import commit_collector
from commit_collector import FetchResult, collect_day, fetch_commits
from config import BotConfig, Repository
from models import CommitRecord
from time_window import window_for_local_day


class _Resp:
    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body
        self.headers = {}

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _api_commit(sha: str, message: str, date: str) -> dict:
    return {
        "sha": sha,
        "html_url": f"https://github.com/o/r/commit/{sha}",
        "commit": {"message": message, "author": {"name": "me", "date": date}},
    }


def _config(**overrides) -> BotConfig:
    data = {
        "webhook_url": "https://discord.test/webhook",
        "repositories": [Repository(owner="o", name="r")],
    }
    data.update(overrides)
    return BotConfig(**data)


class TestFetchCommits(unittest.TestCase):
    def setUp(self):
        self.window = window_for_local_day(_dt.date(2026, 3, 3))

    def test_success_builds_records_and_query(self):
        body = json.dumps(
            [
                _api_commit("a" * 40, "solve 1000\n\nbody", "2026-03-03T01:02:03Z"),
                _api_commit("b" * 40, "solve 1001", "2026-03-02T16:00:00Z"),
            ]
        ).encode("utf-8")
        captured = []

        def _fake_urlopen(req, timeout=30):
            captured.append(req)
            return _Resp(200, body)

        with patch("commit_collector.urlopen", side_effect=_fake_urlopen):
            res = fetch_commits("o", "r", self.window, token="tok", page_size=50)

        self.assertTrue(res.ok)
        self.assertEqual(len(res.commits), 2)
        self.assertEqual(res.commits[0].short_sha, "aaaaaaa")
        self.assertEqual(res.commits[0].message_first_line, "solve 1000")
        self.assertEqual(
            res.commits[0].author_date,
            _dt.datetime(2026, 3, 3, 1, 2, 3, tzinfo=_dt.timezone.utc),
        )

        req = captured[0]
        url = urlparse(req.full_url)
        self.assertEqual(url.path, "/repos/o/r/commits")
        query = parse_qs(url.query)
        self.assertEqual(query["since"], ["2026-03-02T15:00:00Z"])
        self.assertEqual(query["until"], ["2026-03-03T14:59:59Z"])
        self.assertEqual(query["per_page"], ["50"])
        self.assertEqual(req.get_header("Authorization"), "token tok")

    def test_no_token_sends_no_authorization(self):
        captured = []

        def _fake_urlopen(req, timeout=30):
            captured.append(req)
            return _Resp(200, b"[]")

        with patch("commit_collector.urlopen", side_effect=_fake_urlopen):
            res = fetch_commits("o", "r", self.window)

        self.assertTrue(res.ok)
        self.assertEqual(res.commits, [])
        self.assertIsNone(captured[0].get_header("Authorization"))

    def test_http_error_becomes_error_result(self):
        err = HTTPError(
            "https://api.github.com/repos/o/r/commits",
            404,
            "Not Found",
            hdrs=None,
            fp=io.BytesIO(b'{"message": "Not Found"}'),
        )
        with patch("commit_collector.urlopen", side_effect=err):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)
        self.assertEqual(res.commits, [])
        self.assertIn("HTTP 404", res.error)

    def test_network_error_becomes_error_result(self):
        with patch("commit_collector.urlopen", side_effect=URLError("timed out")):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)
        self.assertIn("timed out", res.error)

    def test_unexpected_payload_becomes_error_result(self):
        with patch("commit_collector.urlopen", return_value=_Resp(200, b'{"message": "x"}')):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)
        self.assertIn("malformed response", res.error)

    def test_invalid_json_becomes_error_result(self):
        with patch("commit_collector.urlopen", return_value=_Resp(200, b"<html>")):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)

    def test_bad_status_line_becomes_error_result(self):
        with patch("commit_collector.urlopen", side_effect=http.client.BadStatusLine("garbage")):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)
        self.assertIn("network error", res.error)

    def test_truncated_body_becomes_error_result(self):
        resp = _Resp(200, b"")
        resp.read = MagicMock(side_effect=http.client.IncompleteRead(b""))
        with patch("commit_collector.urlopen", return_value=resp):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)
        self.assertEqual(res.commits, [])

    def test_non_object_entries_become_error_result(self):
        for body in (b'["x"]', b'[{"sha": "a", "commit": "oops"}]', b'[{"sha": "a", "commit": {"author": 3}}]'):
            with patch("commit_collector.urlopen", return_value=_Resp(200, body)):
                res = fetch_commits("o", "r", self.window)
            self.assertFalse(res.ok, body)
            self.assertIn("malformed response", res.error)

    def test_missing_fields_become_error_result(self):
        body = json.dumps([{"sha": "a" * 40, "commit": {"message": "x"}}]).encode("utf-8")
        with patch("commit_collector.urlopen", return_value=_Resp(200, body)):
            res = fetch_commits("o", "r", self.window)
        self.assertFalse(res.ok)


class TestCollectDay(unittest.TestCase):
    def _records(self) -> list[CommitRecord]:
        return [
            CommitRecord(
                sha=c * 40,
                message=msg,
                author_date=_dt.datetime(2026, 3, 3, h, tzinfo=_dt.timezone.utc),
                url="https://github.com/o/r/commit/x",
            )
            for c, msg, h in [
                ("a", "p -BaekjoonHub, A", 1),
                ("b", "p -BaekjoonHub, B", 2),
                ("c", "Delete tmp", 3),
            ]
        ]

    def test_dedupe_disabled_keeps_everything(self):
        with patch.object(
            commit_collector, "fetch_commits", return_value=FetchResult(ok=True, commits=self._records())
        ) as fetch_mock:
            report = collect_day("o", "r", _dt.date(2026, 3, 3), _config())

        self.assertEqual(report.solved_count, 3)
        self.assertTrue(report.succeeded)
        self.assertEqual(report.date_label, "2026. 3. 3.")
        window = fetch_mock.call_args.args[2]
        self.assertEqual(window, window_for_local_day(_dt.date(2026, 3, 3)))

    def test_dedupe_enabled_filters(self):
        with patch.object(
            commit_collector, "fetch_commits", return_value=FetchResult(ok=True, commits=self._records())
        ):
            report = collect_day("o", "r", _dt.date(2026, 3, 3), _config(dedupe_enabled=True))

        self.assertEqual([c.sha[0] for c in report.commits], ["b"])
        self.assertFalse(report.succeeded)

    def test_fetch_error_propagates_to_report(self):
        with patch.object(
            commit_collector, "fetch_commits", return_value=FetchResult(ok=False, error="HTTP 500: x")
        ):
            report = collect_day("o", "r", _dt.date(2026, 3, 3), _config())

        self.assertEqual(report.fetch_error, "HTTP 500: x")
        self.assertFalse(report.succeeded)


if __name__ == "__main__":
    unittest.main()
