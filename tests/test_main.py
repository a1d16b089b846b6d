import os
import unittest
from unittest.mock import patch

import main
from discord_delivery.discord_client import DiscordResult


_ENV = {"DISCORD_WEBHOOK_URL": "https://discord.test/webhook", "REPOS": "me/algo"}


class TestMain(unittest.TestCase):
    def test_configuration_error_exits_before_work(self):
        with patch.dict(os.environ, {}, clear=True), patch("config._DOTENV", {}), patch(
            "main.run"
        ) as run_mock:
            rc = main.main([])
        self.assertEqual(rc, 2)
        run_mock.assert_not_called()

    def test_success(self):
        with patch.dict(os.environ, _ENV, clear=True), patch("config._DOTENV", {}), patch(
            "main.run"
        ) as run_mock:
            rc = main.main(["--date", "2026-03-04", "--dry-run"])
        self.assertEqual(rc, 0)
        self.assertEqual(str(run_mock.call_args.kwargs["local_date"]), "2026-03-04")
        self.assertTrue(run_mock.call_args.kwargs["sender"].dry_run)

    def test_unhandled_error_sends_error_embed(self):
        ok = DiscordResult(ok=True, status_code=204, latency_ms=1, error=None)
        with patch.dict(os.environ, _ENV, clear=True), patch("config._DOTENV", {}), patch(
            "main.run", side_effect=RuntimeError("kaboom")
        ), patch("main.WebhookSender") as sender_cls:
            sender_cls.return_value.return_value = ok
            rc = main.main([])

        self.assertEqual(rc, 1)
        embed = sender_cls.return_value.call_args.args[0]
        self.assertIn("kaboom", embed.description)

    def test_error_embed_failure_is_swallowed(self):
        with patch.dict(os.environ, _ENV, clear=True), patch("config._DOTENV", {}), patch(
            "main.run", side_effect=RuntimeError("kaboom")
        ), patch("main.WebhookSender") as sender_cls:
            sender_cls.return_value.side_effect = OSError("network down")
            rc = main.main([])
        self.assertEqual(rc, 1)

    def test_unknown_schedule_flag_rejected(self):
        with patch("main.load_config") as load_mock, self.assertRaises(SystemExit) as ctx:
            main.main(["--install-cron"])
        self.assertEqual(ctx.exception.code, 2)
        load_mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
