import unittest
from unittest.mock import MagicMock

from pingbot.domain.exceptions import NotificationException
from pingbot.infrastructure.slack_client import SlackClient
from helpers import fake_response


class TestSlackClient(unittest.IsolatedAsyncioTestCase):
    async def test_send_message_posts_channel_and_text(self) -> None:
        client = SlackClient(token="xoxb-token")
        session = MagicMock()
        session.post = MagicMock(return_value=fake_response(200, {"ok": True}))

        await client.send_message(session, "#triage", "report body")

        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://slack.com/api/chat.postMessage")
        self.assertEqual(kwargs["json"], {"channel": "#triage", "text": "report body"})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer xoxb-token")

    async def test_not_ok_raises_with_slack_error(self) -> None:
        client = SlackClient(token="xoxb-token")
        session = MagicMock()
        session.post = MagicMock(return_value=fake_response(200, {"ok": False, "error": "channel_not_found"}))

        with self.assertRaises(NotificationException) as ctx:
            await client.send_message(session, "#missing", "report body")
        self.assertEqual(str(ctx.exception), "channel_not_found")

    async def test_not_ok_without_error_message(self) -> None:
        client = SlackClient(token="xoxb-token")
        session = MagicMock()
        session.post = MagicMock(return_value=fake_response(200, {"ok": False}))

        with self.assertRaises(NotificationException) as ctx:
            await client.send_message(session, "#triage", "report body")
        self.assertEqual(str(ctx.exception), "unknown error")
