import logging

import aiohttp

from pingbot.domain.exceptions import NotificationException
from pingbot.infrastructure.http import USER_AGENT, post_json

logger = logging.getLogger(__name__)

SLACK_API_URL = "https://slack.com/api"


class SlackClient:
    """
    Notification sink posting the report to a Slack channel through ``chat.postMessage``.
    """

    def __init__(self, token: str, api_url: str = SLACK_API_URL):
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json; charset=utf-8",
            "User-Agent": USER_AGENT,
        }
        self.api_url = api_url.rstrip("/")

    async def send_message(self, session: aiohttp.ClientSession, channel: str, text: str) -> None:
        """
        Posts ``text`` to ``channel``.

        Raises:
            NotificationException: If Slack answers with ``ok: false``.
        """
        url = f"{self.api_url}/chat.postMessage"
        body = await post_json(session, url, self.headers, {"channel": channel, "text": text})
        if not isinstance(body, dict) or not body.get("ok"):
            error = body.get("error") if isinstance(body, dict) else None
            raise NotificationException(error or "unknown error")
        logger.info(f"Report sent to {channel}.")
