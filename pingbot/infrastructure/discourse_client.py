from typing import Any, Dict

import aiohttp

from pingbot.infrastructure.http import USER_AGENT, get_json


class DiscourseClient:
    """Anonymous client for a Discourse forum's JSON endpoints."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}

    async def get_categories(self, session: aiohttp.ClientSession) -> Dict[str, Any]:
        return await get_json(session, f"{self.base_url}/categories.json", self.headers)

    async def get_category_content(self, session: aiohttp.ClientSession, category_id: int) -> Dict[str, Any]:
        return await get_json(session, f"{self.base_url}/c/{category_id}.json", self.headers)
