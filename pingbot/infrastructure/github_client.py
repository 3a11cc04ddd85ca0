import logging
from typing import Any, Dict, List

import aiohttp

from pingbot.domain.models import RepositoryRef
from pingbot.infrastructure.http import USER_AGENT, get_json

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubRestClient:
    """
    Client for the GitHub REST API.
    Handles authentication and the page-at-a-time issue and comment listings.
    Requests are not retried; failures surface as TransportException or DecodeException.
    """

    def __init__(self, token: str, api_url: str = GITHUB_API_URL):
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.api_url = api_url.rstrip("/")

    async def get_current_user(self, session: aiohttp.ClientSession) -> Dict[str, Any]:
        return await get_json(session, f"{self.api_url}/user", self.headers)

    async def fetch_issue_page(
        self, session: aiohttp.ClientSession, repo: RepositoryRef, page: int, per_page: int
    ) -> List[Dict[str, Any]]:
        """Fetches one page of open issues (pull requests included, as GitHub lists them)."""
        url = f"{self.api_url}/repos/{repo.owner}/{repo.name}/issues"
        params = {"state": "open", "page": page, "per_page": per_page}
        return await get_json(session, url, self.headers, params)

    async def fetch_comment_page(
        self, session: aiohttp.ClientSession, repo: RepositoryRef, number: int, page: int, per_page: int
    ) -> List[Dict[str, Any]]:
        url = f"{self.api_url}/repos/{repo.owner}/{repo.name}/issues/{number}/comments"
        params = {"page": page, "per_page": per_page}
        return await get_json(session, url, self.headers, params)
