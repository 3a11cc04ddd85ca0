import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import aiohttp

from pingbot.domain.membership import is_privileged_role
from pingbot.domain.models import Comment, Issue, RepositoryRef
from pingbot.infrastructure.acl import GitHubTranslator
from pingbot.infrastructure.github_client import GitHubRestClient
from pingbot.infrastructure.pagination import PER_PAGE, fetch_all_pages

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_HOURS = 72
# Comment listings fetched at once within a single repository
MAX_CONCURRENT_COMMENT_FETCHES = 5


class IssueReplyService:
    """
    Finds open issues that nobody from the team has answered yet.

    Repositories are processed one after another. Within a repository, the
    comment listings of the remaining candidates are fetched concurrently
    (bounded by a semaphore) and merged back in listing order.
    Any fetch failure aborts the whole search.
    """

    def __init__(
            self,
            github_client: GitHubRestClient,
            page_size: int = PER_PAGE,
            max_concurrency: int = MAX_CONCURRENT_COMMENT_FETCHES,
    ):
        self.github_client = github_client
        self.page_size = page_size
        self.max_concurrency = max_concurrency

    async def list_open_issues(self, session: aiohttp.ClientSession, repo: RepositoryRef) -> List[Issue]:
        """Lists every open issue and pull request of ``repo``, annotated with the repository."""
        raw_issues = await fetch_all_pages(
            lambda page, per_page: self.github_client.fetch_issue_page(session, repo, page, per_page),
            self.page_size,
        )
        issues = [
            issue.model_copy(update={"owner": repo.owner, "repo": repo.name})
            for issue in GitHubTranslator.to_issues(raw_issues)
        ]
        logger.info(f"{len(issues)} opened issues & pulls in {repo.full_name}")
        return issues

    async def list_comments(self, session: aiohttp.ClientSession, repo: RepositoryRef, number: int) -> List[Comment]:
        raw_comments = await fetch_all_pages(
            lambda page, per_page: self.github_client.fetch_comment_page(session, repo, number, page, per_page),
            self.page_size,
        )
        return GitHubTranslator.to_comments(raw_comments)

    async def count_member_comments(
        self, session: aiohttp.ClientSession, repo: RepositoryRef, issue: Issue, semaphore: asyncio.Semaphore
    ) -> int:
        async with semaphore:
            comments = await self.list_comments(session, repo, issue.number)
        return sum(1 for comment in comments if is_privileged_role(comment.author_association))

    async def _count_all(
        self, session: aiohttp.ClientSession, repo: RepositoryRef, issues: List[Issue], semaphore: asyncio.Semaphore
    ) -> List[int]:
        """Counts member comments per issue, in issue order. The first failure cancels the other fetches."""
        tasks = [
            asyncio.ensure_future(self.count_member_comments(session, repo, issue, semaphore)) for issue in issues
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    @staticmethod
    def is_candidate(issue: Issue, max_age: timedelta, now: datetime) -> bool:
        """
        An issue is worth checking for replies when it is a real issue, recent
        enough, and not filed by the team itself.
        """
        if issue.is_pull_request:
            return False
        if now - issue.created_at > max_age:
            return False
        return not is_privileged_role(issue.author_association)

    async def find_no_reply_issues(
        self,
        session: aiohttp.ClientSession,
        repos: Sequence[RepositoryRef],
        max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
        now: Optional[datetime] = None,
    ) -> List[Issue]:
        """
        Collects the no-reply issues of every repository, in repository then listing order.

        Args:
            session (aiohttp.ClientSession): Session used for every request.
            repos (Sequence[RepositoryRef]): Repositories to scan.
            max_age_hours (float): Issues opened longer ago than this are ignored.
            now (Optional[datetime]): Reference time for the age window, defaults to the current UTC time.

        Returns:
            List[Issue]: Issues without any comment from a team member.
        """
        now = now or datetime.now(timezone.utc)
        max_age = timedelta(hours=max_age_hours)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        no_reply: List[Issue] = []

        for repo in repos:
            logger.info(f"process {repo.full_name}")
            issues = await self.list_open_issues(session, repo)
            candidates = [issue for issue in issues if self.is_candidate(issue, max_age, now)]
            logger.info(f"{len(candidates)} candidate issues in {repo.full_name} within {max_age_hours}h")

            counts = await self._count_all(session, repo, candidates, semaphore)
            repo_no_reply = [issue for issue, count in zip(candidates, counts) if count == 0]
            logger.info(f"{len(repo_no_reply)} no-reply issues in {repo.full_name}")
            no_reply.extend(repo_no_reply)

        return no_reply
