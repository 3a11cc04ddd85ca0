from datetime import datetime, timezone
from typing import Any, Dict, List

from pingbot.domain.exceptions import DecodeException
from pingbot.domain.models import (
    Category,
    CategoryContent,
    Comment,
    DiscourseUser,
    Issue,
    Poster,
    Topic,
)

DECODE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _parse_timestamp(raw_date: Any) -> datetime:
    if not raw_date:
        raise ValueError("created_at is required.")
    parsed = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
    # timestamps without an offset are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _expect_list(payload: Any, what: str) -> List[Any]:
    if not isinstance(payload, list):
        raise DecodeException(f"Expected a list of {what}, got {type(payload).__name__}.")
    return payload


class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON into domain entities.
    """

    @staticmethod
    def to_issue(raw: Dict[str, Any]) -> Issue:
        """
        Transforms one entry of the issue listing into an Issue.

        Args:
            raw (Dict[str, Any]): The raw JSON object from ``GET /repos/{owner}/{repo}/issues``.

        Returns:
            Issue: The domain model, without owner/repo annotations.
        """
        try:
            return Issue(
                number=raw["number"],
                title=raw["title"],
                created_at=_parse_timestamp(raw.get("created_at")),
                author_association=raw.get("author_association") or "NONE",
                # the listing mixes pull requests in, marked by this key
                is_pull_request=raw.get("pull_request") is not None,
            )
        except DECODE_ERRORS as e:
            raise DecodeException(f"Malformed issue payload: {e}") from e

    @staticmethod
    def to_issues(payload: Any) -> List[Issue]:
        return [GitHubTranslator.to_issue(raw) for raw in _expect_list(payload, "issues")]

    @staticmethod
    def to_comment(raw: Dict[str, Any]) -> Comment:
        try:
            return Comment(
                author_association=raw.get("author_association") or "NONE",
                html_url=raw.get("html_url") or "",
            )
        except DECODE_ERRORS as e:
            raise DecodeException(f"Malformed comment payload: {e}") from e

    @staticmethod
    def to_comments(payload: Any) -> List[Comment]:
        return [GitHubTranslator.to_comment(raw) for raw in _expect_list(payload, "comments")]

    @staticmethod
    def to_login(payload: Any) -> str:
        try:
            return payload["login"]
        except DECODE_ERRORS as e:
            raise DecodeException(f"Malformed user payload: {e}") from e


class DiscourseTranslator:
    """
    Anti-corruption layer for Discourse ``categories.json`` and ``c/{id}.json`` payloads.
    """

    @staticmethod
    def to_categories(payload: Any) -> List[Category]:
        try:
            raw_categories = payload["category_list"]["categories"]
            return [Category(id=raw["id"], name=raw["name"]) for raw in raw_categories]
        except DECODE_ERRORS as e:
            raise DecodeException(f"Malformed category list: {e}") from e

    @staticmethod
    def to_topic(raw: Dict[str, Any]) -> Topic:
        return Topic(
            id=raw["id"],
            title=raw["title"],
            created_at=_parse_timestamp(raw.get("created_at")),
            posters=tuple(Poster(user_id=p["user_id"]) for p in raw.get("posters") or []),
        )

    @staticmethod
    def to_category_content(payload: Any) -> CategoryContent:
        """
        Transforms a category page into its users and topics.

        Discourse may send ``null`` for a user's display name; it becomes an empty string.
        """
        try:
            users = [
                DiscourseUser(id=raw["id"], name=raw.get("name") or "", username=raw["username"])
                for raw in payload.get("users") or []
            ]
            topics = [DiscourseTranslator.to_topic(raw) for raw in payload["topic_list"]["topics"]]
            return CategoryContent(users=users, topics=topics)
        except DECODE_ERRORS as e:
            raise DecodeException(f"Malformed category content: {e}") from e
