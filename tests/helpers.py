from unittest.mock import AsyncMock


def fake_response(status: int = 200, body=None) -> AsyncMock:
    """Builds an object usable as ``async with session.get(...) as response``."""
    response = AsyncMock()
    response.status = status
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value="" if body is None else str(body))
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=False)
    return response


def raw_issue(number, created_at, association="NONE", pull_request=False, title=None):
    raw = {
        "number": number,
        "title": title or f"Issue {number}",
        "created_at": created_at,
        "author_association": association,
    }
    if pull_request:
        raw["pull_request"] = {"html_url": f"https://github.com/acme/widgets/pull/{number}"}
    return raw


def raw_topic(topic_id, user_ids, title=None):
    return {
        "id": topic_id,
        "title": title or f"Topic {topic_id}",
        "created_at": "2024-01-09T08:00:00.000Z",
        "posters": [{"user_id": user_id, "description": "Original Poster"} for user_id in user_ids],
    }
