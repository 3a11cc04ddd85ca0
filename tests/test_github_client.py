import unittest
from unittest.mock import MagicMock

import aiohttp

from pingbot.domain.exceptions import DecodeException, TransportException
from pingbot.domain.models import RepositoryRef
from pingbot.infrastructure.github_client import GitHubRestClient
from helpers import fake_response


class TestGitHubRestClient(unittest.TestCase):
    def test_headers_use_token_scheme(self) -> None:
        client = GitHubRestClient(token="test-token")

        self.assertEqual(client.headers["Authorization"], "token test-token")
        self.assertEqual(client.headers["User-Agent"], "pingbot")
        self.assertIn("Accept", client.headers)


class TestGitHubRestRequests(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_issue_page_sends_paging_params(self) -> None:
        client = GitHubRestClient(token="t", api_url="https://github.example/api/")
        session = MagicMock()
        session.get = MagicMock(return_value=fake_response(200, [{"number": 1}]))

        batch = await client.fetch_issue_page(session, RepositoryRef.parse("acme/widgets"), 3, 100)

        self.assertEqual(batch, [{"number": 1}])
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://github.example/api/repos/acme/widgets/issues")
        self.assertEqual(kwargs["params"], {"state": "open", "page": 3, "per_page": 100})
        self.assertEqual(kwargs["headers"]["Authorization"], "token t")
        self.assertIsNotNone(kwargs["timeout"])

    async def test_fetch_comment_page_url(self) -> None:
        client = GitHubRestClient(token="t")
        session = MagicMock()
        session.get = MagicMock(return_value=fake_response(200, []))

        await client.fetch_comment_page(session, RepositoryRef.parse("acme/widgets"), 12, 1, 100)

        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://api.github.com/repos/acme/widgets/issues/12/comments")
        self.assertEqual(kwargs["params"], {"page": 1, "per_page": 100})

    async def test_http_error_status_raises_transport_exception(self) -> None:
        client = GitHubRestClient(token="t")
        session = MagicMock()
        session.get = MagicMock(return_value=fake_response(404, {"message": "Not Found"}))

        with self.assertRaises(TransportException) as ctx:
            await client.get_current_user(session)
        self.assertEqual(ctx.exception.status, 404)

    async def test_connection_error_raises_transport_exception(self) -> None:
        client = GitHubRestClient(token="t")
        session = MagicMock()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("connection reset"))

        with self.assertRaises(TransportException):
            await client.get_current_user(session)

    async def test_invalid_json_raises_decode_exception(self) -> None:
        client = GitHubRestClient(token="t")
        response = fake_response(200)
        response.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.get = MagicMock(return_value=response)

        with self.assertRaises(DecodeException):
            await client.get_current_user(session)
