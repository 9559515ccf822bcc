import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from ddbot.errors import TriviaAPIError
from ddbot.trivia import OpenTDBClient

QUESTION = {
    "category": "History",
    "type": "multiple",
    "difficulty": "medium",
    "question": "Q?",
    "correct_answer": "A",
    "incorrect_answers": ["B", "C", "D"],
}


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def raise_for_status(self):
        return None

    async def json(self, content_type=None):
        return self.payload


class FakeSession:
    """Returns queued payloads in order and records every request."""

    closed = False

    def __init__(self, *payloads):
        self.payloads = list(payloads)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url.rsplit("/", 1)[-1], dict(params or {})))
        return FakeResponse(self.payloads.pop(0))


def _client(session):
    return OpenTDBClient(session, base_url="https://example.test", timeout=1)


def test_first_question_requests_token():
    session = FakeSession(
        {"response_code": 0, "token": "tok"},
        {"response_code": 0, "results": [QUESTION]},
    )
    client = _client(session)

    question = asyncio.run(client.question(23))

    assert question.correct_answer == "A"
    assert client.token == "tok"
    assert session.calls[0] == ("api_token.php", {"command": "request"})
    assert session.calls[1] == ("api.php", {"amount": 1, "token": "tok", "category": 23})


def test_exhausted_token_is_reset_once():
    session = FakeSession(
        {"response_code": 4, "results": []},
        {"response_code": 0, "token": "tok"},
        {"response_code": 0, "results": [QUESTION]},
    )
    client = _client(session)
    client.token = "tok"

    asyncio.run(client.question())

    assert [c[0] for c in session.calls] == ["api.php", "api_token.php", "api.php"]
    assert session.calls[1][1] == {"command": "reset", "token": "tok"}


def test_unknown_token_is_replaced():
    session = FakeSession(
        {"response_code": 3},
        {"response_code": 0, "token": "fresh"},
        {"response_code": 0, "results": [QUESTION]},
    )
    client = _client(session)
    client.token = "stale"

    asyncio.run(client.question())

    assert client.token == "fresh"


def test_repeated_token_failure_gives_up():
    session = FakeSession(
        {"response_code": 4},
        {"response_code": 0, "token": "tok"},
        {"response_code": 4},
    )
    client = _client(session)
    client.token = "tok"

    with pytest.raises(TriviaAPIError):
        asyncio.run(client.question())


@pytest.mark.parametrize(
    "code, fragment",
    [(1, "Could not get question"), (2, "Invalid argument"), (5, "Too many requests")],
)
def test_error_codes_raise(code, fragment):
    client = _client(FakeSession({"response_code": code}))
    client.token = "tok"

    with pytest.raises(TriviaAPIError, match=fragment):
        asyncio.run(client.question(9))


def test_categories_are_cached():
    session = FakeSession(
        {"trivia_categories": [{"id": 9, "name": "General Knowledge"}, {"id": 23, "name": "History"}]}
    )
    client = _client(session)

    async def run():
        first = await client.categories()
        second = await client.categories()
        return first, second

    first, second = asyncio.run(run())
    assert [c.id for c in first] == [9, 23]
    assert first == second
    assert len(session.calls) == 1


def test_reset_without_token_fails():
    with pytest.raises(TriviaAPIError, match="No token found"):
        asyncio.run(_client(FakeSession()).reset_token())


def test_failed_token_request_raises():
    client = _client(FakeSession({"response_code": 2}))
    with pytest.raises(TriviaAPIError, match="Could not generate new token"):
        asyncio.run(client.request_token())


async def _categories_from(handler, *, shared_session):
    app = web.Application()
    app.router.add_get("/api_category.php", handler)

    async with test_utils.TestServer(app) as server:
        base_url = str(server.make_url("/"))
        if shared_session:
            async with aiohttp.ClientSession() as session:
                client = OpenTDBClient(session, base_url=base_url, timeout=0.2)
                return await client.categories()

        client = OpenTDBClient(base_url=base_url, timeout=0.2)
        try:
            return await client.categories()
        finally:
            await client.close()


async def _slow(request):
    await asyncio.sleep(1)
    return web.json_response({"trivia_categories": []})


async def _html(request):
    return web.Response(text="<html>maintenance</html>", content_type="text/html")


@pytest.mark.parametrize("shared_session", [True, False])
def test_request_timeout_applies_to_every_session(shared_session):
    with pytest.raises(TriviaAPIError, match="timed out"):
        asyncio.run(_categories_from(_slow, shared_session=shared_session))


def test_non_json_body_raises_api_error():
    with pytest.raises(TriviaAPIError, match="api_category.php failed"):
        asyncio.run(_categories_from(_html, shared_session=True))


def test_http_error_status_raises_api_error():
    async def unavailable(request):
        raise web.HTTPServiceUnavailable()

    with pytest.raises(TriviaAPIError, match="failed"):
        asyncio.run(_categories_from(unavailable, shared_session=False))
