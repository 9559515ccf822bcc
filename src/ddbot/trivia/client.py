"""
OpenTDB client
==============

Thin async wrapper around https://opentdb.com:

- ``api_category.php``: category list (cached after the first call)
- ``api_token.php``: session tokens, which stop repeat questions
- ``api.php``: one question per call

Response codes from ``api.php``:

====  =====================================================
0     success
1     no results for the query
2     invalid parameter
3     token not found (expired); a new token is requested
4     token exhausted; the token is reset
5     rate limited
====  =====================================================
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from ddbot.errors import TriviaAPIError

logger = logging.getLogger(__name__)

OK = 0
NO_RESULTS = 1
INVALID_PARAMETER = 2
TOKEN_NOT_FOUND = 3
TOKEN_EMPTY = 4
RATE_LIMIT = 5


@dataclass(frozen=True)
class TriviaCategory:
    id: int
    name: str


@dataclass(frozen=True)
class TriviaQuestion:
    category: str
    type: str
    difficulty: str
    question: str
    correct_answer: str
    incorrect_answers: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TriviaQuestion":
        try:
            return cls(
                category=str(payload["category"]),
                type=str(payload["type"]),
                difficulty=str(payload["difficulty"]),
                question=str(payload["question"]),
                correct_answer=str(payload["correct_answer"]),
                incorrect_answers=[str(a) for a in payload.get("incorrect_answers", [])],
            )
        except KeyError as exc:
            raise TriviaAPIError(f"Malformed question payload (missing {exc.args[0]})") from exc


class OpenTDBClient:
    """Async OpenTDB client holding the session token in memory."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if base_url is None or timeout is None:
            from ddbot.config import trivia as trivia_cfg

            base_url = base_url or trivia_cfg.API_BASE
            timeout = timeout if timeout is not None else trivia_cfg.REQUEST_TIMEOUT

        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._categories: Optional[List[TriviaCategory]] = None
        self.token: Optional[str] = None

    # ---------- low-level helpers ------------------------------------ #

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{path}"
        try:
            async with self._get_session().get(url, params=params or {}, timeout=self._timeout) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise TriviaAPIError(f"Request to {path} timed out") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise TriviaAPIError(f"Request to {path} failed: {exc}") from exc

        if not isinstance(data, dict):
            raise TriviaAPIError(f"Unexpected response from {path}")
        return data

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    # ---------- public contract -------------------------------------- #

    async def categories(self) -> List[TriviaCategory]:
        """Return every category; fetched once per client."""
        if self._categories is None:
            data = await self._get_json("api_category.php")
            self._categories = [
                TriviaCategory(int(c["id"]), str(c["name"]))
                for c in data.get("trivia_categories", [])
            ]
            logger.info("Loaded %d trivia categories", len(self._categories))
        return list(self._categories)

    async def request_token(self) -> str:
        """Ask for a fresh session token and keep it."""
        data = await self._get_json("api_token.php", {"command": "request"})
        code = data.get("response_code")
        if code != OK or not data.get("token"):
            raise TriviaAPIError(f"Could not generate new token.\nResponse code {code}")

        self.token = str(data["token"])
        logger.info("Received new OpenTDB token")
        return self.token

    async def reset_token(self) -> str:
        """Reset the current token so questions can repeat again."""
        if not self.token:
            raise TriviaAPIError("No token found.")

        data = await self._get_json("api_token.php", {"command": "reset", "token": self.token})
        code = data.get("response_code")
        if code != OK:
            raise TriviaAPIError(f"Could not reset token.\nResponse code {code}")

        self.token = str(data.get("token") or self.token)
        logger.info("Reset OpenTDB token")
        return self.token

    async def question(self, category_id: Optional[int] = None) -> TriviaQuestion:
        """
        Fetch one question, optionally restricted to ``category_id``.

        Token problems (codes 3 and 4) are repaired once before giving up.
        """
        if not self.token:
            await self.request_token()

        repaired = False
        while True:
            params: Dict[str, Any] = {"amount": 1, "token": self.token}
            if category_id is not None:
                params["category"] = category_id

            data = await self._get_json("api.php", params)
            code = data.get("response_code")

            if code == OK:
                results = data.get("results") or []
                if not results:
                    raise TriviaAPIError(f"Could not get question.\nResponse code: {code}")
                return TriviaQuestion.from_payload(results[0])

            if code == NO_RESULTS:
                raise TriviaAPIError(f"Could not get question.\nResponse code: {code}")
            if code == INVALID_PARAMETER:
                raise TriviaAPIError(f"Invalid argument.\nCategory ID: `{category_id}`")
            if code == RATE_LIMIT:
                raise TriviaAPIError("Too many requests, try again in a few seconds.")

            if repaired or code not in (TOKEN_NOT_FOUND, TOKEN_EMPTY):
                raise TriviaAPIError(f"Could not get question.\nResponse code: {code}")

            repaired = True
            if code == TOKEN_EMPTY:
                logger.info("OpenTDB token exhausted; requesting reset")
                await self.reset_token()
            else:
                logger.info("OpenTDB token unknown; requesting a new one")
                await self.request_token()


__all__ = ["OpenTDBClient", "TriviaCategory", "TriviaQuestion"]
