"""
Oracle Client - The remote judge behind two operations.

The client:
1. Builds the request payload for an action
2. Sends it through an OracleTransport
3. Decodes the response strictly into a secret item or a Verdict

Guess vs. question classification is entirely the oracle's job.
The client never inspects the user's text.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
import logging
import time

import httpx

from .errors import OracleUnavailable
from .verdict import Verdict, decode_secret_item, decode_verdict

log = logging.getLogger("guessin20.oracle")

DEFAULT_TIMEOUT_S = 5.0

SELECT_SECRET_ITEM = "select_secret_item"
EVALUATE_INPUT = "evaluate_input"


class OracleTransport(ABC):
    """Request/response channel to the oracle endpoint."""

    @abstractmethod
    def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Send one request and return the decoded JSON object.

        Must raise OracleUnavailable on any failure.
        """
        pass

    def close(self):
        """Release connection resources. Nothing to do by default."""
        pass


class HttpOracleTransport(OracleTransport):
    """
    JSON-over-HTTP transport.

    Usage:
        transport = HttpOracleTransport("https://example.test/functions/v1/game-llm")
        data = transport.call({"action": "select_secret_item"})
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.headers = {"content-type": "application/json"}
        if api_key:
            self.headers["authorization"] = f"Bearer {api_key}"
            self.headers["apikey"] = api_key
        self._client = client or httpx.Client(timeout=timeout)

    def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.url:
            raise OracleUnavailable("Oracle URL is not configured")

        try:
            r = self._client.post(
                self.url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
            r.raise_for_status()
        except httpx.TimeoutException as e:
            raise OracleUnavailable(f"Oracle timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise OracleUnavailable(
                f"Oracle returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise OracleUnavailable(f"Oracle request failed: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise OracleUnavailable("Oracle response is not valid JSON") from e
        if not isinstance(data, dict):
            raise OracleUnavailable("Oracle response is not a JSON object")
        return data

    def close(self):
        self._client.close()


class OracleClient:
    """
    Judge for a game of 20 Questions.

    Both operations either return a decoded value or raise
    OracleUnavailable. There is no retry; the caller decides.
    """

    def __init__(self, transport: OracleTransport):
        self.transport = transport

    def select_secret_item(self) -> str:
        """Ask the oracle to choose a concrete, common, physical item."""
        data = self._timed_call(SELECT_SECRET_ITEM, {"action": SELECT_SECRET_ITEM})
        return decode_secret_item(data)

    def evaluate(self, secret_item: str, user_text: str, question_index: int) -> Verdict:
        """
        Judge one player input against the secret item.

        question_index is the number of questions used before this one.
        """
        data = self._timed_call(
            EVALUATE_INPUT,
            {
                "action": EVALUATE_INPUT,
                "userInput": user_text,
                "questionCount": question_index,
                "secretItem": secret_item,
            },
        )
        verdict = decode_verdict(data)
        log.debug("Q%d verdict: %s", question_index + 1, verdict.kind.value)
        return verdict

    def close(self):
        self.transport.close()

    def _timed_call(self, action: str, payload: dict[str, Any]) -> Any:
        start = time.perf_counter()
        try:
            data = self.transport.call(payload)
        except OracleUnavailable as e:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.warning("%s failed after %dms: %s", action, elapsed_ms, e)
            raise
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        log.info("%s completed in %dms", action, elapsed_ms)
        return data
