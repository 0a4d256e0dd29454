"""
Error tracking for unexpected, non-fatal faults.

report_error() is fire-and-forget: it never raises and never blocks the
request. Two backends:
    LoggingErrorTracker — ERROR log line with traceback (default)
    SlackErrorTracker   — posts a short message to a Slack incoming webhook
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

logger = logging.getLogger("banks.services.error_tracking")


class ErrorTracker(ABC):
    @abstractmethod
    def report_error(self, error: BaseException, context: dict[str, Any] | None = None) -> None:
        """Record `error` for operators. Must not raise."""

    async def close(self) -> None:
        return None


class LoggingErrorTracker(ErrorTracker):
    def report_error(self, error: BaseException, context: dict[str, Any] | None = None) -> None:
        logger.error(
            "unexpected error: %s: %s",
            type(error).__name__, error,
            extra={"context": context or {}},
            exc_info=(type(error), error, error.__traceback__),
        )


class SlackErrorTracker(ErrorTracker):
    """
    Sends each report to Slack in a background task, and logs it locally too.
    Webhook failures are logged at WARNING and otherwise ignored.
    """

    def __init__(
        self,
        webhook_url: str,
        environment: str = "production",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._environment = environment
        self._client = httpx.AsyncClient(timeout=5.0, transport=transport)
        self._fallback = LoggingErrorTracker()
        self._pending: set[asyncio.Task] = set()

    def report_error(self, error: BaseException, context: dict[str, Any] | None = None) -> None:
        self._fallback.report_error(error, context)
        text = f"[{self._environment}] {type(error).__name__}: {error}"
        if context:
            text += "\n" + ", ".join(f"{k}={v}" for k, v in context.items())
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running loop; Slack error report skipped")
            return
        task = loop.create_task(self._post(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _post(self, text: str) -> None:
        try:
            response = await self._client.post(self._webhook_url, json={"text": text})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Slack error report failed: %s", exc)

    async def flush(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def close(self) -> None:
        await self.flush()
        await self._client.aclose()
