"""Shared HTTP plumbing for every outbound API the bot calls.

``ApiClient`` wraps an ``httpx.Client`` with a request timeout,
exponential-backoff retries for timeouts, connection errors and 5xx
responses, and per-call metrics.  4xx responses are raised immediately.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from saude_bot.services.metrics import metrics

logger = logging.getLogger(__name__)

# ── Retry configuration ─────────────────────────────────────────────
MAX_RETRIES = 3
INITIAL_BACKOFF_SECONDS = 1.0
REQUEST_TIMEOUT_SECONDS = 15.0


class ExternalAPIError(Exception):
    """Raised when an outbound API call fails after all retries."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ApiClient:
    """Base class for the bot's API clients.

    Subclasses set ``service_name`` (used for logs and metrics) and call
    :meth:`_request` with a path relative to ``base_url``.
    """

    service_name = "external"

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
    ):
        self._base_url = base_url
        self._max_retries = max_retries
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers or {},
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Execute an HTTP request with exponential-backoff retries."""
        operation = f"{method} {path}"
        last_error: Exception | None = None
        for attempt in range(1, self._max_retries + 1):
            started = time.perf_counter()
            try:
                response = self._client.request(
                    method,
                    path,
                    params=params,
                    json=json_body,
                )
                if response.status_code >= 400:
                    kind = "Server" if response.status_code >= 500 else "Client"
                    raise ExternalAPIError(
                        f"{kind} error {response.status_code} from "
                        f"{self.service_name}: {response.text}",
                        status_code=response.status_code,
                    )
                data = response.json()
                metrics.record_success(
                    self.service_name, operation, _elapsed_ms(started),
                )
                return data

            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                last_error = exc
                metrics.record_failure(
                    self.service_name, operation, type(exc).__name__, _elapsed_ms(started),
                )
                logger.warning(
                    "%s attempt %d/%d failed (%s). Retrying in %.1fs…",
                    self.service_name,
                    attempt,
                    self._max_retries,
                    type(exc).__name__,
                    INITIAL_BACKOFF_SECONDS * (2 ** (attempt - 1)),
                )
            except httpx.HTTPError as exc:
                metrics.record_failure(
                    self.service_name, operation, type(exc).__name__, _elapsed_ms(started),
                )
                raise ExternalAPIError(
                    f"{self.service_name} request failed: {exc}",
                ) from exc
            except ExternalAPIError as exc:
                metrics.record_failure(
                    self.service_name, operation,
                    f"{exc.status_code // 100}xx", _elapsed_ms(started),
                )
                if exc.status_code >= 500:
                    last_error = exc
                    logger.warning(
                        "%s server error on attempt %d/%d. Retrying…",
                        self.service_name,
                        attempt,
                        self._max_retries,
                    )
                else:
                    raise
            except ValueError as exc:
                # Body was not JSON
                metrics.record_failure(
                    self.service_name, operation, "invalid_json", _elapsed_ms(started),
                )
                raise ExternalAPIError(
                    f"Invalid JSON from {self.service_name}: {exc}",
                ) from exc

            if attempt < self._max_retries:
                time.sleep(INITIAL_BACKOFF_SECONDS * (2 ** (attempt - 1)))

        raise ExternalAPIError(
            f"{self.service_name} request failed after {self._max_retries} retries: {last_error}"
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
