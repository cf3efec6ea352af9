"""CloudWatch custom metrics.

Two families of data points share one buffer:

* ``ExternalAPI/*``: request count, latency and errors for every
  outbound call (Nominatim, open data, the facilities API, WhatsApp),
  reported by :class:`~saude_bot.services.http_client.ApiClient`.
* ``Conversation/*``: completed questionnaires per flow and the outcome
  of each nearest-facility lookup, reported by the conversation engine.

With ``METRICS_ENABLED=true`` a daemon thread pushes the buffer to
CloudWatch every ``FLUSH_INTERVAL_SECONDS``.  Otherwise the buffer is
only dropped on flush and data points show up at DEBUG level.

>>> from saude_bot.services.metrics import metrics
>>> metrics.record_success("nominatim", "GET /reverse", latency_ms=87.5)
>>> metrics.record_event("Conversation/Completed", flow="location")
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "SaudeBot"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # PutMetricData accepts at most this many per call


def _datum(
    name: str,
    dimensions: dict[str, str],
    value: float = 1,
    unit: str = "Count",
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    return {
        "MetricName": name,
        "Dimensions": [{"Name": k, "Value": v} for k, v in dimensions.items()],
        "Timestamp": timestamp or datetime.now(UTC),
        "Value": value,
        "Unit": unit,
    }


class MetricsClient:
    def __init__(self, enabled: bool | None = None) -> None:
        if enabled is None:
            enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._enabled = enabled
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._cw_client = None

        if self._enabled:
            self._start_flush_thread()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _cloudwatch(self):
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Outbound calls ───────────────────────────────────────────────

    def record_success(self, service: str, operation: str, latency_ms: float) -> None:
        now = datetime.now(UTC)
        self._add(
            _datum("ExternalAPI/RequestCount",
                   {"Service": service, "Status": "success"}, timestamp=now),
            _datum("ExternalAPI/Latency", {"Service": service, "Operation": operation},
                   latency_ms, "Milliseconds", now),
        )
        logger.debug("metric %s %s ok in %.1fms", service, operation, latency_ms)

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Count a failed call; latency is only recorded when known."""
        now = datetime.now(UTC)
        data = [
            _datum("ExternalAPI/RequestCount",
                   {"Service": service, "Status": "failure"}, timestamp=now),
            _datum("ExternalAPI/ErrorCount",
                   {"Service": service, "ErrorType": error_type}, timestamp=now),
        ]
        if latency_ms > 0:
            data.append(
                _datum("ExternalAPI/Latency", {"Service": service, "Operation": operation},
                       latency_ms, "Milliseconds", now)
            )
        self._add(*data)
        logger.debug("metric %s %s failed (%s)", service, operation, error_type)

    # ── Conversation events ──────────────────────────────────────────

    def record_event(self, name: str, **dimensions: str) -> None:
        """Count one occurrence of *name*, e.g. a completed flow."""
        self._add(_datum(name, {k.capitalize(): v for k, v in dimensions.items()}))
        logger.debug("metric %s %s", name, dimensions)

    # ── Publishing ───────────────────────────────────────────────────

    def pending(self) -> int:
        with self._lock:
            return len(self._buffer)

    def flush(self) -> int:
        """Push buffered data points to CloudWatch.  Returns how many were sent."""
        batch = self._drain()
        if not batch or not self._enabled:
            return 0

        sent = 0
        try:
            cw = self._cloudwatch()
            while sent < len(batch):
                chunk = batch[sent : sent + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
        except Exception:
            logger.exception("Could not publish %d metrics to CloudWatch", len(batch) - sent)
        else:
            logger.info("Published %d metrics to CloudWatch", sent)
        return sent

    def close(self) -> None:
        """Stop the flush thread and publish whatever is left."""
        self._stop.set()
        self.flush()

    def _add(self, *data: dict[str, Any]) -> None:
        with self._lock:
            self._buffer.extend(data)

    def _drain(self) -> list[dict[str, Any]]:
        with self._lock:
            batch, self._buffer = self._buffer, []
        return batch

    def _start_flush_thread(self) -> None:
        def _run() -> None:
            while not self._stop.wait(FLUSH_INTERVAL_SECONDS):
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush loop error")

        threading.Thread(target=_run, daemon=True, name="metrics-flush").start()
        atexit.register(self.close)
        logger.info("Publishing metrics every %ds", FLUSH_INTERVAL_SECONDS)


metrics = MetricsClient()
