"""CloudWatch custom metrics for the external APIs the agent calls.

Every Apollo, Unipile and Anthropic round-trip is counted and timed.

* Data points accumulate in a lock-protected buffer.
* With ``METRICS_ENABLED=true`` a daemon thread ships the buffer to
  CloudWatch every ``FLUSH_INTERVAL_SECONDS``; otherwise points are only
  logged at DEBUG and dropped on flush.
* ``put_metric_data`` takes at most ``MAX_BATCH_SIZE`` points per call.

>>> from sales_copilot.services.metrics import metrics
>>> with metrics.timed("apollo", "POST /v1/mixed_people/search"):
...     ...
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "SalesCopilot"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000

_REQUEST_COUNT = "ExternalAPI/RequestCount"
_ERROR_COUNT = "ExternalAPI/ErrorCount"
_LATENCY = "ExternalAPI/Latency"


def _dims(**pairs: str) -> list[dict[str, str]]:
    return [{"Name": name, "Value": value} for name, value in pairs.items()]


class MetricsClient:
    """Buffers metric data points and publishes them in batches."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None

        if self._enabled:
            self._start_flush_thread()

    def _get_cw_client(self):
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Recording ─────────────────────────────────────────────────────

    def record_success(self, service: str, operation: str, latency_ms: float) -> None:
        """Count one successful call and record its latency."""
        now = datetime.now(UTC)
        self._append(_REQUEST_COUNT, _dims(Service=service, Status="success"), 1, "Count", now)
        self._append(
            _LATENCY, _dims(Service=service, Operation=operation), latency_ms, "Milliseconds", now,
        )
        logger.debug("Metric: %s %s ok in %.1fms", service, operation, latency_ms)

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Count one failed call, keyed by ``error_type``."""
        now = datetime.now(UTC)
        self._append(_REQUEST_COUNT, _dims(Service=service, Status="failure"), 1, "Count", now)
        self._append(_ERROR_COUNT, _dims(Service=service, ErrorType=error_type), 1, "Count", now)
        if latency_ms > 0:
            self._append(
                _LATENCY, _dims(Service=service, Operation=operation),
                latency_ms, "Milliseconds", now,
            )
        logger.debug(
            "Metric: %s %s failed (%s) after %.1fms",
            service, operation, error_type, latency_ms,
        )

    @contextmanager
    def timed(self, service: str, operation: str) -> Iterator[None]:
        """Time the wrapped block; any exception is recorded and re-raised."""
        t0 = time.perf_counter()
        try:
            yield
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            self.record_failure(service, operation, type(exc).__name__, latency_ms=elapsed)
            raise
        self.record_success(service, operation, (time.perf_counter() - t0) * 1000)

    # ── Publishing ────────────────────────────────────────────────────

    def flush(self) -> int:
        """Send buffered points to CloudWatch.  Returns how many were sent."""
        with self._lock:
            batch, self._buffer = self._buffer, []

        if not batch:
            return 0
        if not self._enabled:
            logger.debug("Metrics disabled, dropping %d buffered points", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for start in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[start : start + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    def _append(
        self,
        name: str,
        dimensions: list[dict[str, str]],
        value: float,
        unit: str,
        timestamp: datetime,
    ) -> None:
        point = {
            "MetricName": name,
            "Dimensions": dimensions,
            "Timestamp": timestamp,
            "Value": value,
            "Unit": unit,
        }
        with self._lock:
            self._buffer.append(point)

    def _start_flush_thread(self) -> None:
        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        threading.Thread(target=_loop, daemon=True, name="metrics-flush").start()
        atexit.register(self.flush)
        logger.info("Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS)


metrics = MetricsClient()
