"""
Process-wide request counters.

Requests are served concurrently from the event loop and the threadpool,
so every update goes through a lock. Only a bounded window of durations is
kept.
"""

import threading
from collections import deque
from typing import Any

DURATION_WINDOW = 100


class RequestMetrics:
    """Counts requests and errors and tracks recent response times."""

    def __init__(self, window: int = DURATION_WINDOW) -> None:
        self._lock = threading.Lock()
        self._requests = 0
        self._errors = 0
        self._durations: deque[float] = deque(maxlen=window)

    def record(self, duration_ms: float, status_code: int) -> None:
        with self._lock:
            self._requests += 1
            if status_code >= 400:
                self._errors += 1
            self._durations.append(duration_ms)

    def snapshot(self) -> dict[str, Any]:
        """Return a consistent copy of the counters."""
        with self._lock:
            requests = self._requests
            errors = self._errors
            durations = list(self._durations)
        average = sum(durations) / len(durations) if durations else 0.0
        return {
            "totalRequests": requests,
            "totalErrors": errors,
            "errorRate": round(errors / requests * 100, 2) if requests else 0.0,
            "avgResponseTimeMs": round(average, 2),
        }
