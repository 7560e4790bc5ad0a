"""
Process-level fault supervisor.

Faults that escape every request (uncaught exceptions in the main thread,
in worker threads, or in event-loop callbacks) are logged with process
diagnostics. In production the process then exits rather than keep
running in a possibly corrupt state. This sits outside the per-request
pipeline.
"""

import asyncio
import logging
import os
import platform
import sys
import threading
import time
from typing import Any, Callable, Optional

from app.core.config import Settings

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


def process_diagnostics() -> dict[str, Any]:
    """Return a snapshot of the running process."""
    return {
        "pid": os.getpid(),
        "uptime_seconds": round(time.monotonic() - _STARTED_AT, 1),
        "threads": threading.active_count(),
        "python": platform.python_version(),
    }


class ProcessSupervisor:
    """Logs fatal faults and terminates the process when configured to.

    Args:
        terminate: Exit after logging a fatal fault.
        exit_func: Called with the exit status. ``os._exit`` by default so
            the exit happens even from a non-main thread.
    """

    def __init__(
        self, terminate: bool, exit_func: Optional[Callable[[int], Any]] = None
    ) -> None:
        self.terminate = terminate
        self._exit = exit_func or os._exit

    def handle_fault(self, kind: str, exc: Optional[BaseException], message: str = "") -> None:
        """Log a fatal fault and exit if configured to."""
        logger.critical(
            "%s detected: %s %s",
            kind,
            message or (type(exc).__name__ if exc else "unknown"),
            process_diagnostics(),
            exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
        )
        if self.terminate:
            logger.critical("%s: shutting down", kind)
            for handler in logging.getLogger().handlers:
                handler.flush()
            self._exit(1)

    def excepthook(self, exc_type, exc, tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc, tb)
            return
        self.handle_fault("UncaughtException", exc)

    def thread_excepthook(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit:
            return
        name = args.thread.name if args.thread else "unknown thread"
        self.handle_fault("UncaughtThreadException", args.exc_value, f"in {name}")

    def loop_exception_handler(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        self.handle_fault("UnhandledRejection", context.get("exception"), context.get("message", ""))

    def install(self) -> None:
        """Install the process-wide hooks."""
        sys.excepthook = self.excepthook
        threading.excepthook = self.thread_excepthook

    def install_loop_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install the handler for exceptions nobody awaited on ``loop``."""
        loop.set_exception_handler(self.loop_exception_handler)


def install_process_supervisor(
    settings: Settings, exit_func: Optional[Callable[[int], Any]] = None
) -> ProcessSupervisor:
    """Create and install the supervisor for this process.

    The process only exits on a fatal fault in production; elsewhere the
    fault is logged and the process keeps running.
    """
    supervisor = ProcessSupervisor(terminate=settings.is_production, exit_func=exit_func)
    supervisor.install()
    logger.debug("Process supervisor installed (terminate=%s)", supervisor.terminate)
    return supervisor
