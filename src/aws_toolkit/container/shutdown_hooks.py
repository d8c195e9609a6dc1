"""
Process shutdown hooks for long-running hosts.

The Lambda runtime manages the process itself, so LambdaFunction never
installs signal handlers. Hosts that run a dispatcher as a regular process
use ShutdownHooks to close it on SIGTERM, SIGINT or interpreter exit.
"""

import atexit
import signal
import threading
from typing import Callable, Dict, List, Sequence

from aws_toolkit.utils.observability import logger


class ShutdownHooks:
    """Callbacks that run once when the process shuts down."""

    def __init__(self):
        self._hooks: List[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._ran = False
        self._previous_handlers: Dict[int, object] = {}

    def register(self, hook: Callable[[], None]) -> None:
        with self._lock:
            self._hooks.append(hook)

    def run(self) -> None:
        """Run all hooks in reverse registration order. Later calls do nothing."""
        with self._lock:
            if self._ran:
                return
            self._ran = True
            hooks = list(reversed(self._hooks))

        for hook in hooks:
            try:
                hook()
            except Exception:
                logger.exception("Shutdown hook failed", extra={"hook": getattr(hook, '__name__', repr(hook))})

    def install(self, signals: Sequence[int] = (signal.SIGTERM, signal.SIGINT)) -> None:
        """
        Run the hooks at interpreter exit and on the given signals.

        Must be called from the main thread.
        """
        atexit.register(self.run)
        for signum in signals:
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

        logger.info("Shutdown hooks installed", extra={"signals": [int(s) for s in signals]})

    def _handle_signal(self, signum, frame) -> None:
        logger.info("Shutdown signal received", extra={"signal": signum})
        self.run()

        previous = self._previous_handlers.get(signum)
        if callable(previous):
            previous(signum, frame)
        elif signum == signal.SIGINT:
            raise KeyboardInterrupt
        else:
            raise SystemExit(128 + signum)
