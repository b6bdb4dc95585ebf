"""
Bridge between Flask request threads and the asyncio orchestrator
"""
import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """
    An event loop running forever in a daemon thread.

    The batch orchestrator lives on this loop; request handlers submit
    coroutines to it with ``run`` (wait for the result) or ``submit``.
    """

    def __init__(self, name: str = 'linguavision-loop'):
        self.name = name
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    def start(self) -> 'BackgroundLoop':
        if self._thread is not None:
            return self
        self._thread = threading.Thread(target=self._run_forever, name=self.name, daemon=True)
        self._thread.start()
        self._ready.wait()
        logger.debug(f"Background event loop '{self.name}' started")
        return self

    def _run_forever(self):
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self._ready.set()
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()

    @property
    def is_running(self) -> bool:
        return self.loop is not None and self.loop.is_running()

    def submit(self, coroutine: Coroutine) -> Future:
        """Schedule a coroutine on the loop, returns a concurrent Future"""
        if self.loop is None:
            raise RuntimeError("Background loop is not started")
        return asyncio.run_coroutine_threadsafe(coroutine, self.loop)

    def run(self, coroutine: Coroutine, timeout: Optional[float] = None) -> Any:
        """Run a coroutine on the loop and wait for its result"""
        return self.submit(coroutine).result(timeout)

    def stop(self):
        if self.loop is None or self._thread is None:
            return
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)
        self._thread = None
        logger.debug(f"Background event loop '{self.name}' stopped")
