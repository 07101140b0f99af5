"""A token-bucket limiter that lets through a fixed number of calls per second."""

import threading
import time

from comicsearch.api_models import SubmitStatus


class RateLimiter:
    """Hands out at most `rate` tokens per second, holding at most one in reserve."""

    def __init__(self, rate):
        self.rate = rate if rate > 0 else 1
        self._interval = 1.0 / self.rate
        self._lock = threading.Lock()
        self._tokens = threading.Condition()
        self._token_ready = True
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._stopped = True
        self._generator = None

    @property
    def stopped(self):
        with self._lock:
            return self._stopped

    def _generate(self, stop_event):
        next_tick = time.monotonic() + self._interval
        while not stop_event.wait(max(0.0, next_tick - time.monotonic())):
            now = time.monotonic()
            next_tick += self._interval
            if next_tick <= now:
                next_tick = now + self._interval
            with self._tokens:
                self._token_ready = True
                self._tokens.notify()

    def start(self):
        """Begin generating tokens; does nothing if already running."""
        with self._lock:
            if not self._stopped:
                return
            self._stop_event = threading.Event()
            self._stopped = False
            self._generator = threading.Thread(
                target=self._generate, args=(self._stop_event,), daemon=True
            )
            self._generator.start()

    def stop(self):
        """Stop generating tokens and release every waiter."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._stop_event.set()
            with self._tokens:
                self._tokens.notify_all()
            self._generator.join()
            self._generator = None

    def wait(self, timeout=None):
        """Block until a token is available; raise TimeoutError after timeout seconds.

        Returns at once while the limiter is stopped.
        """
        with self._lock:
            if self._stopped:
                return
            stop_event = self._stop_event
        with self._tokens:
            ready = self._tokens.wait_for(
                lambda: self._token_ready or stop_event.is_set(), timeout
            )
            if not ready:
                raise TimeoutError("timed out waiting for a rate limiter token")
            if stop_event.is_set():
                return
            self._token_ready = False

    def submit(self, func):
        """Wait for a token and run func in the calling thread."""
        if func is None:
            return SubmitStatus.REJECTED
        try:
            self.wait()
        except TimeoutError:
            return SubmitStatus.REJECTED
        func()
        return SubmitStatus.ACCEPTED

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()