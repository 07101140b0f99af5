"""A limiter that runs at most a fixed number of tasks at once."""

import threading

from comicsearch.api_models import SubmitStatus


class ConcurrencyLimiter:
    """Runs submitted tasks in background threads, rejecting them when full."""

    def __init__(self, limit):
        self.limit = limit if limit > 0 else 1
        self._slots = threading.BoundedSemaphore(self.limit)
        self._stopped = threading.Event()

    @property
    def stopped(self):
        return self._stopped.is_set()

    def start(self):
        """Accept tasks again."""
        self._stopped.clear()

    def stop(self):
        """Reject new tasks and wait for the running ones to finish."""
        self._stopped.set()
        self.wait()

    def wait(self):
        """Block until every running task has finished."""
        for _ in range(self.limit):
            self._slots.acquire()
        for _ in range(self.limit):
            self._slots.release()

    def submit(self, func):
        """Run func in the background if a slot is free."""
        if self.stopped or func is None:
            return SubmitStatus.REJECTED
        if not self._slots.acquire(blocking=False):
            return SubmitStatus.REJECTED

        def run():
            try:
                func()
            finally:
                self._slots.release()

        threading.Thread(target=run, daemon=True).start()
        return SubmitStatus.ACCEPTED

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()