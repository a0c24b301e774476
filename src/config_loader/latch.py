"""Counting barrier that releases waiters once it has been counted down to zero."""

from __future__ import annotations

import threading


class CountDownLatch:
    """
    One-shot countdown latch.

    Safe to count down from any thread, including after every waiter has
    given up; extra count-downs at zero are ignored.
    """

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError('count must be non-negative')
        self._count = count
        self._condition = threading.Condition(threading.Lock())

    @property
    def count(self) -> int:
        with self._condition:
            return self._count

    def count_down(self) -> int:
        """Decrement the count, waking waiters when it reaches zero. Returns the new count."""
        with self._condition:
            if self._count > 0:
                self._count -= 1
                if self._count == 0:
                    self._condition.notify_all()
            return self._count

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count reaches zero. Returns False if ``timeout`` elapsed first."""
        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout=timeout)
