"""Cancellable timers for the order lifecycle driver.

Two schedulers share one interface:

* ``ThreadScheduler`` runs callbacks on a single daemon worker thread and is
  what the running service uses.
* ``ManualScheduler`` keeps a virtual clock that only moves when
  ``advance()`` is called, so tests can step an order through its lifecycle
  without sleeping.

Every callback runs while holding ``scheduler.lock``. Code that reads or
writes state touched by callbacks takes the same lock. Slow side effects such
as queueing notifications go through ``defer`` so they run after the lock is
released.
"""
import heapq
import itertools
import logging
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TimerHandle:
    def __init__(self, scheduler: "Scheduler", interval: float, callback: Callable[[], None], repeat: bool):
        self._scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.repeat = repeat
        self.due = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._scheduler._discard(self)


class Scheduler:
    def __init__(self):
        self.lock = threading.RLock()
        self._counter = itertools.count()
        self._local = threading.local()

    def now(self) -> datetime:
        raise NotImplementedError

    @contextmanager
    def critical(self):
        """Hold ``lock``; work passed to ``defer`` runs after it is released.

        Nested sections hand their deferred work to the outermost one.
        """
        if getattr(self._local, "pending", None) is not None:
            with self.lock:
                yield
            return
        self._local.pending = []
        try:
            with self.lock:
                yield
        finally:
            pending, self._local.pending = self._local.pending, None
            for fn in pending:
                try:
                    fn()
                except Exception:
                    logger.exception("Deferred callback failed")

    def defer(self, fn: Callable[[], None]) -> None:
        """Queue ``fn`` until the current critical section ends, or run it now."""
        pending = getattr(self._local, "pending", None)
        if pending is None:
            fn()
        else:
            pending.append(fn)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self, delay, callback, repeat=False)
        self._schedule(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self, interval, callback, repeat=True)
        self._schedule(handle)
        return handle

    def shutdown(self) -> None:
        pass

    def _schedule(self, handle: TimerHandle) -> None:
        raise NotImplementedError

    def _discard(self, handle: TimerHandle) -> None:
        pass

    def _fire(self, handle: TimerHandle) -> None:
        with self.critical():
            if not handle.active:
                return
            if not handle.repeat:
                handle._cancelled = True
            try:
                handle.callback()
            except Exception:
                logger.exception("Scheduled callback failed")
        if handle.active and handle.repeat:
            self._schedule(handle)


class ManualScheduler(Scheduler):
    def __init__(self, start: Optional[datetime] = None):
        super().__init__()
        self._now = start or datetime.now(timezone.utc)
        self._queue = []

    def now(self) -> datetime:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if handle.active)

    def advance(self, seconds: float) -> None:
        """Move the virtual clock forward, firing due timers in order."""
        with self.critical():
            target = self._now + timedelta(seconds=seconds)
            while self._queue and self._queue[0][0] <= target:
                due, _, handle = heapq.heappop(self._queue)
                if not handle.active:
                    continue
                self._now = due
                self._fire(handle)
            self._now = target

    def _schedule(self, handle: TimerHandle) -> None:
        handle.due = self._now + timedelta(seconds=handle.interval)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))


class ThreadScheduler(Scheduler):
    def __init__(self):
        super().__init__()
        self._queue = []
        self._cond = threading.Condition()
        self._thread = None
        self._stopped = False

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def shutdown(self) -> None:
        with self._cond:
            self._stopped = True
            self._queue.clear()
            self._cond.notify_all()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1)

    def _schedule(self, handle: TimerHandle) -> None:
        with self._cond:
            handle.due = time.monotonic() + handle.interval
            heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
            self._ensure_worker()
            self._cond.notify()

    def _discard(self, handle: TimerHandle) -> None:
        with self._cond:
            self._cond.notify()

    def _ensure_worker(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped = False
        self._thread = threading.Thread(target=self._work, name="order-scheduler", daemon=True)
        self._thread.start()

    def _work(self) -> None:
        while True:
            with self._cond:
                while not self._stopped:
                    while self._queue and not self._queue[0][2].active:
                        heapq.heappop(self._queue)
                    if not self._queue:
                        self._cond.wait()
                        continue
                    wait = self._queue[0][0] - time.monotonic()
                    if wait <= 0:
                        break
                    self._cond.wait(wait)
                if self._stopped:
                    return
                _, _, handle = heapq.heappop(self._queue)
            self._fire(handle)


def build_scheduler(config) -> Scheduler:
    kind = (config.get("ORDER_SCHEDULER") or "thread").lower()
    if kind == "manual":
        return ManualScheduler()
    if kind == "thread":
        return ThreadScheduler()
    raise RuntimeError(f"Unknown ORDER_SCHEDULER: {kind}")
