"""
Debounce Service

Coalesces rapid repeated saves into one deferred call. There is a
single pending slot: scheduling again cancels whatever was waiting.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Single-slot cancelable scheduled call.

    Args:
        delay: Quiet period in seconds before the call runs
        timer_factory: Callable shaped like threading.Timer(delay, fn, args)
        context: Optional callable returning a context manager to enter
            around the deferred call (e.g. a Flask app context)
    """

    def __init__(self, delay, timer_factory=threading.Timer, context=None):
        self.delay = delay
        self._timer_factory = timer_factory
        self._context = context
        self._lock = threading.Lock()
        # held while a call runs; taken before _lock, never after
        self._run_lock = threading.RLock()
        self._timer = None
        self._call = None

    @property
    def pending(self):
        return self._call is not None

    def schedule(self, fn, *args):
        """Run fn(*args) after the quiet period, replacing any pending call."""
        with self._lock:
            self._cancel_locked()
            call = (fn, args)
            timer = self._timer_factory(self.delay, self._fire, args=(call,))
            timer.daemon = True
            self._timer = timer
            self._call = call
        timer.start()

    def cancel(self):
        """Drop the pending call. Returns True if one was waiting."""
        with self._lock:
            return self._cancel_locked()

    def flush(self):
        """
        Run the pending call now instead of waiting. Returns True if it ran.

        Waits for a deferred call already running on the timer thread.
        """
        with self._run_lock:
            with self._lock:
                call = self._call
                self._cancel_locked()
            if call is None:
                return False
            self._run(call)
            return True

    def run_exclusive(self, fn, *args):
        """
        Drop the pending call and run fn(*args) now.

        A deferred call already running finishes first, so an older
        snapshot can never be written after fn.
        """
        with self._run_lock:
            self.cancel()
            return fn(*args)

    def _cancel_locked(self):
        had_call = self._call is not None
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._call = None
        return had_call

    def _fire(self, call):
        with self._run_lock:
            with self._lock:
                # a newer schedule, cancel or flush has replaced this call
                if self._call is not call:
                    return
                self._timer = None
                self._call = None
            # nothing above a timer thread can handle the error
            try:
                self._run(call)
            except Exception:
                logger.exception("Deferred call %r failed", call[0])

    def _run(self, call):
        fn, args = call
        if self._context is None:
            fn(*args)
            return
        with self._context():
            fn(*args)
