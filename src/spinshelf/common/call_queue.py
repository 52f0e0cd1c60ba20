"""Call queue that throttles outbound API calls to a per-interval budget."""

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Optional, Tuple

import structlog

from .config import QueueConfig
from ..core.exceptions import RateLimitExceededError

logger = structlog.get_logger(__name__)

QueueCallback = Callable[[Optional[Exception], int, int], Any]


class QueueState(Enum):
    """Admission state of a CallQueue."""

    IDLE = "idle"
    ADMITTING = "admitting"
    SATURATED = "saturated"
    WINDOW_EXPIRED = "window_expired"


@dataclass(frozen=True)
class Admission:
    """Metadata handed to an admitted call."""

    calls_remaining: int
    stack_remaining: int


@dataclass
class QueueEntry:
    """A call waiting in the stack for its dispatch timer."""

    callback: QueueCallback
    handle: asyncio.TimerHandle
    window_start: float
    opens_window: bool
    future: Optional[asyncio.Future] = None


class CallQueue:
    """
    Throttle admitting at most ``max_calls`` calls per ``interval`` window.

    Calls are admitted immediately while the current window has budget and
    nothing is waiting. Otherwise they are pushed on a bounded stack, and
    every stack entry gets its own timer placing it in the first window
    that still has room for it. Entries always leave the stack in FIFO
    order. A full stack rejects the call with RateLimitExceededError.

    All state is mutated from the event loop thread only, so several
    clients may share one queue to share one quota.

    Example:
        >>> queue = CallQueue(max_calls=60, interval=60000)
        >>> admission = await queue.acquire()
        >>> print(admission.calls_remaining)
        59

    Attributes:
        config: Current QueueConfig (max_stack, max_calls, interval in ms)
    """

    def __init__(
        self,
        max_stack: Optional[int] = None,
        max_calls: Optional[int] = None,
        interval: Optional[int] = None,
    ):
        """
        Initialize the call queue.

        Args:
            max_stack: Maximum number of calls waiting in the stack (default 20)
            max_calls: Maximum calls admitted per interval (default 60)
            interval: Window length in milliseconds (default 60000)
        """
        self.config = QueueConfig()
        self.set_config(max_stack=max_stack, max_calls=max_calls, interval=interval)

        self._stack: Deque[QueueEntry] = deque()
        self._window_start = 0.0
        self._call_count = 0

        logger.debug(
            "call_queue_initialized",
            max_stack=self.config.max_stack,
            max_calls=self.config.max_calls,
            interval_ms=self.config.interval,
        )

    @classmethod
    def from_config(cls, config: QueueConfig) -> "CallQueue":
        """Create a queue from a QueueConfig."""
        return cls(
            max_stack=config.max_stack,
            max_calls=config.max_calls,
            interval=config.interval,
        )

    def set_config(self, **overrides: Any) -> "CallQueue":
        """
        Override configuration values; None values are ignored.

        Changes apply to the next admission decision. Timers already
        scheduled for stacked calls are left as they are.
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        if updates:
            self.config = QueueConfig(**{**self.config.model_dump(), **updates})
        return self

    @property
    def _interval_seconds(self) -> float:
        return self.config.interval / 1000.0

    @property
    def pending(self) -> int:
        """Number of calls waiting in the stack."""
        return len(self._stack)

    @property
    def call_count(self) -> int:
        """Number of calls admitted in the current window."""
        return self._call_count

    @property
    def state(self) -> QueueState:
        """Current admission state."""
        if self._call_count == 0 and not self._stack:
            return QueueState.IDLE
        if not self._stack and time.monotonic() - self._window_start > self._interval_seconds:
            return QueueState.WINDOW_EXPIRED
        if not self._stack and self._call_count < self.config.max_calls:
            return QueueState.ADMITTING
        return QueueState.SATURATED

    def add(self, callback: QueueCallback) -> "CallQueue":
        """
        Schedule ``callback`` for execution under the call budget.

        The callback is never invoked synchronously. It receives
        ``(error, calls_remaining, stack_remaining)``; ``error`` is a
        RateLimitExceededError when the stack is full.

        Example:
            >>> def run(err, calls_left, stack_left):
            ...     if err is None:
            ...         start_request()
            >>> queue.add(run)
        """
        self._admit(callback)
        return self

    async def acquire(self) -> Admission:
        """
        Wait until a call is admitted.

        Returns:
            Admission metadata for the admitted call

        Raises:
            RateLimitExceededError: If the stack is full
            asyncio.CancelledError: If the queue is cleared while waiting
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def on_admit(err: Optional[Exception], calls_remaining: int, stack_remaining: int) -> None:
            if future.done():
                return
            if err is not None:
                future.set_exception(err)
            else:
                future.set_result(Admission(calls_remaining, stack_remaining))

        self._admit(on_admit, future)
        try:
            return await future
        except asyncio.CancelledError:
            # Caller gave up (task cancelled or wait_for timeout)
            self._discard(future)
            raise

    def _admit(self, callback: QueueCallback, future: Optional[asyncio.Future] = None) -> None:
        loop = asyncio.get_running_loop()

        if self._stack:
            # Calls already waiting go first
            self._push_stack(loop, callback, future)
            return

        now = time.monotonic()
        if self._call_count == 0 or now - self._window_start > self._interval_seconds:
            self._window_start = now
            self._call_count = 0

        if self._call_count < self.config.max_calls:
            self._call_count += 1
            calls_remaining = self.config.max_calls - self._call_count
            logger.debug(
                "call_queue_admitted",
                calls_remaining=calls_remaining,
                stack_remaining=self.config.max_stack,
            )
            loop.call_soon(callback, None, calls_remaining, self.config.max_stack)
            return

        self._push_stack(loop, callback, future)

    def _schedule(
        self, loop: asyncio.AbstractEventLoop, position: int
    ) -> Tuple[asyncio.TimerHandle, float, bool, float]:
        max_calls = self.config.max_calls
        # Slot counted from the start of the current window; slots already
        # taken by admitted calls and by entries ahead in the stack are skipped.
        slot = self._call_count + position
        windows_ahead, slot_in_window = divmod(slot, max_calls)
        window_start = self._window_start + self._interval_seconds * windows_ahead
        # Stagger entries sharing a window by 1ms each to keep timer order stable
        due = window_start + (slot_in_window + 1) / 1000.0
        delay = max(0.0, due - time.monotonic())

        handle = loop.call_later(delay, self._call_stack)
        return handle, window_start, windows_ahead > 0 and slot_in_window == 0, delay

    def _push_stack(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: QueueCallback,
        future: Optional[asyncio.Future],
    ) -> None:
        if len(self._stack) >= self.config.max_stack:
            logger.warning(
                "call_queue_full",
                max_stack=self.config.max_stack,
            )
            loop.call_soon(callback, RateLimitExceededError(), 0, 0)
            return

        position = len(self._stack)
        handle, window_start, opens_window, delay = self._schedule(loop, position)
        self._stack.append(
            QueueEntry(
                callback=callback,
                handle=handle,
                window_start=window_start,
                opens_window=opens_window,
                future=future,
            )
        )

        logger.debug(
            "call_queue_stacked",
            position=position,
            delay_seconds=round(delay, 3),
            stack_remaining=self.config.max_stack - len(self._stack),
        )

    def _discard(self, future: asyncio.Future) -> None:
        """Drop the stack entry waiting on ``future`` and move later entries up."""
        entry = next((e for e in self._stack if e.future is future), None)
        if entry is None:
            # Already admitted, or removed by clear()
            return

        position = self._stack.index(entry)
        self._stack.remove(entry)
        entry.handle.cancel()

        loop = asyncio.get_running_loop()
        for index in range(position, len(self._stack)):
            moved = self._stack[index]
            moved.handle.cancel()
            moved.handle, moved.window_start, moved.opens_window, _ = self._schedule(loop, index)

        logger.debug(
            "call_queue_waiter_cancelled",
            position=position,
            stack_remaining=self.config.max_stack - len(self._stack),
        )

    def _call_stack(self) -> None:
        if not self._stack:
            return

        entry = self._stack.popleft()
        if entry.future is not None and entry.future.cancelled():
            # Waiter cancelled before acquire() could withdraw it
            return
        if entry.opens_window:
            self._window_start = entry.window_start
            self._call_count = 0
        self._call_count += 1

        calls_remaining = max(0, self.config.max_calls - self._call_count)
        stack_remaining = self.config.max_stack - len(self._stack)
        logger.debug(
            "call_queue_dispatched",
            calls_remaining=calls_remaining,
            stack_remaining=stack_remaining,
        )
        entry.callback(None, calls_remaining, stack_remaining)

    def clear(self) -> "CallQueue":
        """
        Cancel every queued call and reset the window.

        Stacked callbacks are abandoned, not failed: they are never invoked.
        Coroutines waiting in acquire() are cancelled. The next call is
        admitted immediately, as on a new queue.
        """
        cleared = len(self._stack)
        while self._stack:
            entry = self._stack.popleft()
            entry.handle.cancel()
            if entry.future is not None and not entry.future.done():
                entry.future.cancel()

        self._call_count = 0
        self._window_start = 0.0

        logger.info("call_queue_cleared", cancelled=cleared)
        return self
