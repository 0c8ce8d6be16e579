"""
Shared fixtures: an in-memory transport and a manual clock.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import pytest

from fetch_resource.config import RequestDescriptor
from fetch_resource.types import FetchResponse


@dataclass
class PendingCall:
    descriptor: RequestDescriptor
    future: "asyncio.Future[FetchResponse]"


class FakeTransport:
    """Transport whose responses are resolved by the test."""

    def __init__(self):
        self.calls: List[PendingCall] = []
        self.max_in_flight = 0

    async def __call__(self, descriptor: RequestDescriptor) -> FetchResponse:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(PendingCall(descriptor, future))
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        return await future

    @property
    def in_flight(self) -> int:
        return sum(1 for call in self.calls if not call.future.done())

    def respond(self, index: int, status: int = 200, text: str = "", status_text: str = "OK") -> None:
        self.calls[index].future.set_result(
            FetchResponse(status=status, status_text=status_text, text=text)
        )

    def fail(self, index: int, exc: BaseException) -> None:
        self.calls[index].future.set_exception(exc)


@dataclass
class ManualTimer:
    when: float
    callback: Callable[..., Any]
    args: Tuple[Any, ...] = ()
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by advance() instead of wall-clock time."""

    def __init__(self):
        self.now = 0.0
        self.timers: List[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def _next_due(self, target: float) -> Optional[ManualTimer]:
        due = [t for t in self.active if t.when <= target]
        return min(due, key=lambda t: t.when) if due else None

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        timer = self._next_due(target)
        while timer is not None:
            self.now = timer.when
            timer.fired = True
            timer.callback(*timer.args)
            timer = self._next_due(target)
        self.now = target


async def flush() -> None:
    """Let scheduled tasks run until they block again."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def scheduler():
    return ManualScheduler()
