"""
Async Resource Controller.

Owns one logical resource fetch: decides when to issue a request, which
completed request is still relevant when several overlap, when to poll
again, and when a successful result expires.
"""
import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Set

from .config import RequestDescriptor
from .core.base_client import HttpxTransport
from .core.request import RequestLike, normalize_request
from .errors import FetchError, TransportError
from .health.status_checker import check_response_status
from .types import Scheduler, TimerHandle, Transport

logger = logging.getLogger(__name__)

LOG_PREFIX = "[ResourceController]"


class ResourceStatus(str, Enum):
    """Lifecycle of a resource fetch."""
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ControllerState:
    """Read-only snapshot of a controller."""
    is_fetching: bool = False
    is_fetched: bool = False
    error: Optional[FetchError] = None
    data: Any = None

    @property
    def status(self) -> ResourceStatus:
        if self.is_fetching:
            return ResourceStatus.PENDING
        if self.error is not None:
            return ResourceStatus.FAILED
        if self.is_fetched:
            return ResourceStatus.SUCCEEDED
        return ResourceStatus.IDLE


Listener = Callable[[ControllerState], Any]


class ResourceController:
    """
    State machine for a single resource.

    In eager mode every structural change of the request descriptor issues a
    request. In lazy mode requests are only issued by trigger(). Polling and
    reset timers apply in both modes and are armed after a request settles.
    """

    def __init__(
        self,
        value: RequestLike = None,
        *,
        lazy: bool = False,
        transport: Optional[Transport] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self._lazy = lazy
        self._own_transport = transport is None
        self._transport: Transport = transport or HttpxTransport()
        self._scheduler: Scheduler = scheduler or asyncio.get_running_loop()

        self._descriptor: Optional[RequestDescriptor] = None
        self._token = 0
        self._state = ControllerState()
        self._listeners: List[Listener] = []
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._poll_timer: Optional[TimerHandle] = None
        self._reset_timer: Optional[TimerHandle] = None
        self._transport_closing: Optional["asyncio.Task[None]"] = None
        self._closed = False

        self.update(value)

    # -- read-only surface -------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def status(self) -> ResourceStatus:
        return self._state.status

    @property
    def descriptor(self) -> Optional[RequestDescriptor]:
        return self._descriptor

    @property
    def lazy(self) -> bool:
        return self._lazy

    @property
    def closed(self) -> bool:
        return self._closed

    # -- observer contract -------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_state(self, state: ControllerState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"{LOG_PREFIX} listener failed")

    # -- inputs ------------------------------------------------------------

    def update(self, value: RequestLike) -> None:
        """
        Feed new caller input.

        The controller reacts only when the normalized descriptor differs
        structurally from the current one.
        """
        if self._closed:
            return

        descriptor = normalize_request(value)
        if descriptor == self._descriptor:
            return

        self._descriptor = descriptor
        if descriptor is None:
            self._go_idle()
            return

        if self._lazy:
            # Polling only resumes after the next trigger
            self._cancel_poll()
            return
        self._issue()

    def trigger(self) -> None:
        """Issue a request with the current descriptor."""
        if self._closed:
            return
        if self._descriptor is None:
            logger.debug(f"{LOG_PREFIX} trigger ignored: no request")
            return
        self._issue()

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """
        Tear down: cancel timers and make in-flight completions no-ops.

        A transport the controller created itself is closed in a task on the
        running loop; aclose() awaits that task.
        """
        if self._closed:
            return
        self._closed = True
        self._token += 1
        self._cancel_poll()
        self._cancel_reset()
        self._listeners.clear()
        self._release_transport()
        logger.debug(f"{LOG_PREFIX} closed")

    def _release_transport(self) -> None:
        if not self._own_transport:
            return
        self._own_transport = False
        close = getattr(self._transport, "close", None)
        if close is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"{LOG_PREFIX} no running loop, owned transport left open")
            return
        self._transport_closing = loop.create_task(close())

    async def aclose(self) -> None:
        """Close, cancel outstanding requests and wait for an owned transport to close."""
        self.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._transport_closing is not None:
            await self._transport_closing

    async def __aenter__(self) -> "ResourceController":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # -- transitions -------------------------------------------------------

    def _go_idle(self) -> None:
        self._token += 1
        self._cancel_poll()
        self._cancel_reset()
        self._set_state(ControllerState())

    def _issue(self) -> None:
        descriptor = self._descriptor
        assert descriptor is not None

        self._token += 1
        token = self._token
        self._cancel_poll()
        self._cancel_reset()

        logger.debug(f"{LOG_PREFIX} issue #{token}: {descriptor.method} {descriptor.url}")
        self._set_state(replace(self._state, is_fetching=True, is_fetched=False))
        if token != self._token:
            # A listener issued a newer request
            return

        task = asyncio.ensure_future(self._run(token, descriptor))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, token: int, descriptor: RequestDescriptor) -> None:
        try:
            response = await self._transport(descriptor)
            data = await check_response_status(response)
        except FetchError as exc:
            self._settle_failure(token, exc)
        except Exception as exc:
            logger.error(f"{LOG_PREFIX} transport failed for #{token}: {exc}")
            self._settle_failure(token, TransportError.from_exception(exc))
        else:
            self._settle_success(token, data)

    def _is_current(self, token: int) -> bool:
        if self._closed or token != self._token:
            logger.debug(f"{LOG_PREFIX} discarding stale result #{token} (current #{self._token})")
            return False
        return True

    def _settle_success(self, token: int, data: Any) -> None:
        if not self._is_current(token):
            return
        self._set_state(ControllerState(is_fetching=False, is_fetched=True, error=None, data=data))
        if token != self._token:
            # A listener issued a new request
            return
        descriptor = self._descriptor
        if descriptor is not None and descriptor.reset_delay_ms:
            self._arm_reset(descriptor.reset_delay_ms)
        self._arm_poll()

    def _settle_failure(self, token: int, error: FetchError) -> None:
        if not self._is_current(token):
            return
        self._set_state(ControllerState(is_fetching=False, is_fetched=False, error=error, data=None))
        if token != self._token:
            return
        self._arm_poll()

    # -- timers ------------------------------------------------------------

    def _arm_poll(self) -> None:
        self._cancel_poll()
        descriptor = self._descriptor
        if descriptor is None or not descriptor.refresh_interval_ms:
            return
        logger.debug(f"{LOG_PREFIX} next poll in {descriptor.refresh_interval_ms}ms")
        self._poll_timer = self._scheduler.call_later(
            descriptor.refresh_interval_ms / 1000, self._on_poll
        )

    def _on_poll(self) -> None:
        self._poll_timer = None
        if self._closed or self._descriptor is None or not self._descriptor.refresh_interval_ms:
            return
        self._issue()

    def _cancel_poll(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.cancel()
            self._poll_timer = None

    def _arm_reset(self, delay_ms: int) -> None:
        self._cancel_reset()
        self._reset_timer = self._scheduler.call_later(delay_ms / 1000, self._on_reset)

    def _on_reset(self) -> None:
        self._reset_timer = None
        if self._closed:
            return
        logger.debug(f"{LOG_PREFIX} reset delay elapsed")
        self._set_state(replace(self._state, is_fetched=False, data=None))

    def _cancel_reset(self) -> None:
        if self._reset_timer is not None:
            self._reset_timer.cancel()
            self._reset_timer = None
