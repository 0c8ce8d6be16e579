"""
Public factories for resource controllers.
"""
from typing import Optional

from .controller import ResourceController
from .core.request import RequestLike
from .types import Scheduler, Transport


def create_eager_resource(
    value: RequestLike = None,
    *,
    transport: Optional[Transport] = None,
    scheduler: Optional[Scheduler] = None,
) -> ResourceController:
    """
    Create a controller that fetches whenever its request changes.

    The first request is issued immediately when ``value`` describes one.
    Must be called from a running event loop.
    """
    return ResourceController(value, lazy=False, transport=transport, scheduler=scheduler)


def create_lazy_resource(
    value: RequestLike = None,
    *,
    transport: Optional[Transport] = None,
    scheduler: Optional[Scheduler] = None,
) -> ResourceController:
    """Create a controller that only fetches when ``trigger()`` is called."""
    return ResourceController(value, lazy=True, transport=transport, scheduler=scheduler)
