"""
Fetch Resource - async HTTP resource controllers
"""

__version__ = "0.1.0"

from .config import RequestDescriptor, RequestInput, TimeoutConfig, TransportConfig
from .types import FetchResponse, Transport, Scheduler
from .errors import ErrorResponse, FetchError, TransportError, HTTPStatusError
from .core.request import normalize_request
from .core.base_client import HttpxTransport
from .health import check_response_status
from .controller import ControllerState, ResourceController, ResourceStatus
from .client import create_eager_resource, create_lazy_resource

__all__ = [
    "RequestDescriptor", "RequestInput", "TimeoutConfig", "TransportConfig",
    "FetchResponse", "Transport", "Scheduler",
    "ErrorResponse", "FetchError", "TransportError", "HTTPStatusError",
    "normalize_request",
    "HttpxTransport",
    "check_response_status",
    "ControllerState", "ResourceController", "ResourceStatus",
    "create_eager_resource", "create_lazy_resource",
]
