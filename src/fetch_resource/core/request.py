"""
Request descriptor normalization.
"""
from typing import Any, Mapping, Optional, Union

from ..auth.auth_handler import BearerAuthHandler, merge_auth_headers
from ..config import RequestDescriptor, RequestInput

RequestLike = Union[None, str, Mapping[str, Any], RequestInput, RequestDescriptor]


def normalize_request(value: RequestLike) -> Optional[RequestDescriptor]:
    """
    Turn caller input into a RequestDescriptor, or None for "no request".

    None, an empty string and structured input without a url all yield None,
    which is how callers suppress a fetch conditionally. A bearer token is
    injected as an Authorization header first; caller headers are merged on
    top and win on conflict.
    """
    if value is None:
        return None

    if isinstance(value, RequestDescriptor):
        return value

    if isinstance(value, str):
        options = RequestInput(url=value)
    elif isinstance(value, RequestInput):
        options = value
    elif isinstance(value, Mapping):
        options = RequestInput.model_validate(dict(value))
    else:
        raise TypeError(
            f"request input must be a string, mapping or RequestInput, got {type(value).__name__}"
        )

    if not options.url or not options.url.strip():
        return None

    auth_headers = BearerAuthHandler(options.bearer_token).get_header()
    return RequestDescriptor(
        url=options.url,
        method=options.method,
        headers=merge_auth_headers(auth_headers, options.headers),
        params=options.params,
        body=options.body,
        refresh_interval_ms=options.refresh_interval_ms,
        reset_delay_ms=options.reset_delay_ms,
    )
