"""Per-request correlation IDs shared by middleware, logs and error envelopes."""

import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Create a request ID and bind it to the current context."""
    request_id = uuid.uuid4().hex
    _request_id.set(request_id)
    return request_id


def get_request_id() -> str:
    """Request ID bound to the current context, or an empty string."""
    return _request_id.get()
