"""
Per-request context shared by every middleware in the chain.

The request is fixed; the response slot starts empty and is filled in by
whichever handler produces the response. Post-processing middleware (like
compression) may replace it on the way back out.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .request import HTTPRequest
from .response import Response


@dataclass
class HTTPContext:
    """
    Mutable request/response context.

    Attributes:
        request:  The incoming request
        response: The response produced so far, or None. Stays None when
                  a handler took over the raw connection.
        state:    Scratch space for middleware to share per-request values
    """

    request: HTTPRequest
    response: Optional[Response] = None
    state: Dict[str, Any] = field(default_factory=dict)
