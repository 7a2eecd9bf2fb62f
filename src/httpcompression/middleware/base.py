"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the middleware protocol and the pipeline for chaining middleware.
Implements the Chain of Responsibility design pattern.

=============================================================================
CONTEXT + CONTINUATION
=============================================================================

Every middleware receives two things:

    context   HTTPContext: the request plus a mutable response slot
    next      a no-argument callable that runs the REST of the chain

Nothing is returned. Whoever produces the response puts it in
context.response; middleware that post-processes reads it back after
next() returns:

    ┌─────────────────────────────────────────────────────────────────────┐
    │              CHAIN OF RESPONSIBILITY - REQUEST FLOW                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ┌──────────┐    ┌──────────┐    ┌──────────┐                      │
    │   │  Logging │───►│ Compress │───►│ Endpoint │                      │
    │   │    MW    │    │    MW    │    │          │                      │
    │   └────┬─────┘    └────┬─────┘    └────┬─────┘                      │
    │        │               │               │                            │
    │   [before]        [before]          [exec]                          │
    │   start timer     (nothing)         context.response = ...          │
    │        ▲               ▲               │                            │
    │   [after]         [after]              │                            │
    │   log line        swap in a  ◄─────────┘                            │
    │                   compressed                                        │
    │                   response                                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Because the response lives in the context rather than being returned, a
handler can also decline to produce one at all (for example after taking
over the raw socket). Post-processing middleware must cope with
context.response being None.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional
import logging

from ..http.context import HTTPContext


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# The rest of the chain. Calling it runs every downstream middleware and
# the endpoint; when it returns, context.response holds their result.
Continuation = Callable[[], None]

# The innermost handler (router, static files, application code).
Endpoint = Callable[[HTTPContext], None]


class Middleware(ABC):
    """
    Abstract base class for middleware.

        class MyMiddleware(Middleware):
            def handle(self, context: HTTPContext, next: Continuation) -> None:
                # PRE-PROCESSING (before handler runs)
                ...

                next()  # run the rest of the chain

                # POST-PROCESSING (context.response is now set, or None)
                ...
    """

    @abstractmethod
    def handle(self, context: HTTPContext, next: Continuation) -> None:
        """
        Process the request.

        Args:
            context: Request/response context for this request
            next: The rest of the chain (call this to continue!)
        """

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains multiple middleware together with a final endpoint.

    The pipeline wraps middleware around each other like layers of an onion:

        pipeline.add(LoggingMiddleware())      # First added = outermost
        pipeline.add(CompressionMiddleware())  # Closest to endpoint

        run = pipeline.wrap(endpoint)
        run(context)

    Request flows INWARD (first middleware first), the response flows back
    OUTWARD (last middleware first). Compression added last therefore sees
    the endpoint's response before logging does.
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline.

        Middleware is executed in the order added (first added = outermost).

        Returns:
            Self for method chaining
        """
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        """Add multiple middleware at once."""
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, endpoint: Endpoint) -> Endpoint:
        """
        Wrap an endpoint with all middleware in the pipeline.

        Given [MW1, MW2, MW3] and endpoint:

            current = endpoint
            current = MW3 around current
            current = MW2 around current
            current = MW1 around current

        Final: MW1 → MW2 → MW3 → endpoint

        We wrap in REVERSE order so that the first-added middleware
        is the outermost wrapper.

        Args:
            endpoint: The innermost handler

        Returns:
            Callable taking an HTTPContext that runs the whole chain
        """
        current = endpoint
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(self, middleware: Middleware, next_handler: Endpoint) -> Endpoint:
        """
        Create a handler that calls middleware with a continuation.

        The continuation closes over the context, so middleware never has
        to pass the context along itself.
        """
        def wrapped(context: HTTPContext) -> None:
            middleware.handle(context, lambda: next_handler(context))

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)


# =============================================================================
# FUNCTION MIDDLEWARE
# =============================================================================

class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as middleware.

        def add_marker(context, next):
            next()
            context.state["seen"] = True

        pipeline.add(FunctionMiddleware(add_marker))
    """

    def __init__(
        self,
        func: Callable[[HTTPContext, Continuation], None],
        name: Optional[str] = None
    ):
        self._func = func
        self._name = name or func.__name__

    def handle(self, context: HTTPContext, next: Continuation) -> None:
        self._func(context, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(func: Callable[[HTTPContext, Continuation], None]) -> FunctionMiddleware:
    """
    Decorator to create middleware from a function.

        @function_middleware
        def timing(context, next):
            started = time.perf_counter()
            next()
            context.state["elapsed"] = time.perf_counter() - started
    """
    return FunctionMiddleware(func)
