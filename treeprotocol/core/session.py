"""Construction sessions.

with_builder() runs a body of construction calls inside a builder session:
prepare() opens it, wrap() runs the body, and finish_session() closes it
exactly once on every exit path. While the body runs, the session state is
available as the current builder.
"""

import logging
from contextvars import ContextVar
from typing import Any, Callable, Optional

from ..errors import NoActiveBuilderError
from .builder import Builder

logger = logging.getLogger(__name__)

_current_builder: ContextVar[Optional[Any]] = ContextVar("current_builder", default=None)


def current_builder() -> Any:
    """Return the builder state of the innermost active session.

    Raises:
        NoActiveBuilderError: If no session is active
    """
    builder = _current_builder.get()
    if builder is None:
        raise NoActiveBuilderError("No builder session is active")
    return builder


def with_builder(builder: Builder, body: Callable[[Any], Any]) -> Any:
    """Run body inside a construction session of builder.

    Args:
        builder: Builder to open the session on
        body: Called with the session state (normally the builder)

    Returns:
        Whatever builder.finish_session() makes of body's result

    Example:
        >>> def body(b):
        ...     return make_finish(b, "literal", {"value": 5})
        >>> with_builder(ListBuilder(), body)
        ['literal', {}, {'value': 5}]
    """
    state = builder.prepare()
    logger.debug("Opened session on %r", builder)

    def thunk(session_state):
        token = _current_builder.set(session_state)
        try:
            return body(session_state)
        finally:
            _current_builder.reset(token)

    try:
        result = builder.wrap(state, thunk)
    except BaseException as e:
        logger.debug("Closing session on %r after %s", builder, type(e).__name__)
        builder.finish_session(state, None, e)
        raise
    logger.debug("Closing session on %r", builder)
    return builder.finish_session(state, result)


def builder_session(builder: Builder) -> Callable[[Callable[[Any], Any]], Any]:
    """Decorator form of with_builder().

    The decorated function is replaced by the session result.

    Example:
        >>> @builder_session(ListBuilder())
        ... def tree(b):
        ...     return make_finish(b, "literal", {"value": 5})
    """
    def decorator(body: Callable[[Any], Any]) -> Any:
        return with_builder(builder, body)
    return decorator
