"""
Operation Tracing
Structured tracing for pipeline stages via log events.
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .logging_config import get_logger

logger = get_logger(__name__)

SLOW_OPERATION_SECONDS = 1.0


@contextmanager
def trace_operation(operation: str, **kwargs: Any) -> Iterator[dict[str, Any]]:
    """
    Context manager for tracing operations with structured logging.

    Yields a mutable dict; keys added to it are included in the end event.

    Args:
        operation: Name of the operation
        **kwargs: Additional context to log
    """
    start = time.perf_counter()
    extra: dict[str, Any] = {}
    logger.debug("operation_start", operation=operation, **kwargs)

    try:
        yield extra
    except Exception as e:
        duration = time.perf_counter() - start
        logger.error(
            "operation_error",
            operation=operation,
            error=str(e),
            duration_ms=round(duration * 1000, 2),
            **kwargs,
        )
        raise
    else:
        duration = time.perf_counter() - start
        event = "operation_slow" if duration > SLOW_OPERATION_SECONDS else "operation_end"
        log = logger.warning if duration > SLOW_OPERATION_SECONDS else logger.info
        log(event, operation=operation, duration_ms=round(duration * 1000, 2), **kwargs, **extra)
