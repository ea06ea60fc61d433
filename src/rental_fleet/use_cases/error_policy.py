"""Error funnels shared by the car use cases.

Two distinct paths:

- store_errors: the ordinary path. Any store failure inside the block is
  logged, translated and re-raised as StoreError. Domain errors pass
  through untouched.
- best_effort: cleanup and compensation. A failure is logged at WARNING
  and reported through the return value, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from rental_fleet.domain.errors import DomainError, StoreError
from rental_fleet.infra.errors import translate_store_error

logger = logging.getLogger(__name__)

ErrorTranslator = Callable[[BaseException], str]


@contextmanager
def store_errors(
    operation: str,
    translator: ErrorTranslator = translate_store_error,
    **context: Any,
) -> Iterator[None]:
    """
    Translate failures raised inside the block into StoreError.

    Args:
        operation: Name of the public operation (e.g., "update_car")
        translator: Converts the underlying exception into a message
        **context: Extra fields for the log record (e.g., car_id)
    """
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:
        message = translator(exc)
        logger.error(
            "Store operation failed",
            exc_info=exc,
            extra={"operation": operation, "error": message, **context},
        )
        raise StoreError(message, operation=operation, **context) from exc


def best_effort(operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """
    Run func, logging instead of raising if it fails.

    Returns:
        True if func completed, False if it raised
    """
    try:
        func(*args, **kwargs)
    except Exception as exc:
        logger.warning(
            "Best-effort operation failed",
            exc_info=exc,
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        return False
    return True
