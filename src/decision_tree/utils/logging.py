from __future__ import annotations
import logging
from functools import wraps
from typing import Any, Callable, Tuple, Type


def log_calls(
    logger_name: str | None = None,
    *,
    expected: Tuple[Type[BaseException], ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log function calls at DEBUG level with basic error logging.

    Exceptions listed in ``expected`` are part of the function's contract and
    are logged at DEBUG; anything else is logged with its traceback.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("Calling %s args=%s kwargs=%s", func.__name__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except expected as e:
                logger.debug("%s rejected input: %s", func.__name__, e)
                raise
            except Exception as e:
                logger.exception("Error in %s: %s", func.__name__, e)
                raise
            logger.debug("%s returned %r", func.__name__, result)
            return result

        return _wrapper

    return _decorator
