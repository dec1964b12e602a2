"""Error types and graceful-degradation helpers shared across the pipeline."""

from typing import Optional

from chefai.utils.logger import logger


class TextSourceError(ConnectionError):
    """The text source could not deliver a usable reply (non-200 status, timeout, network error)."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute async operation with consistent error logging.

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Gemini generateContent call").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of coroutine if successful, default_return on exception.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute sync operation with consistent error logging.

    Synchronous version of safe_execute_async. The parser runs every recipe
    block through it so one broken block only costs that block.

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.

    Returns:
        Result of func if successful, default_return on exception.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
