"""Retry with exponential backoff for coach LLM calls."""
import logging
import re
from typing import Any, Callable, Optional, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 1
DEFAULT_MAX_WAIT_SECONDS = 10

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

_TRANSIENT_MARKERS = ("timeout", "timed out", "connection")
_STATUS_IN_MESSAGE = re.compile(r"\b([45]\d\d)\b")


def _status_code(exception: BaseException) -> Optional[int]:
    """HTTP status from an SDK error, or one quoted in its message."""
    code = getattr(exception, "status_code", None)
    if isinstance(code, int):
        return code
    match = _STATUS_IN_MESSAGE.search(str(exception))
    return int(match.group(1)) if match else None


def is_retryable_error(exception: BaseException) -> bool:
    """
    Decide whether a failed provider call is worth repeating.

    Rate limits, 5xx responses, timeouts and dropped connections are retried.
    Quota exhaustion is reported as a 429 too, but never clears on retry.
    Anything unrecognised is not retried.
    """
    message = str(exception).lower()
    type_name = type(exception).__name__.lower()

    if "quota" in message and ("exceeded" in message or "insufficient" in message):
        return False

    code = _status_code(exception)
    if code in RETRYABLE_STATUS_CODES:
        return True
    if "rate" in message and "limit" in message:
        return True
    if "timeout" in type_name or "connect" in type_name:
        return True
    if any(marker in message for marker in _TRANSIENT_MARKERS):
        return True

    # 4xx auth/validation errors and anything unrecognised
    return False


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """tenacity decorator: exponential wait, retryable errors only, last error re-raised."""
    return retry(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def retry_sync_call(
    func: Callable[..., T],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    **kwargs: Any,
) -> T:
    """
    Call `func(*args, **kwargs)`, retrying transient failures.

    Raises:
        Exception: The first non-retryable error, or the last error once
            max_attempts is reached
    """
    decorator = create_retry_decorator(
        max_attempts=max_attempts,
        min_wait_seconds=min_wait_seconds,
        max_wait_seconds=max_wait_seconds,
    )
    return decorator(func)(*args, **kwargs)
