"""Shared plumbing for calls to speech and language model APIs.

Every provider wraps its SDK call in ``sdk_errors`` and its request method
in ``retry_transient``:

- timeouts become ``TimeoutError`` and connection/rate-limit failures
  become ``ConnectionError``; both are retried
- anything else becomes ``RuntimeError`` and fails immediately

The public ``transcribe`` / ``translate`` methods then wrap whatever is
left in ``TranscriptionError`` / ``TranslationError``.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

retry_transient = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=16),
    retry=retry_if_exception_type((ConnectionError, TimeoutError)),
    reraise=True,
)


@contextmanager
def sdk_errors(
    vendor: str,
    timeout: tuple[type[BaseException], ...] = (),
    connection: tuple[type[BaseException], ...] = (),
) -> Iterator[None]:
    """Translate SDK exceptions raised inside the block.

    Args:
        vendor: Name used in log lines and messages ("OpenAI", "Claude"...).
        timeout: SDK exception types that mean the request timed out.
            Checked first, since some SDKs derive them from connection errors.
        connection: SDK exception types worth retrying (connection, rate limit).
    """
    try:
        yield
    except timeout as exc:
        logger.warning("%s timeout: %s", vendor, exc)
        raise TimeoutError(f"{vendor} request timed out: {exc}") from exc
    except connection as exc:
        logger.warning("%s unavailable: %s", vendor, exc)
        raise ConnectionError(f"{vendor} unavailable: {exc}") from exc
    except Exception as exc:
        logger.error("Unexpected %s error: %s", vendor, exc)
        raise RuntimeError(f"{vendor} error: {exc}") from exc
