from threading import Event
from typing import Callable, Optional, TypeVar

from featuretoggles.impl.util import log

T = TypeVar("T")


class ExponentialBackoff:
    """The delay schedule for retrying a failed request: the base delay, doubled after each
    failed attempt, up to an optional maximum.
    """

    def __init__(self, base_delay: float, max_delay: Optional[float] = None):
        self.__base_delay = base_delay
        self.__max_delay = max_delay

    @property
    def base_delay(self) -> float:
        return self.__base_delay

    def delay_for(self, retry_count: int) -> float:
        """Returns the delay to wait after the given number of prior retries (zero-based)."""
        d = self.__base_delay * (2 ** retry_count)
        return d if self.__max_delay is None or d <= self.__max_delay else self.__max_delay


def call_with_retry(action: Callable[[], T], attempts: int, backoff: ExponentialBackoff, stop: Event, description: str) -> Optional[T]:
    """Calls ``action`` up to ``attempts`` times, waiting between failed attempts.

    Any exception raised by ``action`` counts as a failed attempt. If every attempt fails,
    or ``stop`` is set while waiting, the result is None; exceptions are never propagated.

    :param action: the operation to attempt
    :param attempts: the maximum number of calls
    :param backoff: the delay schedule between calls
    :param stop: an event that, once set, cancels any remaining attempts
    :param description: what is being attempted, for log messages
    """
    for attempt in range(1, attempts + 1):
        if stop.is_set():
            return None
        try:
            return action()
        except Exception as e:
            if attempt >= attempts:
                log.debug("Error occurred %s (attempt %d out of %d): %s" % (description, attempt, attempts, e))
                break
            delay = backoff.delay_for(attempt - 1)
            log.debug("Error occurred %s. Retrying in %s seconds (attempt %d out of %d): %s" % (description, delay, attempt, attempts, e))
            if stop.wait(delay):
                return None
    return None
