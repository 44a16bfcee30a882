import time
from threading import Event, Thread
from typing import Callable, Optional

from featuretoggles.impl.util import log


class RepeatingTask:
    """
    A generic mechanism for calling a callback repeatedly on a worker thread.

    The callback may return a number of seconds to wait before the next invocation instead of
    the regular interval, which lets a caller slow down or speed up after a failure.
    """

    def __init__(self, label, interval: float, initial_delay: float, callable: Callable[[], Optional[float]]):
        """
        Creates the task, but does not start the worker thread yet.

        :param interval: time in seconds between invocations of the callback
        :param initial_delay: time in seconds to wait before the first invocation
        :param callable: the function to execute repeatedly; it may return an override delay
        """
        self.__interval = interval
        self.__initial_delay = initial_delay
        self.__action = callable
        self.__stop = Event()
        self.__wake = Event()
        self.__thread = Thread(target=self._run, name=f"{label}.repeating")
        self.__thread.daemon = True

    def start(self):
        """
        Starts the worker thread.
        """
        self.__thread.start()

    def stop(self):
        """
        Tells the worker thread to stop. It cannot be restarted after this.

        If the thread is waiting between invocations it wakes immediately; an invocation that is
        already running is allowed to finish.
        """
        self.__stop.set()
        self.__wake.set()

    def trigger(self):
        """
        Ends the current wait early so that the callback runs as soon as possible.
        """
        if not self.__stop.is_set():
            self.__wake.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Waits for the worker thread to exit after :func:`stop`.

        :return: True if the thread is no longer running
        """
        if self.__thread.ident is None:
            return True
        self.__thread.join(timeout)
        return not self.__thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self.__stop.is_set()

    def _wait(self, delay: float) -> bool:
        if delay > 0:
            self.__wake.wait(delay)
        self.__wake.clear()
        return self.__stop.is_set()

    def _run(self):
        stopped = self._wait(self.__initial_delay)
        while not stopped:
            next_time = time.time() + self.__interval
            override = None
            try:
                override = self.__action()
            except Exception as e:
                log.exception("Unexpected exception on worker thread: %s" % e)
            if override is not None:
                next_time = time.time() + override
            stopped = self._wait(next_time - time.time())
