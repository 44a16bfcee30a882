"""
Maintains the locally cached toggle snapshot and keeps it up to date in the background.
"""

# currently excluded from documentation

from threading import Lock
from typing import Optional

from featuretoggles.impl.model import ToggleSnapshot
from featuretoggles.impl.repeating_task import RepeatingTask
from featuretoggles.impl.util import log
from featuretoggles.interfaces import FeatureRequester

FAILED_MESSAGE = "Failed to retrieve feature manifest"


class PollingSnapshotProvider:
    """
    Holds the current :class:`ToggleSnapshot` and replaces it whenever the toggle source
    reports a change.

    Readers call :func:`get_snapshot` from any thread without locking: the snapshot is an
    immutable object and replacing it is a single reference assignment, so a reader sees
    either the old snapshot or the new one in full.

    Unlike a single request to the toggle source, the background refresh never gives up. It
    retries after every failure until :func:`stop` is called.
    """

    def __init__(self, requester: FeatureRequester, refresh_interval: float, retry_delay: float = 5):
        """
        :param requester: the component that talks to the toggle source
        :param refresh_interval: seconds between checks for changed toggles
        :param retry_delay: seconds to wait before retrying after an unexpected error
        """
        self._requester = requester
        self._refresh_interval = refresh_interval
        self._retry_delay = retry_delay
        self._snapshot = ToggleSnapshot.empty()
        self._retry_attempt = 0
        self._init_lock = Lock()
        self._initialized = False
        self._stopped = False
        self._task = None  # type: Optional[RepeatingTask]

    def initialize(self):
        """
        Retrieves the first snapshot and starts the background refresh.

        Never raises. If the toggle source cannot be reached, the empty snapshot is installed
        and the background refresh keeps trying. Calling this again after it has completed
        does nothing; concurrent callers wait for the first one to finish.
        """
        with self._init_lock:
            if self._initialized or self._stopped:
                return

            try:
                snapshot = self._requester.get_manifest()
                if snapshot is None:
                    log.error("%s during initialization. Falling back to empty snapshot, defaults will be used during evaluation." % FAILED_MESSAGE)
                    snapshot = ToggleSnapshot.empty()
                self._snapshot = snapshot
            except Exception as e:
                log.exception("%s during initialization. Falling back to empty snapshot, defaults will be used during evaluation: %s" % (FAILED_MESSAGE, e))
                self._snapshot = ToggleSnapshot.empty()

            if self._stopped:
                return

            log.info("Starting PollingSnapshotProvider with refresh interval: " + str(self._refresh_interval))
            self._task = RepeatingTask("featuretoggles.datasource.polling", self._refresh_interval, self._refresh_interval, self._refresh)
            self._task.start()
            self._initialized = True

    def initialized(self) -> bool:
        return self._initialized

    def get_snapshot(self) -> ToggleSnapshot:
        """
        Returns the current snapshot. Never blocks; before :func:`initialize` has completed this
        is the empty snapshot.
        """
        return self._snapshot

    @property
    def retry_attempt(self) -> int:
        return self._retry_attempt

    def request_refresh(self):
        """
        Asks the background refresh to check for changes now instead of waiting for the rest of
        the current interval.
        """
        task = self._task
        if task is not None:
            task.trigger()

    def stop(self, timeout: Optional[float] = None):
        """
        Cancels the background refresh and waits for it to exit. No requests are made after
        this returns.
        """
        log.info("Stopping PollingSnapshotProvider")
        self._stopped = True
        self._requester.cancel()
        # initialize() either started the task before this lock was taken, or will see _stopped
        with self._init_lock:
            task = self._task
        if task is not None:
            task.stop()
            if not task.join(timeout):
                log.warning("Background refresh did not stop within %s seconds" % timeout)
        self._requester.close()

    def _refresh(self) -> Optional[float]:
        try:
            current = self._snapshot
            if self._requester.have_features_changed(current.content_hash):
                snapshot = self._requester.get_manifest()
                if snapshot is not None:
                    self._snapshot = snapshot
                    log.debug("Installed toggle snapshot %r" % snapshot)
                elif self._task is not None and not self._task.stopped:
                    log.warning("Toggle source reported a change but no manifest was retrieved. Previously retrieved toggle values will continue to be used.")
            self._retry_attempt = 0
            return None
        except Exception as e:
            log.exception("%s, attempt %d. Trying again after %s seconds: %s" % (FAILED_MESSAGE, self._retry_attempt, self._retry_delay, e))
            self._retry_attempt += 1
            return self._retry_delay
