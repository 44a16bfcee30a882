"""
This submodule contains the client class that provides most of the SDK functionality.
"""

import traceback
from typing import Any, Optional

from featuretoggles.config import Config, HTTPConfig
from featuretoggles.evaluation import ErrorKind, EvaluationResult
from featuretoggles.impl.datasource.feature_requester import \
    FeatureRequesterImpl
from featuretoggles.impl.datasource.polling import PollingSnapshotProvider
from featuretoggles.impl.evaluator import EvaluationContext, Evaluator
from featuretoggles.impl.model import ToggleSnapshot
from featuretoggles.impl.util import log, redact_password
from featuretoggles.interfaces import FeatureRequester
from featuretoggles.version import VERSION

PROVIDER_NAME = 'feature-toggles'

_UNSUPPORTED_TYPE_MESSAGE = "Only boolean toggles are supported."


class ToggleClient:
    """The SDK client object.

    Applications should configure the client at startup time and continue to use it throughout the lifetime
    of the application, rather than creating instances on the fly. The best way to do this is with the
    singleton methods :func:`featuretoggles.set_config()` and :func:`featuretoggles.get()`. However, you may
    also call the constructor directly if you need to maintain multiple instances.

    Client instances are thread-safe.
    """

    def __init__(self, config: Config):
        """Constructs a new ToggleClient instance.

        The first set of toggles is retrieved before the constructor returns. If the toggle source cannot
        be reached, the client still starts: every toggle resolves to the caller's default value until a
        later refresh succeeds.

        :param config: the client configuration
        """
        self._config = config
        self._config._validate()

        if config.feature_requester_class:
            requester = config.feature_requester_class(config)
        else:
            requester = FeatureRequesterImpl(config)  # type: FeatureRequester

        self._evaluator = Evaluator()
        self._snapshot_provider = PollingSnapshotProvider(requester, config.cache_duration, config.retry_delay)

        log.info("Retrieving feature toggles from %s" % redact_password(config.server_uri))
        self._snapshot_provider.initialize()

        if self._snapshot_provider.get_snapshot().is_empty:
            log.warning("No feature toggles were retrieved during initialization. Default values will be used until a refresh succeeds.")
        else:
            log.info("Started feature toggle client: OK")

    def close(self):
        """Stops the background refresh and releases network connections used by the client.

        Do not attempt to use the client after calling this method.
        """
        log.info("Closing feature toggle client..")
        self._snapshot_provider.stop()

    # These magic methods allow a client object to be automatically cleaned up by the "with" scope operator
    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def is_initialized(self) -> bool:
        """Returns true if the client has finished its first attempt to retrieve toggles.

        This is also true if that attempt failed; check :func:`snapshot` to see whether any
        toggles are available.
        """
        return self._snapshot_provider.initialized()

    def snapshot(self) -> ToggleSnapshot:
        """Returns the toggle data currently used for evaluation."""
        return self._snapshot_provider.get_snapshot()

    def refresh(self):
        """Asks the client to check for changed toggles now rather than at the end of the current interval.

        This returns immediately; the check happens on the background thread.
        """
        self._snapshot_provider.request_refresh()

    def get_metadata(self) -> dict:
        return {'name': PROVIDER_NAME, 'version': VERSION}

    def is_enabled(self, key: str, context: Optional[EvaluationContext] = None, default: bool = False) -> bool:
        """Determines whether a toggle is on for the given context.

        :param key: the slug of the toggle
        :param context: optional attributes of the current request, such as ``{'license': 'trial'}``
        :param default: the value to return if the toggle does not exist
        """
        return self.resolve_boolean(key, default, context).value

    def resolve_boolean(self, key: str, default: bool, context: Optional[EvaluationContext] = None) -> EvaluationResult:
        """Evaluates a toggle and returns an object that describes the result.

        This never raises: an unknown or malformed key, or any unexpected problem, produces a result
        holding ``default`` and an :class:`featuretoggles.evaluation.ErrorKind`.

        :param key: the slug of the toggle
        :param default: the value to return if the toggle cannot be evaluated
        :param context: optional attributes of the current request
        """
        try:
            return self._evaluator.evaluate(self._snapshot_provider.get_snapshot(), key, default, context)
        except Exception as e:
            log.error("Unexpected error while evaluating feature toggle \"%s\": %s" % (key, repr(e)))
            log.debug(traceback.format_exc())
            return EvaluationResult(default, ErrorKind.GENERAL, str(e))

    def resolve_string(self, key: str, default: str, context: Optional[EvaluationContext] = None) -> Any:
        raise NotImplementedError(_UNSUPPORTED_TYPE_MESSAGE)

    def resolve_integer(self, key: str, default: int, context: Optional[EvaluationContext] = None) -> Any:
        raise NotImplementedError(_UNSUPPORTED_TYPE_MESSAGE)

    def resolve_float(self, key: str, default: float, context: Optional[EvaluationContext] = None) -> Any:
        raise NotImplementedError(_UNSUPPORTED_TYPE_MESSAGE)

    def resolve_object(self, key: str, default: Any, context: Optional[EvaluationContext] = None) -> Any:
        raise NotImplementedError(_UNSUPPORTED_TYPE_MESSAGE)


__all__ = ['ToggleClient', 'Config', 'HTTPConfig']
