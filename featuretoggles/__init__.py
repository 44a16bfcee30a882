"""
The featuretoggles module contains the most common top-level entry points for the SDK.
"""

from threading import Lock as _Lock

from featuretoggles.impl.util import log
from featuretoggles.version import VERSION

from .client import *
from .evaluation import ErrorKind, EvaluationResult

__version__ = VERSION

__client = None
__config = None
__lock = _Lock()


def set_config(config: Config):
    """Sets the configuration for the shared SDK client instance.

    If this is called prior to :func:`featuretoggles.get()`, it stores the configuration that will be used when the
    client is initialized. If it is called after the client has already been initialized, the client will be
    re-initialized with the new configuration (this will result in the next call to :func:`featuretoggles.get()`
    returning a new client instance).

    :param config: the client configuration
    """
    global __config
    global __client
    with __lock:
        __config = config
        if __client:
            log.info("Reinitializing feature toggle client " + VERSION + " with new config")
            new_client = ToggleClient(config=config)
            old_client = __client
            __client = new_client
            old_client.close()


def get() -> ToggleClient:
    """Returns the shared SDK client instance, using the current global configuration.

    To use the SDK as a singleton, first make sure you have called :func:`featuretoggles.set_config()`
    at startup time. Then ``get()`` will return the same shared :class:`featuretoggles.client.ToggleClient`
    instance each time. The client will be initialized if it has not been already.
    """
    global __client
    client = __client
    if client:
        return client

    with __lock:
        if not __client:
            if __config is None:
                raise Exception("set_config was not called")
            log.info("Initializing feature toggle client " + VERSION)
            __client = ToggleClient(config=__config)
        return __client


# for testing only
def _reset_client():
    global __client
    with __lock:
        c = __client
        __client = None
    if c:
        c.close()


__all__ = ['Config', 'HTTPConfig', 'ToggleClient', 'ErrorKind', 'EvaluationResult', 'client', 'config', 'evaluation', 'interfaces']
