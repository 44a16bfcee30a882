"""
This submodule contains the :class:`Config` class for custom configuration of the SDK client.

Note that the same class can also be imported from the ``featuretoggles.client`` submodule.
"""

import re
from os import environ
from typing import Callable, Optional

from featuretoggles.impl.util import log, validate_application_info
from featuretoggles.interfaces import FeatureRequester

DEFAULT_SERVER_URI = 'https://features.octopus.com'
SERVER_URI_ENVIRONMENT_VARIABLE = 'FEATURE_TOGGLES_URL'

# installationId:projectId:environmentId[:tenantId]
_LEGACY_IDENTIFIER_REGEX = re.compile(r"^[^:\s]+:[^:\s]+:[^:\s]+(:[^:\s]*)?$")


class HTTPConfig:
    """Advanced HTTP configuration options for the SDK client.

    This class groups together HTTP/HTTPS-related configuration properties that rarely need to be changed.
    If you need to set these, construct an ``HTTPConfig`` instance and pass it as the ``http`` parameter when
    you construct the main :class:`Config` for the SDK client.
    """

    def __init__(
        self,
        connect_timeout: float = 10,
        read_timeout: float = 15,
        http_proxy: Optional[str] = None,
        ca_certs: Optional[str] = None,
        disable_ssl_verification: bool = False,
    ):
        """
        :param connect_timeout: The connect timeout for network connections in seconds.
        :param read_timeout: The read timeout for network connections in seconds.
        :param http_proxy: Use a proxy when connecting to the toggle source. This is the full URI of the
          proxy; for example: http://my-proxy.com:1234. Setting this parameter overrides any proxy
          specified by the ``http_proxy``/``https_proxy`` environment variables.
        :param ca_certs: If using a custom certificate authority, set this to the file path of the
          certificate bundle.
        :param disable_ssl_verification: If true, completely disables SSL verification and certificate
          verification for secure requests. This is unsafe and should not be used in a production environment.
        """
        self.__connect_timeout = connect_timeout
        self.__read_timeout = read_timeout
        self.__http_proxy = http_proxy
        self.__ca_certs = ca_certs
        self.__disable_ssl_verification = disable_ssl_verification

    @property
    def connect_timeout(self) -> float:
        return self.__connect_timeout

    @property
    def read_timeout(self) -> float:
        return self.__read_timeout

    @property
    def http_proxy(self) -> Optional[str]:
        return self.__http_proxy

    @property
    def ca_certs(self) -> Optional[str]:
        return self.__ca_certs

    @property
    def disable_ssl_verification(self) -> bool:
        return self.__disable_ssl_verification


class Config:
    """Configuration options for the SDK client.

    To use these options, create an instance of ``Config`` and pass it to either :func:`featuretoggles.set_config()`
    if you are using the singleton client, or the :class:`featuretoggles.client.ToggleClient` constructor otherwise.
    """

    def __init__(
        self,
        client_identifier: str,
        server_uri: Optional[str] = None,
        cache_duration: float = 60,
        retry_delay: float = 5,
        request_attempts: int = 3,
        request_backoff: float = 2,
        application: Optional[dict] = None,
        http: HTTPConfig = HTTPConfig(),
        feature_requester_class: Optional[Callable[['Config'], FeatureRequester]] = None,
    ):
        """
        :param client_identifier: Identifies which toggles to retrieve. Either the colon-delimited form
          ``installationId:projectId:environmentId[:tenantId]``, or an access token issued by the toggle
          source, which is sent as a bearer token.
        :param server_uri: The base URL of the toggle source. Defaults to the value of the
          ``FEATURE_TOGGLES_URL`` environment variable, or the public service if that is not set.
        :param cache_duration: The number of seconds between checks for changed toggles.
        :param retry_delay: The number of seconds to wait before checking again after an unexpected error
          in the background refresh.
        :param request_attempts: The maximum number of attempts for a single request to the toggle source.
        :param request_backoff: The delay in seconds after the first failed attempt; it doubles after
          each further failure.
        :param application: Optional information about the application using the SDK, as a dict with
          ``name`` and ``version`` keys. It is reported to the toggle source in the ``User-Agent`` and
          ``X-Release-Version`` headers.
        :param http: Optional properties for customizing the client's HTTP/HTTPS behavior. See
          :class:`HTTPConfig`.
        :param feature_requester_class: A factory for a custom :class:`featuretoggles.interfaces.FeatureRequester`
          implementation, mainly useful for testing.
        """
        self.__client_identifier = client_identifier
        if server_uri is None:
            server_uri = environ.get(SERVER_URI_ENVIRONMENT_VARIABLE) or DEFAULT_SERVER_URI
        self.__server_uri = server_uri.rstrip('/')
        self.__cache_duration = cache_duration
        self.__retry_delay = retry_delay
        self.__request_attempts = request_attempts
        self.__request_backoff = request_backoff
        self.__application = validate_application_info(application or {}, log)
        self.__http = http
        self.__feature_requester_class = feature_requester_class

    def copy_with_new_client_identifier(self, new_client_identifier: str) -> 'Config':
        """Returns a new ``Config`` instance that is the same as this one, except for having a different client identifier.

        :param new_client_identifier: the new client identifier
        """
        return Config(
            client_identifier=new_client_identifier,
            server_uri=self.__server_uri,
            cache_duration=self.__cache_duration,
            retry_delay=self.__retry_delay,
            request_attempts=self.__request_attempts,
            request_backoff=self.__request_backoff,
            application=self.__application,
            http=self.__http,
            feature_requester_class=self.__feature_requester_class,
        )

    @property
    def client_identifier(self) -> str:
        return self.__client_identifier

    @property
    def uses_bearer_token(self) -> bool:
        """True if the client identifier is an access token rather than the colon-delimited form."""
        return _LEGACY_IDENTIFIER_REGEX.match(self.__client_identifier or '') is None

    @property
    def server_uri(self) -> str:
        return self.__server_uri

    @property
    def cache_duration(self) -> float:
        return self.__cache_duration

    @property
    def retry_delay(self) -> float:
        return self.__retry_delay

    @property
    def request_attempts(self) -> int:
        return self.__request_attempts

    @property
    def request_backoff(self) -> float:
        return self.__request_backoff

    @property
    def application(self) -> dict:
        """
        An object that allows configuration of application metadata.

        If you want to set non-string values as any of the fields, they will be discarded.
        """
        return self.__application

    @property
    def http(self) -> HTTPConfig:
        return self.__http

    @property
    def feature_requester_class(self) -> Optional[Callable[['Config'], FeatureRequester]]:
        return self.__feature_requester_class

    def _validate(self):
        if not self.__client_identifier:
            log.warning("Missing or blank client identifier.")
        if self.__cache_duration <= 0:
            log.warning("cache_duration should be greater than zero; got %s" % self.__cache_duration)
        if self.__retry_delay <= 0:
            log.warning("retry_delay should be greater than zero; got %s" % self.__retry_delay)
        if self.__request_attempts < 1:
            log.warning("request_attempts should be at least 1; got %s" % self.__request_attempts)


__all__ = ['Config', 'HTTPConfig']
