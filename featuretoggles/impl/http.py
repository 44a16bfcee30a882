from os import environ
from typing import Tuple
from urllib.parse import urlparse

import certifi
import urllib3

from featuretoggles.version import VERSION

RELEASE_VERSION_HEADER = 'X-Release-Version'


def _user_agent(application: dict) -> str:
    name = application.get('name', '')
    version = application.get('version', '')

    if not name:
        return 'FeatureTogglesPythonClient/' + VERSION
    if version:
        return "%s/%s" % (name, version)
    return name


def _base_headers(config):
    headers = {'User-Agent': _user_agent(config.application)}

    if config.uses_bearer_token:
        headers['Authorization'] = 'Bearer %s' % config.client_identifier

    version = config.application.get('version', '')
    if version:
        headers[RELEASE_VERSION_HEADER] = version

    return headers


def _http_factory(config):
    return HTTPFactory(_base_headers(config), config.http)


class HTTPFactory:
    def __init__(self, base_headers, http_config):
        self.__base_headers = base_headers
        self.__http_config = http_config
        self.__timeout = urllib3.Timeout(connect=http_config.connect_timeout, read=http_config.read_timeout)

    @property
    def base_headers(self):
        return self.__base_headers

    @property
    def http_config(self):
        return self.__http_config

    @property
    def timeout(self):
        return self.__timeout

    def create_pool_manager(self, num_pools, target_base_uri):
        proxy_url = self.__http_config.http_proxy or _get_proxy_url(target_base_uri)

        if self.__http_config.disable_ssl_verification:
            cert_reqs = 'CERT_NONE'
            ca_certs = None
        else:
            cert_reqs = 'CERT_REQUIRED'
            ca_certs = self.__http_config.ca_certs or certifi.where()

        if proxy_url is None:
            return urllib3.PoolManager(num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs)
        else:
            # Get proxy authentication, if provided
            url = urllib3.util.parse_url(proxy_url)
            proxy_headers = None
            if url.auth is not None:
                proxy_headers = urllib3.util.make_headers(proxy_basic_auth=url.auth)
            return urllib3.ProxyManager(proxy_url, num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs, proxy_headers=proxy_headers)


def _get_proxy_url(target_base_uri):
    """
    Determine the proxy URL to use for a given target URI, based on the
    environment variables http_proxy, https_proxy, and no_proxy.

    An https target uses HTTPS_PROXY and any other target uses HTTP_PROXY. If
    NO_PROXY contains the target host (optionally with a port) or '*', no proxy
    is used.
    """
    if target_base_uri is None:
        return None

    target_host, target_port, is_https = _get_target_host_and_port(target_base_uri)

    proxy_url = environ.get('https_proxy') if is_https else environ.get('http_proxy')
    no_proxy = environ.get('no_proxy', '').strip()

    if proxy_url is None or no_proxy == '*':
        return None
    elif no_proxy == '':
        return proxy_url

    for no_proxy_entry in no_proxy.split(','):
        no_proxy_entry = no_proxy_entry.strip()
        if no_proxy_entry == '':
            continue
        host, _, port = no_proxy_entry.partition(':')
        if host == '':
            continue
        if target_host.endswith(host) and (port == '' or target_port == int(port)):
            return None

    return proxy_url


def _get_target_host_and_port(uri: str) -> Tuple[str, int, bool]:
    """
    Given a URL, return the effective hostname, port, and whether it is considered a secure scheme.

    Without a scheme the port defaults to 80 and the connection is insecure; with one, an
    explicit port wins, otherwise 443 for https and 80 for anything else.
    """
    if '//' not in uri:
        parts = uri.split(':')
        return parts[0], int(parts[1]) if len(parts) > 1 else 80, False

    parsed = urlparse(uri)
    is_https = parsed.scheme == 'https'

    port = parsed.port
    if port is None:
        port = 443 if is_https else 80

    return parsed.hostname or "", port, is_https
