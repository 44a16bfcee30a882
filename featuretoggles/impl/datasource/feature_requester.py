"""
Default implementation of toggle source requests.
"""

import base64
import binascii
import json
from threading import Event
from typing import Optional
from urllib import parse


from featuretoggles.impl.http import _http_factory
from featuretoggles.impl.model import ToggleSnapshot
from featuretoggles.impl.retry_delay import ExponentialBackoff, call_with_retry
from featuretoggles.impl.util import (http_error_message,
                                      is_http_error_recoverable, log,
                                      redact_password,
                                      throw_if_unsuccessful_response)
from featuretoggles.interfaces import FeatureRequester

CONTENT_HASH_HEADER = 'ContentHash'

BEARER_CHECK_PATH = '/api/featuretoggles/check/v3/'
BEARER_MANIFEST_PATH = '/api/featuretoggles/v3/'
LEGACY_CHECK_PATH = '/api/featuretoggles/%s/check'
LEGACY_MANIFEST_PATH = '/api/featuretoggles/v2/%s'


class FeatureRequesterImpl(FeatureRequester):
    def __init__(self, config):
        self._config = config
        self._http_factory = _http_factory(config)
        self._http = self._http_factory.create_pool_manager(1, config.server_uri)
        self._stop = Event()
        self._backoff = ExponentialBackoff(config.request_backoff)
        if config.uses_bearer_token:
            self._check_uri = config.server_uri + BEARER_CHECK_PATH
            self._manifest_uri = config.server_uri + BEARER_MANIFEST_PATH
        else:
            identifier = parse.quote(config.client_identifier, safe=':')
            self._check_uri = config.server_uri + LEGACY_CHECK_PATH % identifier
            self._manifest_uri = config.server_uri + LEGACY_MANIFEST_PATH % identifier

    def have_features_changed(self, content_hash: bytes) -> bool:
        if len(content_hash) == 0:
            return True

        r = self._request_with_retry(self._check_uri, "checking for toggle changes")
        remote_hash = None
        if r is not None and r.status < 400:
            try:
                remote_hash = _decode_check_response(r.data)
            except ValueError as e:
                log.warning("Toggle check response from %s could not be decoded: %s" % (redact_password(self._config.server_uri), e))
        elif r is not None:
            log.warning(http_error_message(r.status, "toggle check request", "will check again later"))

        if remote_hash is None:
            if not self._stop.is_set():
                log.warning("Failed to retrieve feature toggles after %d attempts. Previously retrieved feature toggle values will continue to be used." % self._config.request_attempts)
            return False

        return remote_hash != bytes(content_hash)

    def get_manifest(self) -> Optional[ToggleSnapshot]:
        r = self._request_with_retry(self._manifest_uri, "retrieving feature toggles")
        server = redact_password(self._config.server_uri)
        if r is None or r.status == 404:
            if not self._stop.is_set():
                log.warning("Failed to retrieve feature toggles from %s" % server)
            return None
        if r.status >= 400:
            log.warning(http_error_message(r.status, "feature toggle request", "will check again later"))
            return None

        raw_content_hash = r.headers.get(CONTENT_HASH_HEADER)
        if raw_content_hash is None:
            log.warning("Feature toggle response from %s did not contain expected %s header." % (server, CONTENT_HASH_HEADER))
            return None

        try:
            snapshot = ToggleSnapshot.from_json(json.loads(r.data.decode('UTF-8')), raw_content_hash)
        except ValueError as e:
            log.warning("Feature toggle response content from %s could not be decoded: %s" % (server, e))
            return None

        log.debug("%s response status:[%d] toggles:[%d]", self._manifest_uri, r.status, len(snapshot.toggles))
        return snapshot

    def cancel(self):
        self._stop.set()

    def close(self):
        self._stop.set()
        self._http.clear()

    def _request_with_retry(self, uri: str, description: str):
        return call_with_retry(lambda: self._request(uri), self._config.request_attempts, self._backoff, self._stop, "%s from %s" % (description, redact_password(self._config.server_uri)))

    def _request(self, uri: str):
        hdrs = self._http_factory.base_headers.copy()
        hdrs['Accept'] = 'application/json'
        r = self._http.request('GET', uri, headers=hdrs, timeout=self._http_factory.timeout, retries=1)
        log.debug("%s response status:[%d]", uri, r.status)
        if is_http_error_recoverable(r.status):
            throw_if_unsuccessful_response(r)
        return r


def _decode_check_response(body: bytes) -> Optional[bytes]:
    data = json.loads(body.decode('UTF-8'))
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object but got %s" % data.__class__)
    encoded = data.get('contentHash')
    if not isinstance(encoded, str):
        raise ValueError('property "contentHash" is missing or not a string')
    try:
        return base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise ValueError('property "contentHash" is not valid base64: %s' % e)
