import logging
import re
from typing import Any, Optional
from urllib.parse import urlparse, urlunparse

log = logging.getLogger('featuretoggles')

_RETRYABLE_STATUSES = [408, 429]

# Compiled regex pattern for valid characters in application values
_VALID_CHARACTERS_REGEX = re.compile(r"[^a-zA-Z0-9._-]")


def validate_application_info(application: dict, logger: logging.Logger) -> dict:
    return {
        "name": validate_application_value(application.get("name", ""), "name", logger),
        "version": validate_application_value(application.get("version", ""), "version", logger),
    }


def validate_application_value(value: Any, name: str, logger: logging.Logger) -> str:
    if not isinstance(value, str):
        return ""

    if len(value) > 64:
        logger.warning('Value of application[%s] was longer than 64 characters and was discarded' % name)
        return ""

    if _VALID_CHARACTERS_REGEX.search(value):
        logger.warning('Value of application[%s] contained invalid characters and was discarded' % name)
        return ""

    return value


class UnsuccessfulResponseException(Exception):
    def __init__(self, status):
        super(UnsuccessfulResponseException, self).__init__("HTTP error %d" % status)
        self._status = status

    @property
    def status(self):
        return self._status


def throw_if_unsuccessful_response(resp):
    if resp.status >= 400:
        raise UnsuccessfulResponseException(resp.status)


def is_http_error_recoverable(status):
    if status >= 400 and status < 500:
        return status in _RETRYABLE_STATUSES  # all other 4xx besides these are unrecoverable
    return True  # all other errors are recoverable


def http_error_description(status):
    return "HTTP error %d%s" % (status, " (invalid client identifier)" if (status == 401 or status == 403) else "")


def http_error_message(status, context, retryable_message="will retry"):
    return "Received %s for %s - %s" % (http_error_description(status), context, retryable_message if is_http_error_recoverable(status) else "check the client identifier and server URI")


def redact_password(url: Optional[str]) -> Optional[str]:
    """
    Replace any embedded password in the provided URL with 'xxxx'. This is
    useful for ensuring sensitive information included in a URL isn't logged.
    """
    if url is None:
        return None
    parts = urlparse(url)
    if parts.password is None:
        return url

    updated = parts.netloc.replace(parts.password, "xxxx")
    parts = parts._replace(netloc=updated)

    return urlunparse(parts)
