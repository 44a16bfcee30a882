from typing import Any, Optional

from semver import VersionInfo


def parse_semver(input: Any) -> Optional[VersionInfo]:
    """
    Parses a strict ``major.minor.patch[-prerelease][+build]`` version string.

    :return: the parsed version, or None if input was not a string or not a valid version
    """
    if not isinstance(input, str):
        return None
    try:
        return VersionInfo.parse(input)
    except (TypeError, ValueError):
        return None


def parse_percentage(input: Any) -> Optional[int]:
    """
    :param input: an int, or a string holding a base-10 integer
    :return: the percentage if it is in the range 0-100, or None if input was invalid.
    """
    if isinstance(input, bool):
        return None
    if isinstance(input, str):
        try:
            input = int(input.strip())
        except ValueError:
            return None
    if not isinstance(input, int):
        return None
    return input if 0 <= input <= 100 else None
