import base64
from typing import Dict, Iterable, List, Optional, Tuple

from featuretoggles.impl.model.entity import *


class ToggleDefinition(ModelEntity):
    """
    One evaluated feature toggle as served by the toggle source.

    ``segments`` is an ordered sequence of (key, value) pairs. Pairs sharing a key are
    alternatives; distinct keys must all be satisfied.
    """

    __slots__ = ['_data', '_name', '_slug', '_enabled', '_segments', '_rollout_percentage']

    def __init__(self, data: dict):
        super().__init__(data)
        self._name = opt_str(data, 'name') or ''
        self._slug = req_str(data, 'slug')
        self._enabled = opt_bool(data, 'isEnabled')
        self._segments = tuple((req_str(item, 'key'), req_str(item, 'value')) for item in opt_dict_list(data, 'segments'))
        self._rollout_percentage = opt_int(data, 'rolloutPercentage')
        if self._rollout_percentage is not None and not 0 <= self._rollout_percentage <= 100:
            raise ValueError('error in toggle data: property "rolloutPercentage" should be between 0 and 100 but was %d' % self._rollout_percentage)

    @property
    def name(self) -> str:
        return self._name

    @property
    def slug(self) -> str:
        return self._slug

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def segments(self) -> Tuple[Tuple[str, str], ...]:
        return self._segments

    @property
    def rollout_percentage(self) -> Optional[int]:
        return self._rollout_percentage


class ToggleSnapshot:
    """
    An immutable set of toggle definitions plus the content hash the source reported for them.

    A snapshot is never modified after construction; the refresh engine replaces the whole
    object instead. The empty snapshot (no toggles, zero-length hash) means that no data
    has been retrieved yet.
    """

    __slots__ = ['_toggles', '_content_hash', '_by_slug']

    def __init__(self, toggles: Iterable[ToggleDefinition], content_hash: bytes):
        self._toggles = tuple(toggles)
        self._content_hash = bytes(content_hash)
        by_slug = {}  # type: Dict[str, ToggleDefinition]
        for toggle in self._toggles:
            by_slug.setdefault(toggle.slug.lower(), toggle)
        self._by_slug = by_slug

    @staticmethod
    def empty() -> 'ToggleSnapshot':
        return _EMPTY

    @staticmethod
    def from_json(items: list, encoded_content_hash: str) -> 'ToggleSnapshot':
        """
        Decodes a manifest response body (already parsed from JSON) and its base64 content hash.

        :raises ValueError: if the body or the hash is malformed
        """
        if not isinstance(items, list):
            raise ValueError('error in toggle data: manifest should be an array but was %s' % items.__class__)
        toggles = list(ToggleDefinition(item) for item in validate_list_type(items, 'manifest', dict))
        return ToggleSnapshot(toggles, base64.b64decode(encoded_content_hash, validate=True))

    @property
    def toggles(self) -> Tuple[ToggleDefinition, ...]:
        return self._toggles

    @property
    def content_hash(self) -> bytes:
        return self._content_hash

    @property
    def is_empty(self) -> bool:
        return len(self._toggles) == 0 and len(self._content_hash) == 0

    def get(self, slug: str) -> Optional[ToggleDefinition]:
        """Case-insensitive lookup of a toggle by its full slug."""
        return self._by_slug.get(slug.lower())

    def slugs(self) -> List[str]:
        return [t.slug for t in self._toggles]

    def __repr__(self) -> str:
        return "ToggleSnapshot(toggles=%d, content_hash=%s)" % (len(self._toggles), base64.b64encode(self._content_hash).decode('ascii'))


_EMPTY = ToggleSnapshot([], b'')
