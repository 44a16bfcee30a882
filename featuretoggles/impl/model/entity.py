import json
from typing import Any, List, Optional

# Validation helpers for the toggle data model.
#
# Model classes decode themselves from the dict that corresponds to the JSON
# representation served by the toggle source. Every property goes through the opt_
# and req_ functions so that a value of the wrong type rejects the whole manifest
# immediately, instead of surfacing later as a confusing evaluation result.


def opt_type(data: dict, name: str, desired_type) -> Any:
    value = data.get(name)
    if value is not None and not isinstance(value, desired_type):
        raise ValueError('error in toggle data: property "%s" should be type %s but was %s' % (name, desired_type, value.__class__))
    return value


def opt_bool(data: dict, name: str) -> bool:
    return opt_type(data, name, bool) is True


def opt_int(data: dict, name: str) -> Optional[int]:
    value = opt_type(data, name, int)
    # bool is a subtype of int
    if isinstance(value, bool):
        raise ValueError('error in toggle data: property "%s" should be an integer but was %s' % (name, value.__class__))
    return value


def opt_list(data: dict, name: str) -> list:
    return opt_type(data, name, list) or []


def opt_dict_list(data: dict, name: str) -> list:
    return validate_list_type(opt_list(data, name), name, dict)


def opt_str(data: dict, name: str) -> Optional[str]:
    return opt_type(data, name, str)


def req_type(data: dict, name: str, desired_type) -> Any:
    value = opt_type(data, name, desired_type)
    if value is None:
        raise ValueError('error in toggle data: required property "%s" is missing' % name)
    return value


def req_str(data: dict, name: str) -> str:
    return req_type(data, name, str)


def validate_list_type(items: list, name: str, desired_type) -> List[Any]:
    for item in items:
        if not isinstance(item, desired_type):
            raise ValueError('error in toggle data: property %s should be an array of %s but an item was %s' % (name, desired_type, item.__class__))
    return items


class ModelEntity:
    def __init__(self, data: dict):
        self._data = data

    def __eq__(self, other) -> bool:
        return self.__class__ == other.__class__ and self._data == other._data

    def __repr__(self) -> str:
        return json.dumps(self._data, separators=(',', ':'))
