"""Helpers for YAML parsing quirks."""

from typing import Any, Dict, TypeVar

V = TypeVar("V")


def normalize_yaml_dict_keys(data: Dict[Any, V]) -> Dict[str, V]:
    """Return a copy of ``data`` whose keys are all strings.

    YAML 1.1 reads keys such as ``yes``, ``on`` or ``true`` as booleans and
    bare numbers as ints. Attribute lookups in nviz are by string name, so
    every key is converted with ``str`` ("True", "False", "10", ...).

    Examples:
        >>> normalize_yaml_dict_keys({True: 1, 10: 2, "capacity": 3})
        {'True': 1, '10': 2, 'capacity': 3}
    """
    return {str(key): value for key, value in data.items()}
