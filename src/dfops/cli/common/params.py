"""Template parameter parsing.

Translates repeated `--param key=value` CLI arguments into the string map
passed through to the Dataflow template.
"""

from typing import Iterable


def parse_parameters(items: Iterable[str]) -> dict[str, str]:
    """
    Build a parameter mapping from `key=value` strings.

    The value may itself contain `=`; only the first one separates key from
    value. Repeating a key is an error rather than a silent override.

    Raises:
        ValueError: If an item has no `=`, an empty key, or a duplicate key.
    """
    params: dict[str, str] = {}

    for item in items:
        if "=" not in item:
            raise ValueError(f"Invalid parameter: '{item}' (expected key=value)")

        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid parameter: '{item}' (empty key)")
        if key in params:
            raise ValueError(f"Parameter '{key}' given more than once")
        params[key] = value

    return params
