"""Schema-driven cleaning, projection and flattening of decoded JSON.

The three operations are independent and are applied in this order by the
pipelines::

    clean -> pick_by_schema -> flatten_arrays_in_object

A *schema* is a dict whose values are either ``True`` (keep the value as
is) or another schema (descend and apply it).  Keys missing from the schema
are dropped.  Values are plain ``json.loads`` output: dicts, lists and
scalars.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Union

Schema = Dict[str, Union[bool, "Schema"]]

# GraphQL bookkeeping that Airbnb attaches to nearly every object.
_NOISE_KEYS = frozenset({"__typename"})


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, dict)) and not value)


def clean(value: Any) -> Any:
    """Strip ``None`` values and empty containers from every dict in *value*.

    Works in place and also returns *value*.  Children are cleaned before
    their own emptiness is judged, so ``{"a": {"b": None}}`` collapses to
    ``{}`` in a single pass.  List elements are cleaned but never removed.
    """
    if isinstance(value, dict):
        for key in list(value):
            child = value[key]
            if key in _NOISE_KEYS:
                del value[key]
                continue
            clean(child)
            if _is_empty(child):
                del value[key]
    elif isinstance(value, list):
        for item in value:
            clean(item)
    return value


def pick_by_schema(value: Any, schema: Schema) -> Any:
    """Return a copy of *value* restricted to the keys allowed by *schema*.

    A list is projected element by element, at the top level and under any
    nested schema alike: Airbnb wraps the same field in a single-element list
    in some responses and not in others, and the schema does not need to
    know which.  Scalars are returned unchanged.
    """
    if isinstance(value, list):
        return [pick_by_schema(item, schema) for item in value]
    if not isinstance(value, dict):
        return value

    picked: dict[str, Any] = {}
    for key, rule in schema.items():
        if key not in value:
            continue
        if rule is True:
            picked[key] = copy.deepcopy(value[key])
        elif isinstance(rule, dict):
            picked[key] = pick_by_schema(value[key], rule)
    return picked


def _unwrap(value: Any) -> Any:
    while isinstance(value, list) and len(value) == 1:
        value = value[0]
    return value


def flatten_arrays_in_object(value: Any) -> Any:
    """Replace single-element lists held by dict fields with their element.

    ``{"title": ["Paris"]}`` becomes ``{"title": "Paris"}``.  Lists of any
    other length keep their shape, but their elements are flattened in turn.
    Returns a new structure; *value* is not modified.
    """
    if isinstance(value, dict):
        return {key: flatten_arrays_in_object(_unwrap(child)) for key, child in value.items()}
    if isinstance(value, list):
        return [flatten_arrays_in_object(item) for item in value]
    return value
