# ops/patching.py
"""
Declarative optional-field updates.

A patch spec maps an input key to a setter. ``apply_patch`` walks the
spec and calls each setter whose key is present with a non-empty value,
so call sites declare which fields are optional instead of repeating
``if value: obj.field = value`` for each one.
"""

from typing import Any, Callable, List, Mapping

Setter = Callable[[Any, Any], None]

EMPTY = (None, "", [], {})


def set_attr(attr: str, transform: Callable[[Any], Any] = None) -> Setter:
    """Setter that assigns the (optionally transformed) value to one attribute."""
    def setter(instance, value):
        setattr(instance, attr, transform(value) if transform else value)
    return setter


def strip(value):
    return value.strip() if isinstance(value, str) else value


def apply_patch(instance, spec: Mapping[str, Setter], data: Mapping) -> List[str]:
    """
    Apply every setter whose key is present in data.

    Returns:
        The input keys that were applied, in spec order
    """
    applied = []
    for key, setter in spec.items():
        value = data.get(key)
        if value in EMPTY:
            continue
        setter(instance, value)
        applied.append(key)
    return applied
