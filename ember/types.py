"""Runtime value helpers for Ember.

Ember has five kinds of runtime values, represented directly by Python
objects: numbers are `float`, text is `str`, booleans are `bool`, null is
`None`, and callables are `NativeFunction` / `UserFunction` instances.
Numbers are always floats, never ints, so a `bool` (a Python int) can
never pass a numeric check or compare equal to a number.
"""

from __future__ import annotations

from typing import Any


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    # Only null and false are falsy; 0 and "" are truthy.
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Ember value equality used by == and !=."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        return False
    if is_number(a) or isinstance(a, (str, bool)):
        return a == b
    # callables compare by identity
    return a is b


def stringify(value: Any) -> str:
    """Convert a runtime value to the text shown by print and write."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = str(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)
