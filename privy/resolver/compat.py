"""
Type-compatibility relation used for parameter, field and return matching.

    compatible(actual, expected)
        actual is expected
        OR actual is a (transitive) subclass of expected
        OR actual implements expected (ABC registration / Protocol)

Annotations are flattened to tuples of plain classes first, so a
parameter annotated ``Optional[Sequence[str]]`` accepts (Sequence, NoneType).
"""

from __future__ import annotations

import abc
import logging
import types
import typing
from typing import Any, Iterable, Optional

from privy.exceptions import InvalidArgumentError

__all__ = [
    "compatible",
    "is_subclass",
    "implements",
    "accepts",
    "annotation_types",
    "runtime_types",
]

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_ANY_TYPES = (object,)

_UNION_ORIGINS = {typing.Union, types.UnionType}
_WRAPPER_ORIGINS = {typing.ClassVar, typing.Final, typing.Annotated}


# ── Core relation ─────────────────────────────────────────────────────────────


def is_subclass(to_check: type, base: type) -> bool:
    """True if `base` is a proper ancestor of `to_check` in its MRO."""
    mro = getattr(to_check, "__mro__", ())
    return base in mro[1:]


def implements(to_check: type, interface: type) -> bool:
    """
    True if `to_check` satisfies `interface` without naming it as a base:
    ABC ``register()``, ``__subclasshook__`` or a runtime-checkable Protocol.

    Raises:
        InvalidArgumentError: either argument is None.
    """
    if to_check is None:
        raise InvalidArgumentError("to_check")
    if interface is None:
        raise InvalidArgumentError("interface")
    if not isinstance(interface, abc.ABCMeta) or not isinstance(to_check, type):
        return False
    if interface in to_check.__mro__:
        return False
    try:
        return issubclass(to_check, interface)
    except TypeError:
        # Protocols that are not @runtime_checkable (or have data members)
        # refuse issubclass(); they cannot be checked structurally.
        logger.debug("%s cannot be checked against %s", to_check, interface)
        return False


def compatible(actual: type, expected: type) -> bool:
    """Same class, subclass, or implementation of `expected`."""
    if actual is expected:
        return True
    if actual is None or expected is None:
        return False
    return is_subclass(actual, expected) or implements(actual, expected)


def accepts(actual_types: Iterable[type], expected_types: Iterable[type]) -> bool:
    """True if any class in `actual_types` is compatible with any in `expected_types`."""
    expected = tuple(expected_types)
    return any(compatible(a, e) for a in actual_types for e in expected)


# ── Annotation flattening ─────────────────────────────────────────────────────


def annotation_types(annotation: Any) -> tuple:
    """
    Flatten an annotation into the concrete classes it accepts.

    Any / missing / unresolved forward reference / bare TypeVar → (object,)
    Union[A, B] / A | B                                          → (A, B)
    list[int], Sequence[str]                                     → origin class
    None                                                         → (NoneType,)
    ClassVar[X], Final[X], Annotated[X, ...]                     → X
    """
    if annotation is None or annotation is _NONE_TYPE:
        return (_NONE_TYPE,)
    if annotation is Any or annotation is object:
        return _ANY_TYPES
    if isinstance(annotation, (str, typing.ForwardRef)):
        return _ANY_TYPES
    if isinstance(annotation, typing.TypeVar):
        if annotation.__constraints__:
            return _flatten(annotation.__constraints__)
        if annotation.__bound__ is not None:
            return annotation_types(annotation.__bound__)
        return _ANY_TYPES

    origin = typing.get_origin(annotation)
    if origin in _UNION_ORIGINS:
        return _flatten(typing.get_args(annotation))
    if origin in _WRAPPER_ORIGINS:
        args = typing.get_args(annotation)
        return annotation_types(args[0]) if args else _ANY_TYPES
    if origin is typing.Literal:
        return _flatten(type(v) for v in typing.get_args(annotation))
    if origin is not None:
        return annotation_types(origin)

    if annotation is typing.ClassVar or annotation is typing.Final:
        return _ANY_TYPES
    if isinstance(annotation, type):
        return (annotation,)
    return _ANY_TYPES


def _flatten(annotations: Iterable[Any]) -> tuple:
    result: list[type] = []
    for ann in annotations:
        for tp in annotation_types(ann):
            if tp not in result:
                result.append(tp)
    return tuple(result)


def runtime_types(values: Optional[Iterable[Any]]) -> tuple:
    """Runtime class of every value; None for a None value."""
    if values is None:
        return ()
    return tuple(None if value is None else type(value) for value in values)
