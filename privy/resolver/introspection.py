"""
Runtime type-metadata provider.

Everything the resolver knows about a class comes through here: which
non-public names a class declares directly, at which scope, with which
declared type, and which overload signatures a callable carries.

Nothing in this module walks the MRO except members(); traversal policy
belongs to MemberResolver.
"""

from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .compat import annotation_types
from .models import MemberKind, Signature

__all__ = [
    "DeclaredMember",
    "is_non_public",
    "mangle",
    "declared_field",
    "declared_property",
    "declared_callable",
    "signatures",
    "members",
]

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class DeclaredMember:
    """One non-public member declared directly on `owner`."""
    owner:         type
    attr_name:     str
    kind:          MemberKind
    is_static:     bool
    member:        Any = None
    declared_type: Optional[tuple] = None    # None = unannotated

    def __str__(self) -> str:
        scope = "static " if self.is_static else ""
        return f"{scope}{self.kind.value} {self.owner.__qualname__}.{self.attr_name}"


# ── Naming ────────────────────────────────────────────────────────────────────


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def is_non_public(name: str) -> bool:
    """`_x`, `__x` and mangled `_Cls__x` are non-public; dunders are not."""
    return bool(name) and name.startswith("_") and not is_dunder(name)


def mangle(name: str, owner: type) -> str:
    """
    Apply Python's private-name mangling as if `name` were written inside
    the body of `owner`: ``__secret`` in ``Box`` becomes ``_Box__secret``.
    """
    if not name.startswith("__") or is_dunder(name):
        return name
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


# ── Annotations ───────────────────────────────────────────────────────────────


def _own_annotations(obj: Any) -> dict:
    """Annotations declared on `obj` itself, with string forms evaluated where possible."""
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except Exception:   # NameError, SyntaxError, TypeError from user annotations
        logger.debug("Could not evaluate annotations of %r; using raw form", obj)
        return inspect.get_annotations(obj)


def _function_hints(func: Any) -> dict:
    try:
        return typing.get_type_hints(func)
    except Exception:   # unresolved forward references in user code
        logger.debug("Could not resolve type hints of %r; using raw form", func)
        return dict(getattr(func, "__annotations__", {}) or {})


def _is_class_var(annotation: Any) -> bool:
    if annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _slots(cls: type) -> tuple:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


# ── Declared members (single class, no traversal) ─────────────────────────────


def _is_data(cls: type, value: Any) -> bool:
    if isinstance(value, (staticmethod, classmethod, property)):
        return False
    if inspect.isfunction(value):
        return False
    # a nested class body is a member type, a class stored in a field is a value
    if inspect.isclass(value) and value.__qualname__.startswith(cls.__qualname__ + "."):
        return False
    # __slots__ member descriptors and other data descriptors are instance
    # storage, not class-level values.
    return not inspect.isdatadescriptor(value)


def declared_field(cls: type, attr_name: str, is_static: bool) -> Optional[DeclaredMember]:
    """
    The field `attr_name` declared directly on `cls`, or None.

    Static scope:   a plain data attribute in ``cls.__dict__``.
    Instance scope: a non-ClassVar annotation on `cls`, or a ``__slots__`` entry.
    """
    annotations = _own_annotations(cls)
    annotation = annotations.get(attr_name, inspect.Parameter.empty)
    annotated = annotation is not inspect.Parameter.empty

    if is_static:
        if attr_name not in cls.__dict__ or not _is_data(cls, cls.__dict__[attr_name]):
            return None
    else:
        declared = (annotated and not _is_class_var(annotation)) or attr_name in _slots(cls)
        if not declared:
            return None

    return DeclaredMember(
        owner=cls,
        attr_name=attr_name,
        kind=MemberKind.FIELD,
        is_static=is_static,
        declared_type=annotation_types(annotation) if annotated else None,
    )


def declared_property(cls: type, attr_name: str, is_static: bool) -> Optional[DeclaredMember]:
    """
    The property `attr_name` declared directly on `cls`, or None.

    Class-level (static) properties are properties of the metaclass, so
    static scope looks in ``type(cls).__dict__``.
    """
    namespace = type(cls).__dict__ if is_static else cls.__dict__
    prop = namespace.get(attr_name)
    if not isinstance(prop, property):
        return None

    declared_type = None
    if prop.fget is not None:
        returns = _function_hints(prop.fget).get("return", inspect.Parameter.empty)
        if returns is not inspect.Parameter.empty:
            declared_type = annotation_types(returns)

    return DeclaredMember(
        owner=cls,
        attr_name=attr_name,
        kind=MemberKind.PROPERTY,
        is_static=is_static,
        member=prop,
        declared_type=declared_type,
    )


def declared_callable(cls: type, attr_name: str, is_static: bool) -> Optional[DeclaredMember]:
    """
    The method `attr_name` declared directly on `cls`, or None.

    Static scope matches staticmethod and classmethod objects; instance
    scope matches plain functions.
    """
    value = cls.__dict__.get(attr_name)
    if value is None:
        return None
    if is_static != isinstance(value, (staticmethod, classmethod)):
        return None
    if not is_static and not inspect.isfunction(value):
        return None
    return DeclaredMember(
        owner=cls,
        attr_name=attr_name,
        kind=MemberKind.METHOD,
        is_static=is_static,
        member=value,
    )


# ── Signatures ────────────────────────────────────────────────────────────────


def _unwrap(func: Any) -> Any:
    return getattr(func, "__func__", func)


def signature_of(func: Any, bound: bool) -> Optional[Signature]:
    """
    Positional Signature of one function object.

    `bound` drops the first positional parameter (self / cls).  Returns None
    when the function has a keyword-only parameter without a default, since
    it cannot be called with positional arguments alone.
    """
    func = _unwrap(func)
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        logger.debug("No signature available for %r", func)
        return None

    hints = _function_hints(func)
    params = []
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
            return None
        if param.kind in _POSITIONAL:
            params.append(param)
    if bound:
        params = params[1:]

    parameter_types = tuple(
        annotation_types(hints.get(p.name, object)) for p in params
    )
    return_types = annotation_types(hints["return"]) if "return" in hints else None
    return Signature(func=func, parameter_types=parameter_types, return_types=return_types)


def signatures(func: Any, bound: bool, use_overloads: bool = True) -> list[Signature]:
    """
    One Signature per ``@typing.overload`` variant of `func`, or the
    function's own signature when it has none.
    """
    variants = typing.get_overloads(_unwrap(func)) if use_overloads else []
    if not variants:
        variants = [func]
    result = []
    for variant in variants:
        sig = signature_of(variant, bound)
        if sig is not None:
            result.append(sig)
    return result


# ── Enumeration (used by listings, not by lookup) ─────────────────────────────


def members(cls: type) -> Iterator[DeclaredMember]:
    """Every non-public member declared on `cls` and its bases, most-derived first."""
    for owner in cls.__mro__:
        if owner is object:
            break
        seen: set[str] = set()
        names = list(owner.__dict__) + list(_own_annotations(owner)) + list(_slots(owner))
        for name in names:
            if name in seen or not is_non_public(name):
                continue
            seen.add(name)
            # `_count: int = 2` is both a class-level value and an instance field
            for found in (
                declared_callable(owner, name, False),
                declared_callable(owner, name, True),
                declared_property(owner, name, False),
                declared_field(owner, name, True),
                declared_field(owner, name, False),
            ):
                if found is not None:
                    yield found
        for name in type(owner).__dict__:
            if is_non_public(name):
                prop = declared_property(owner, name, True)
                if prop is not None:
                    yield prop
