"""
TypeAccessor — read, write and call the non-public members of one class.

Works for classes used purely as namespaces (only static members) as well
as for instances handed in per call.  The module-level helpers
(get_static_field, invoke_static, construct, …) wrap a throwaway
TypeAccessor for one-off use in tests::

    from privy import get_static_field, invoke_static

    assert get_static_field(Settings, "_cache_size") == 128
    invoke_static(Settings, "_reset")
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from privy.exceptions import InvalidArgumentError, MemberNotFoundError
from privy.resolver import MemberHandle, MemberResolver, runtime_types

__all__ = [
    "TypeAccessor",
    "get_static_field",
    "set_static_field",
    "get_static_property",
    "invoke_static",
    "construct",
]

logger = logging.getLogger(__name__)

_DEFAULT_RESOLVER = MemberResolver()


def _index(value: Any, index_args: tuple) -> Any:
    if not index_args:
        return value
    key = index_args[0] if len(index_args) == 1 else index_args
    return value[key]


class TypeAccessor:
    """
    Non-public member access for `cls`.

    Every operation resolves its member afresh; nothing is cached between
    calls.
    """

    def __init__(self, cls: type, resolver: Optional[MemberResolver] = None) -> None:
        if cls is None:
            raise InvalidArgumentError("cls")
        self._cls = cls
        self._resolver = resolver or _DEFAULT_RESOLVER

    @property
    def type(self) -> type:
        return self._cls

    @property
    def resolver(self) -> MemberResolver:
        return self._resolver

    def __repr__(self) -> str:
        return f"TypeAccessor({self._cls.__qualname__})"

    # ── Static members ────────────────────────────────────────────────────

    def get_static_field(self, name: str, returns: Any = None) -> Any:
        handle = self._resolver.resolve_field(self._cls, name, returns, is_static=True)
        return getattr(handle.owner, handle.attr_name)

    def set_static_field(self, name: str, value: Any) -> None:
        value_type = None if value is None else type(value)
        self._resolver.set_field(self._cls, name, value_type, value, None)

    def get_static_property(self, name: str, *index: Any, returns: Any = None) -> Any:
        """Read a class-level property (a property defined on the metaclass)."""
        handle = self._resolver.resolve_property(
            self._cls, name, returns, is_static=True, index_args=index
        )
        return self._read_property(handle, self._cls)

    def set_static_property(self, name: str, value: Any) -> None:
        value_type = None if value is None else type(value)
        self._resolver.set_property(self._cls, name, value_type, value, None)

    def invoke_static(self, name: str, *args: Any, returns: Any = None) -> Any:
        """
        Call the static or class method `name` with `args`.

        `returns` names the expected return type; overloads whose declared
        return type is incompatible are ignored.
        """
        handle = self._resolver.resolve_method(
            self._cls, name, runtime_types(args), returns, is_static=True
        )
        logger.debug("Invoking %s", handle)
        return handle.member.__get__(None, self._cls)(*args)

    def construct(self, *args: Any) -> Any:
        """
        Build an instance through the ``__init__`` overload matching `args`.

        The instance is allocated with ``__new__`` and initialised directly,
        so a metaclass ``__call__`` that forbids instantiation is bypassed.
        """
        handle = self._resolver.resolve_constructor(self._cls, runtime_types(args))
        new = self._cls.__new__
        if new is object.__new__:
            instance = new(self._cls)
        else:
            instance = new(self._cls, *args)
        handle.member(instance, *args)
        logger.debug("Constructed %s via %s", self._cls.__qualname__, handle)
        return instance

    # ── Instance members ──────────────────────────────────────────────────

    def get_field(self, instance: Any, name: str, returns: Any = None) -> Any:
        self._check_instance(instance)
        handle = self._resolver.resolve_field(
            self._cls, name, returns, is_static=False, instance=instance
        )
        try:
            return getattr(instance, handle.attr_name)
        except AttributeError:
            # declared by annotation but never assigned
            raise MemberNotFoundError(name, self._cls) from None

    def set_field(self, instance: Any, name: str, value: Any) -> None:
        self._check_instance(instance)
        value_type = None if value is None else type(value)
        self._resolver.set_field(self._cls, name, value_type, value, instance)

    def get_property(self, instance: Any, name: str, *index: Any, returns: Any = None) -> Any:
        self._check_instance(instance)
        handle = self._resolver.resolve_property(
            self._cls, name, returns, is_static=False, index_args=index
        )
        return self._read_property(handle, instance)

    def set_property(self, instance: Any, name: str, value: Any) -> None:
        self._check_instance(instance)
        value_type = None if value is None else type(value)
        self._resolver.set_property(self._cls, name, value_type, value, instance)

    def invoke(self, instance: Any, name: str, *args: Any, returns: Any = None) -> Any:
        self._check_instance(instance)
        handle = self._resolver.resolve_method(
            self._cls, name, runtime_types(args), returns, is_static=False
        )
        logger.debug("Invoking %s", handle)
        return handle.member.__get__(instance, type(instance))(*args)

    # ── Internal helpers ──────────────────────────────────────────────────

    @staticmethod
    def _check_instance(instance: Any) -> None:
        if instance is None:
            raise InvalidArgumentError("instance")

    @staticmethod
    def _read_property(handle: MemberHandle, target: Any) -> Any:
        value = handle.member.__get__(target, type(target))
        return _index(value, handle.index_args)


# ── One-off helpers ───────────────────────────────────────────────────────────


def get_static_field(cls: type, name: str, returns: Any = None) -> Any:
    """Value of the non-public class-level field `name` on `cls` or a base."""
    return TypeAccessor(cls).get_static_field(name, returns)


def set_static_field(cls: type, name: str, value: Any) -> None:
    """Assign the non-public class-level field `name` on its declaring class."""
    TypeAccessor(cls).set_static_field(name, value)


def get_static_property(cls: type, name: str, *index: Any, returns: Any = None) -> Any:
    return TypeAccessor(cls).get_static_property(name, *index, returns=returns)


def invoke_static(cls: type, name: str, *args: Any, returns: Any = None) -> Any:
    """Call the non-public static/class method `name` of `cls`."""
    return TypeAccessor(cls).invoke_static(name, *args, returns=returns)


def construct(cls: type, *args: Any) -> Any:
    """Instantiate `cls` through the ``__init__`` overload matching `args`."""
    return TypeAccessor(cls).construct(*args)
