"""InstanceAccessor — non-public member access bound to one object."""

from __future__ import annotations

from typing import Any, Optional

from privy.exceptions import InvalidArgumentError
from privy.resolver import MemberResolver

from .type_accessor import TypeAccessor

__all__ = ["InstanceAccessor"]


class InstanceAccessor:
    """
    Wrap `instance` so its private members read like ordinary calls::

        box = InstanceAccessor(Box())
        box.set_field("_count", 5)
        assert box.invoke("_touch", "hi", returns=str) == "hi"

    Lookups run against `as_type` when given (a base class of the
    instance), otherwise against ``type(instance)``.
    """

    def __init__(
        self,
        instance: Any,
        as_type: Optional[type] = None,
        resolver: Optional[MemberResolver] = None,
    ) -> None:
        if instance is None:
            raise InvalidArgumentError("instance")
        self._instance = instance
        self._types = TypeAccessor(as_type or type(instance), resolver)

    @classmethod
    def for_type(cls, target: type, resolver: Optional[MemberResolver] = None) -> TypeAccessor:
        """Static-only access for classes that are never instantiated."""
        return TypeAccessor(target, resolver)

    @property
    def instance(self) -> Any:
        return self._instance

    @property
    def type(self) -> type:
        return self._types.type

    def __repr__(self) -> str:
        return f"InstanceAccessor({self._instance!r})"

    # ── Instance members ──────────────────────────────────────────────────

    def get_field(self, name: str, returns: Any = None) -> Any:
        return self._types.get_field(self._instance, name, returns)

    def set_field(self, name: str, value: Any) -> None:
        self._types.set_field(self._instance, name, value)

    def get_property(self, name: str, *index: Any, returns: Any = None) -> Any:
        return self._types.get_property(self._instance, name, *index, returns=returns)

    def set_property(self, name: str, value: Any) -> None:
        self._types.set_property(self._instance, name, value)

    def invoke(self, name: str, *args: Any, returns: Any = None) -> Any:
        return self._types.invoke(self._instance, name, *args, returns=returns)

    # ── Static members of the wrapped type ────────────────────────────────

    def get_static_field(self, name: str, returns: Any = None) -> Any:
        return self._types.get_static_field(name, returns)

    def set_static_field(self, name: str, value: Any) -> None:
        self._types.set_static_field(name, value)

    def invoke_static(self, name: str, *args: Any, returns: Any = None) -> Any:
        return self._types.invoke_static(name, *args, returns=returns)
