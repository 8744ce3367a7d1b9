"""
MemberResolver — locate exactly one non-public member of a class.

Lookup rules
────────────
  field        walk the MRO upward until a class declares the name
  property     only the target class itself is queried (no traversal)
  method       first class in the MRO declaring the name; its overloads
               are the candidates
  constructor  ``__init__`` declared directly on the target class

Overload selection is strict: every candidate whose positional parameters
accept the argument types is kept, and anything other than exactly one
survivor is an error.  There is no most-specific ranking, so a None
argument that two overloads both accept is reported as ambiguous.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from privy.exceptions import (
    AmbiguousMatchError,
    ConstructorNotFoundError,
    InvalidArgumentError,
    MemberNotFoundError,
    MethodNotFoundError,
)

from . import introspection
from .compat import accepts, annotation_types, compatible
from .models import MemberHandle, MemberKind, MemberQuery, Signature

__all__ = ["ResolverConfig", "MemberResolver", "match_parameters"]

logger = logging.getLogger(__name__)


# ── Configuration ─────────────────────────────────────────────────────────────

@dataclass
class ResolverConfig:
    """Runtime configuration for MemberResolver."""
    use_overloads:        bool = True    # consult typing.get_overloads()
    instance_dict_fields: bool = True    # fall back to vars(instance) for fields
    mangle_private:       bool = True    # look up __name as _Class__name


# ── Parameter matching ────────────────────────────────────────────────────────


def match_parameters(signature: Signature, argument_types: Sequence[Optional[type]]) -> bool:
    """
    Positional match: equal counts, and at each position either a None
    argument type or an argument type compatible with the parameter.
    """
    if signature.arity != len(argument_types):
        return False
    for expected, actual in zip(signature.parameter_types, argument_types):
        if actual is None:
            continue
        if not any(compatible(actual, e) for e in expected):
            return False
    return True


def _require(value: Any, argument: str) -> None:
    if value is None or (isinstance(value, str) and not value):
        raise InvalidArgumentError(argument)


class MemberResolver:
    """
    Resolve MemberQuery objects against live class metadata.

    Stateless apart from its config; safe to share between threads.

    Usage::

        resolver = MemberResolver()
        handle = resolver.resolve_method(Box, "_touch", (str,))
        print(handle)  # method Box._touch(str) -> str
    """

    def __init__(self, config: Optional[ResolverConfig] = None) -> None:
        self._config = config or ResolverConfig()

    @property
    def config(self) -> ResolverConfig:
        return self._config

    # ── Dispatch ──────────────────────────────────────────────────────────

    def resolve(self, query: MemberQuery) -> MemberHandle:
        """Resolve `query` with the operation matching its kind."""
        try:
            kind = MemberKind(query.kind)
        except ValueError:
            raise InvalidArgumentError("kind") from None

        if kind is MemberKind.FIELD:
            return self.resolve_field(
                query.target_type, query.name, query.expected_type,
                query.is_static, query.instance,
            )
        if kind is MemberKind.PROPERTY:
            return self.resolve_property(
                query.target_type, query.name, query.expected_type,
                query.is_static, query.index_args,
            )
        if kind is MemberKind.METHOD:
            return self.resolve_method(
                query.target_type, query.name, query.argument_types,
                query.expected_type, query.is_static,
            )
        if kind is MemberKind.CONSTRUCTOR:
            return self.resolve_constructor(query.target_type, query.argument_types)
        raise InvalidArgumentError("kind")

    # ── Fields ────────────────────────────────────────────────────────────

    def resolve_field(
        self,
        target_type: type,
        name: str,
        expected_type: Any = None,
        is_static: bool = False,
        instance: Any = None,
    ) -> MemberHandle:
        """
        Find the field `name` on `target_type` or the nearest base declaring it.

        The declared type must be compatible with `expected_type` (None skips
        the check).  An unannotated field is checked against the runtime type
        of its current value instead.

        Raises:
            InvalidArgumentError: target_type or name missing.
            MemberNotFoundError:  no field, or an incompatible one.
        """
        handle = self._find_field(target_type, name, is_static, instance)
        if handle is None:
            raise MemberNotFoundError(name, target_type)

        if expected_type is not None:
            field_types = handle.declared_type
            if field_types is None:
                value = self._peek(handle, instance)
                field_types = None if value is None else (type(value),)
            if field_types is not None and not accepts(field_types, annotation_types(expected_type)):
                logger.debug("Field %s is not compatible with %r", handle, expected_type)
                raise MemberNotFoundError(name, target_type)

        logger.debug("Resolved %s", handle)
        return handle

    def set_field(
        self,
        target_type: type,
        name: str,
        value_type: Optional[type],
        value: Any,
        instance: Any = None,
    ) -> MemberHandle:
        """
        Resolve the field `name` and assign `value` to it.

        Assigns on `instance`, or on the declaring class when `instance` is
        None (static scope).  `value_type` must be compatible with the
        field's declared type; None (a None value) is always accepted.

        Raises:
            InvalidArgumentError: target_type or name missing.
            MemberNotFoundError:  no field, or value_type incompatible.
        """
        is_static = instance is None
        handle = self._find_field(target_type, name, is_static, instance)
        if handle is None:
            raise MemberNotFoundError(name, target_type)

        field_types = handle.declared_type
        if value_type is not None and field_types is not None:
            if value_type not in field_types and not accepts((value_type,), field_types):
                logger.debug("Cannot assign %r to %s", value_type, handle)
                raise MemberNotFoundError(name, target_type)

        target = handle.owner if is_static else instance
        setattr(target, handle.attr_name, value)
        logger.debug("Assigned %s", handle)
        return handle

    def _find_field(
        self, target_type: type, name: str, is_static: bool, instance: Any
    ) -> Optional[MemberHandle]:
        _require(target_type, "target_type")
        _require(name, "name")
        if not introspection.is_non_public(name):
            logger.debug("Ignoring public field name %r", name)
            return None

        for owner in target_type.__mro__:
            if owner is object:
                break
            attr_name = self._attr_name(name, owner)
            declared = introspection.declared_field(owner, attr_name, is_static)
            if declared is not None:
                return self._handle(declared, name)

        if is_static or instance is None or not self._config.instance_dict_fields:
            return None

        storage = getattr(instance, "__dict__", None) or {}
        for owner in type(instance).__mro__:
            attr_name = self._attr_name(name, owner)
            if attr_name in storage:
                return MemberHandle(
                    kind=MemberKind.FIELD,
                    name=name,
                    attr_name=attr_name,
                    owner=owner,
                    from_instance=True,
                )
        return None

    @staticmethod
    def _peek(handle: MemberHandle, instance: Any) -> Any:
        if handle.is_static:
            return getattr(handle.owner, handle.attr_name, None)
        # an instance field has no value to check until there is an instance
        if instance is None:
            return None
        return getattr(instance, handle.attr_name, None)

    # ── Properties ────────────────────────────────────────────────────────

    def resolve_property(
        self,
        target_type: type,
        name: str,
        expected_type: Any = None,
        is_static: bool = False,
        index_args: Sequence[Any] = (),
    ) -> MemberHandle:
        """
        Find the property `name` declared on `target_type` itself.

        Base classes are not searched.  `index_args` travel on the handle
        and are applied when the value is read; they play no part in
        selection.

        Raises:
            InvalidArgumentError: target_type or name missing.
            MemberNotFoundError:  no property, or an incompatible one.
        """
        _require(target_type, "target_type")
        _require(name, "name")
        if not introspection.is_non_public(name):
            raise MemberNotFoundError(name, target_type)

        attr_name = self._attr_name(name, target_type)
        declared = introspection.declared_property(target_type, attr_name, is_static)
        if declared is None:
            raise MemberNotFoundError(name, target_type)

        if expected_type is not None and declared.declared_type is not None:
            if not accepts(declared.declared_type, annotation_types(expected_type)):
                logger.debug("Property %s is not compatible with %r", declared, expected_type)
                raise MemberNotFoundError(name, target_type)

        handle = self._handle(declared, name, index_args=tuple(index_args or ()))
        logger.debug("Resolved %s", handle)
        return handle

    def set_property(
        self,
        target_type: type,
        name: str,
        value_type: Optional[type],
        value: Any,
        instance: Any = None,
    ) -> MemberHandle:
        """
        Resolve the property `name` and call its setter with `value`.

        Static scope (no `instance`) sets the metaclass property on
        `target_type`.

        Raises:
            InvalidArgumentError: target_type or name missing.
            MemberNotFoundError:  no property, no setter, or value_type incompatible.
        """
        is_static = instance is None
        handle = self.resolve_property(target_type, name, None, is_static)
        prop = handle.member
        if prop.fset is None:
            logger.debug("Property %s is read-only", handle)
            raise MemberNotFoundError(name, target_type)

        field_types = handle.declared_type
        if value_type is not None and field_types is not None:
            if value_type not in field_types and not accepts((value_type,), field_types):
                logger.debug("Cannot assign %r to %s", value_type, handle)
                raise MemberNotFoundError(name, target_type)

        prop.__set__(target_type if is_static else instance, value)
        logger.debug("Assigned %s", handle)
        return handle

    # ── Methods ───────────────────────────────────────────────────────────

    def resolve_method(
        self,
        target_type: type,
        name: str,
        argument_types: Sequence[Optional[type]] = (),
        return_type: Any = None,
        is_static: bool = False,
    ) -> MemberHandle:
        """
        Overload resolution for the non-public method `name`.

        Candidates come from the first class in the MRO that declares the
        name at the requested scope.  Candidates whose declared return type
        is incompatible with `return_type` are dropped before the ambiguity
        check; `return_type=None` (no value expected) skips that filter.

        Raises:
            InvalidArgumentError: target_type or name missing.
            MethodNotFoundError:  no candidate matches.
            AmbiguousMatchError:  more than one candidate matches.
        """
        _require(target_type, "target_type")
        _require(name, "name")
        argument_types = tuple(argument_types or ())

        declared = None
        if introspection.is_non_public(name):
            for owner in target_type.__mro__:
                if owner is object:
                    break
                attr_name = self._attr_name(name, owner)
                declared = introspection.declared_callable(owner, attr_name, is_static)
                if declared is not None:
                    break
        if declared is None:
            raise MethodNotFoundError(name, argument_types, target_type)

        bound = not isinstance(declared.member, staticmethod)
        candidates = introspection.signatures(
            declared.member, bound, self._config.use_overloads
        )
        matches = self._select(candidates, argument_types)

        if return_type is not None:
            expected = annotation_types(return_type)
            matches = [
                sig for sig in matches
                if sig.return_types is None or accepts(sig.return_types, expected)
            ]

        if not matches:
            raise MethodNotFoundError(name, argument_types, target_type)
        if len(matches) > 1:
            raise AmbiguousMatchError(name, argument_types, matches)

        handle = self._handle(declared, name, signature=matches[0])
        logger.debug("Resolved %s", handle)
        return handle

    # ── Constructors ──────────────────────────────────────────────────────

    def resolve_constructor(
        self,
        target_type: type,
        argument_types: Sequence[Optional[type]] = (),
    ) -> MemberHandle:
        """
        Overload resolution over the ``__init__`` declared on `target_type`.

        Inherited initialisers are not considered.

        Raises:
            InvalidArgumentError:     target_type missing.
            ConstructorNotFoundError: no candidate matches.
            AmbiguousMatchError:      more than one candidate matches.
        """
        _require(target_type, "target_type")
        argument_types = tuple(argument_types or ())

        init = target_type.__dict__.get("__init__")
        candidates = []
        if init is not None and callable(init):
            candidates = introspection.signatures(init, True, self._config.use_overloads)
        matches = self._select(candidates, argument_types)

        if not matches:
            raise ConstructorNotFoundError(target_type, argument_types)
        if len(matches) > 1:
            raise AmbiguousMatchError(
                f"{target_type.__qualname__}.__init__", argument_types, matches
            )

        handle = MemberHandle(
            kind=MemberKind.CONSTRUCTOR,
            name="__init__",
            attr_name="__init__",
            owner=target_type,
            signature=matches[0],
            member=init,
        )
        logger.debug("Resolved %s", handle)
        return handle

    # ── Internal helpers ──────────────────────────────────────────────────

    @staticmethod
    def _select(candidates: list[Signature], argument_types: tuple) -> list[Signature]:
        matches = [sig for sig in candidates if match_parameters(sig, argument_types)]
        logger.debug(
            "%d of %d candidates match %r", len(matches), len(candidates), argument_types
        )
        return matches

    def _attr_name(self, name: str, owner: type) -> str:
        if self._config.mangle_private:
            return introspection.mangle(name, owner)
        return name

    @staticmethod
    def _handle(declared, name: str, **extra) -> MemberHandle:
        return MemberHandle(
            kind=declared.kind,
            name=name,
            attr_name=declared.attr_name,
            owner=declared.owner,
            is_static=declared.is_static,
            declared_type=declared.declared_type,
            member=declared.member,
            **extra,
        )
