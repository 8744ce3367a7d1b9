"""
Data models for the resolver module.

Key concepts
────────────
MemberKind   — which sort of member a query targets
MemberQuery  — one immutable lookup request
Signature    — positional parameter types + return type of one candidate
MemberHandle — the single member a query resolved to
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

__all__ = [
    "MemberKind",
    "MemberQuery",
    "Signature",
    "MemberHandle",
]


class MemberKind(str, Enum):
    FIELD       = "field"
    PROPERTY    = "property"
    CONSTRUCTOR = "constructor"
    METHOD      = "method"


@dataclass(frozen=True)
class MemberQuery:
    """
    A lookup request handed to MemberResolver.resolve().

    `argument_types` holds one entry per positional argument; None means
    "no runtime type" and matches any parameter.  `expected_type` is the
    field/property type or method return type the caller wants, None to
    skip the check.
    """
    target_type:    type
    name:           str
    kind:           MemberKind
    is_static:      bool = False
    argument_types: tuple = ()
    expected_type:  Any = None
    index_args:     tuple = ()
    instance:       Any = field(default=None, compare=False)


@dataclass(frozen=True)
class Signature:
    """
    Positional view of one callable candidate.

    `parameter_types` holds a tuple of accepted classes per parameter
    (see compat.annotation_types).  `return_types` is None when the
    callable has no return annotation.
    """
    func:            Any
    parameter_types: tuple = ()
    return_types:    Optional[tuple] = None

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def __str__(self) -> str:
        params = ", ".join(_format_types(p) for p in self.parameter_types)
        ret = _format_types(self.return_types) if self.return_types is not None else "?"
        return f"({params}) -> {ret}"


@dataclass(frozen=True)
class MemberHandle:
    """
    The member a query resolved to.

    `attr_name` is the attribute name actually stored on `owner`
    (after private-name mangling).  `member` is the raw object from the
    owner's namespace: a function, staticmethod, classmethod or property,
    or None for plain data fields.
    """
    kind:          MemberKind
    name:          str
    attr_name:     str
    owner:         type
    is_static:     bool = False
    declared_type: Optional[tuple] = None    # None = unannotated
    signature:     Optional[Signature] = None
    member:        Any = None
    index_args:    tuple = ()
    from_instance: bool = False              # found in vars(instance), not declared

    def __str__(self) -> str:
        scope = "static " if self.is_static else ""
        text = f"{scope}{self.kind.value} {self.owner.__qualname__}.{self.attr_name}"
        if self.signature is not None:
            return text + str(self.signature)
        if self.declared_type is not None:
            return f"{text}: {_format_types(self.declared_type)}"
        return text


def _format_types(types) -> str:
    names = [getattr(t, "__qualname__", repr(t)) for t in types]
    return " | ".join(names) if names else "object"
