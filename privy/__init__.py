"""
privy — reach the private members of a class from unit tests.

    from privy import InstanceAccessor, construct, get_static_field

    box = InstanceAccessor(construct(Box, "seed"))
    assert box.get_field("_count", returns=int) == 2
    assert box.invoke("_touch", "hi") == "hi"

Members are found by name and by the runtime types of the arguments;
see privy.resolver for the lookup rules.
"""

from .accessor import (
    InstanceAccessor,
    TypeAccessor,
    construct,
    get_static_field,
    get_static_property,
    invoke_static,
    set_static_field,
)
from .exceptions import (
    AmbiguousMatchError,
    ConstructorNotFoundError,
    InvalidArgumentError,
    MemberNotFoundError,
    MethodNotFoundError,
    PrivyBaseError,
)
from .resolver import MemberHandle, MemberKind, MemberQuery, MemberResolver, ResolverConfig

__all__ = [
    "InstanceAccessor",
    "TypeAccessor",
    "construct",
    "get_static_field",
    "get_static_property",
    "invoke_static",
    "set_static_field",
    "AmbiguousMatchError",
    "ConstructorNotFoundError",
    "InvalidArgumentError",
    "MemberNotFoundError",
    "MethodNotFoundError",
    "PrivyBaseError",
    "MemberHandle",
    "MemberKind",
    "MemberQuery",
    "MemberResolver",
    "ResolverConfig",
]

__version__ = "0.1.0"
