"""
Member resolution — find the one non-public field, property, method or
constructor a test asked for, by name and runtime argument types.

The resolver only locates members; reading, writing and calling them is
done by privy.accessor using the MemberHandle it returns.
"""

from .compat import accepts, annotation_types, compatible, implements, is_subclass, runtime_types
from .member_resolver import MemberResolver, ResolverConfig, match_parameters
from .models import MemberHandle, MemberKind, MemberQuery, Signature

__all__ = [
    "MemberResolver",
    "ResolverConfig",
    "match_parameters",
    "MemberHandle",
    "MemberKind",
    "MemberQuery",
    "Signature",
    "accepts",
    "annotation_types",
    "compatible",
    "implements",
    "is_subclass",
    "runtime_types",
]
