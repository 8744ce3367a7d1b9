"""
Project-wide custom exception hierarchy.
All modules raise subclasses of PrivyBaseError — never bare Exception.

Each error also derives from the builtin a caller would naturally expect
(ValueError, AttributeError, TypeError) so plain ``except`` clauses keep
working in test code that does not know about privy.
"""

__all__ = [
    "PrivyBaseError",
    "InvalidArgumentError",
    "MemberNotFoundError",
    "MethodNotFoundError",
    "ConstructorNotFoundError",
    "AmbiguousMatchError",
]


def _type_name(tp) -> str:
    if tp is None:
        return "None"
    return getattr(tp, "__qualname__", None) or repr(tp)


def _signature(types) -> str:
    return "(" + ", ".join(_type_name(t) for t in types) + ")"


class PrivyBaseError(Exception):
    """Root exception for all privy errors."""


# ── Arguments ─────────────────────────────────────────────────────────────────

class InvalidArgumentError(PrivyBaseError, ValueError):
    """Raised when a required identifier (class, member name) is None or empty."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"Argument {argument!r} must not be None or empty")
        self.argument = argument


# ── Lookup ────────────────────────────────────────────────────────────────────

class MemberNotFoundError(PrivyBaseError, AttributeError):
    """
    Raised when a non-public field or property does not exist at the
    requested scope, or exists with an incompatible type.
    """

    def __init__(self, name: str, target_type=None, message: str = "") -> None:
        if not message:
            where = f" on {_type_name(target_type)}" if target_type is not None else ""
            message = f"No non-public member {name!r}{where} matches the request"
        super().__init__(message)
        self.name = name
        self.target_type = target_type


class MethodNotFoundError(MemberNotFoundError):
    """Raised when no non-public method matches the name and argument types."""

    def __init__(self, name: str, argument_types, target_type=None) -> None:
        self.argument_types = tuple(argument_types)
        where = f" on {_type_name(target_type)}" if target_type is not None else ""
        super().__init__(
            name,
            target_type,
            f"Could not find method {name}{_signature(self.argument_types)}{where}",
        )


class ConstructorNotFoundError(PrivyBaseError, TypeError):
    """Raised when no constructor of the class accepts the argument types."""

    def __init__(self, target_type, argument_types) -> None:
        self.target_type = target_type
        self.argument_types = tuple(argument_types)
        super().__init__(
            f"Could not find a constructor {_type_name(target_type)}"
            f"{_signature(self.argument_types)}"
        )


class AmbiguousMatchError(PrivyBaseError, TypeError):
    """
    Raised when more than one overload matches the argument types.

    No tie-breaking is attempted: a None argument that cannot tell two
    overloads apart is always reported.
    """

    def __init__(self, name: str, argument_types, candidates=()) -> None:
        self.name = name
        self.argument_types = tuple(argument_types)
        self.candidates = tuple(candidates)
        super().__init__(
            f"{len(self.candidates)} overloads of {name} match "
            f"{_signature(self.argument_types)}"
        )
