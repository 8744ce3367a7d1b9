"""
CLI entry point for privy.

Usage
─────
  # List the non-public members of a class
  privy members mypkg.models:Box

  # Show which overload a call would resolve to
  privy resolve mypkg.models:Box _touch --arg str
  privy resolve mypkg.models:Box _touch --arg none --returns str
  privy resolve mypkg.models:Box _count --kind field --returns int
  privy resolve mypkg.models:Box __init__ --kind constructor --arg str

Subcommands are implemented as standalone functions (cmd_members,
cmd_resolve) so they can be unit-tested without invoking argparse.
"""

import argparse
import builtins
import importlib
import logging
import sys
from typing import Optional

from privy.exceptions import PrivyBaseError
from privy.resolver import MemberKind, MemberQuery, MemberResolver
from privy.resolver.introspection import members

__all__ = ["build_parser", "load_target", "parse_type", "cmd_members", "cmd_resolve", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: members | resolve
    """
    parser = argparse.ArgumentParser(
        prog="privy",
        description="Inspect and resolve non-public members of Python classes",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── members ───────────────────────────────────────────────────────────
    mem = sub.add_parser("members", help="List non-public members of a class")
    mem.add_argument(
        "target",
        metavar="MODULE:CLASS",
        help="Class to inspect, e.g. mypkg.models:Box",
    )

    # ── resolve ───────────────────────────────────────────────────────────
    res = sub.add_parser("resolve", help="Resolve one member by name and argument types")
    res.add_argument(
        "target",
        metavar="MODULE:CLASS",
        help="Class to search, e.g. mypkg.models:Box",
    )
    res.add_argument(
        "name",
        metavar="NAME",
        help="Member name, e.g. _touch or __secret",
    )
    res.add_argument(
        "--kind",
        choices=[k.value for k in MemberKind],
        default=MemberKind.METHOD.value,
        help="Member kind (default: method)",
    )
    res.add_argument(
        "--static",
        action="store_true",
        default=False,
        help="Search class-level (static) members",
    )
    res.add_argument(
        "--arg",
        action="append",
        default=[],
        dest="args",
        metavar="TYPE",
        help="Argument type, repeatable; 'none' for a None argument",
    )
    res.add_argument(
        "--returns",
        default=None,
        metavar="TYPE",
        help="Expected return / field type",
    )

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def load_target(spec: str) -> type:
    """
    Import `module:Qualname` (or `module.Name`) and return the class.

    Raises:
        ImportError:    module cannot be imported.
        AttributeError: the name does not exist in the module.
        TypeError:      the object found is not a class.
    """
    if ":" in spec:
        module_name, _, qualname = spec.partition(":")
    else:
        module_name, _, qualname = spec.rpartition(".")
    if not module_name or not qualname:
        raise ImportError(f"Expected MODULE:CLASS, got {spec!r}")

    obj = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise TypeError(f"{spec} is not a class")
    return obj


def parse_type(name: str) -> Optional[type]:
    """Map 'none' to None, builtin names to builtins, anything else via load_target."""
    if name.lower() == "none":
        return None
    builtin = getattr(builtins, name, None)
    if isinstance(builtin, type):
        return builtin
    return load_target(name)


# ── Command implementations ───────────────────────────────────────────────────


def cmd_members(target: type) -> int:
    """Print every non-public member of `target`; return how many were listed."""
    found = list(members(target))
    if not found:
        print(f"0 non-public members found on {target.__qualname__}.")
        return 0
    for member in found:
        scope = "static" if member.is_static else "instance"
        print(f"{member.kind.value:<12} {scope:<9} {member.owner.__qualname__}.{member.attr_name}")
    return len(found)


def cmd_resolve(
    target: type,
    name: str,
    kind: str = MemberKind.METHOD.value,
    is_static: bool = False,
    arg_types: Optional[list[str]] = None,
    returns: Optional[str] = None,
    resolver: Optional[MemberResolver] = None,
):
    """
    Resolve one member and print it.

    Returns:
        The MemberHandle that was found.

    Raises:
        PrivyBaseError subclasses from the resolver propagate to the caller.
    """
    query = MemberQuery(
        target_type=target,
        name=name,
        kind=MemberKind(kind),
        is_static=is_static,
        argument_types=tuple(parse_type(t) for t in (arg_types or [])),
        expected_type=parse_type(returns) if returns else None,
    )
    logger.debug("Resolving %s", query)
    handle = (resolver or MemberResolver()).resolve(query)
    print(handle)
    return handle


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        target = load_target(ns.target)
    except (ImportError, AttributeError, TypeError) as exc:
        logger.debug("could not load %s", ns.target, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if ns.subcommand == "members":
        cmd_members(target)
        return 0

    if ns.subcommand == "resolve":
        try:
            cmd_resolve(
                target=target,
                name=ns.name,
                kind=ns.kind,
                is_static=ns.static,
                arg_types=ns.args,
                returns=ns.returns,
            )
        except (PrivyBaseError, ImportError, AttributeError, TypeError) as exc:
            logger.debug("resolve failed", exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
