"""
Unit tests for privy/resolver/introspection.py — the metadata provider.

No traversal happens here except in members(); every declared_* helper
inspects exactly one class.
"""

from typing import ClassVar, Optional, overload

import pytest

from privy.resolver.introspection import (
    declared_callable,
    declared_field,
    declared_property,
    is_non_public,
    mangle,
    members,
    signature_of,
    signatures,
)
from privy.resolver.models import MemberKind


# ── Sample types ──────────────────────────────────────────────────────────────

class _Meta(type):
    @property
    def _population(cls) -> int:
        return 7


class Specimen(metaclass=_Meta):
    _weight: float = 1.5
    _tag: ClassVar[str] = "specimen"
    _loose = None
    __hidden: int = 3

    def __init__(self) -> None:
        self._weight = 2.0

    def _measure(self, unit: str, precision: int = 2) -> float:
        return self._weight

    @overload
    def _scale(self, factor: int) -> int: ...
    @overload
    def _scale(self, factor: float) -> float: ...
    def _scale(self, factor):
        return factor

    @staticmethod
    def _unit() -> str:
        return "kg"

    @classmethod
    def _build(cls, weight: float) -> "Specimen":
        return cls()

    @property
    def _label(self) -> Optional[str]:
        return "s"

    def _keyword_only(self, *, strict: bool) -> None:
        pass

    def public(self) -> None:
        pass


class SlottedSpecimen:
    __slots__ = ("_x",)


# ── Naming ────────────────────────────────────────────────────────────────────

class TestNaming:
    @pytest.mark.parametrize("name", ["_x", "__x", "_Box__x"])
    def test_non_public_names(self, name):
        assert is_non_public(name)

    @pytest.mark.parametrize("name", ["x", "__init__", "", "__len__"])
    def test_public_and_dunder_names(self, name):
        assert not is_non_public(name)

    def test_mangle_private_name(self):
        assert mangle("__hidden", Specimen) == "_Specimen__hidden"

    def test_mangle_strips_leading_underscores_of_class(self):
        assert mangle("__x", _Meta) == "_Meta__x"

    def test_single_underscore_is_not_mangled(self):
        assert mangle("_weight", Specimen) == "_weight"

    def test_dunder_is_not_mangled(self):
        assert mangle("__init__", Specimen) == "__init__"


# ── declared_field ────────────────────────────────────────────────────────────

class TestDeclaredField:
    def test_annotated_class_value_is_static_field(self):
        member = declared_field(Specimen, "_weight", is_static=True)
        assert member is not None
        assert member.declared_type == (float,)

    def test_annotated_class_value_is_also_instance_field(self):
        member = declared_field(Specimen, "_weight", is_static=False)
        assert member is not None
        assert member.kind is MemberKind.FIELD

    def test_classvar_is_static_only(self):
        assert declared_field(Specimen, "_tag", is_static=True).declared_type == (str,)
        assert declared_field(Specimen, "_tag", is_static=False) is None

    def test_unannotated_static_field_has_no_declared_type(self):
        member = declared_field(Specimen, "_loose", is_static=True)
        assert member is not None
        assert member.declared_type is None

    def test_mangled_name(self):
        assert declared_field(Specimen, "_Specimen__hidden", is_static=True) is not None

    def test_methods_are_not_fields(self):
        assert declared_field(Specimen, "_measure", is_static=True) is None
        assert declared_field(Specimen, "_label", is_static=True) is None

    def test_slots_are_instance_fields(self):
        assert declared_field(SlottedSpecimen, "_x", is_static=False) is not None
        assert declared_field(SlottedSpecimen, "_x", is_static=True) is None


# ── declared_property ─────────────────────────────────────────────────────────

class TestDeclaredProperty:
    def test_instance_property(self):
        member = declared_property(Specimen, "_label", is_static=False)
        assert member.kind is MemberKind.PROPERTY
        assert member.declared_type == (str, type(None))

    def test_static_property_lives_on_metaclass(self):
        member = declared_property(Specimen, "_population", is_static=True)
        assert member is not None
        assert member.declared_type == (int,)

    def test_scope_mismatch(self):
        assert declared_property(Specimen, "_label", is_static=True) is None
        assert declared_property(Specimen, "_population", is_static=False) is None


# ── declared_callable ─────────────────────────────────────────────────────────

class TestDeclaredCallable:
    def test_instance_method(self):
        assert declared_callable(Specimen, "_measure", is_static=False) is not None

    def test_instance_method_is_not_static(self):
        assert declared_callable(Specimen, "_measure", is_static=True) is None

    def test_staticmethod_and_classmethod_are_static(self):
        assert declared_callable(Specimen, "_unit", is_static=True) is not None
        assert declared_callable(Specimen, "_build", is_static=True) is not None
        assert declared_callable(Specimen, "_unit", is_static=False) is None

    def test_data_is_not_callable(self):
        assert declared_callable(Specimen, "_loose", is_static=True) is None
        assert declared_callable(Specimen, "_loose", is_static=False) is None


# ── Signatures ────────────────────────────────────────────────────────────────

class TestSignatures:
    def test_bound_signature_drops_self(self):
        sig = signature_of(Specimen.__dict__["_measure"], bound=True)
        assert sig.parameter_types == ((str,), (int,))
        assert sig.return_types == (float,)

    def test_staticmethod_keeps_all_parameters(self):
        sig = signature_of(Specimen.__dict__["_unit"], bound=False)
        assert sig.arity == 0
        assert sig.return_types == (str,)

    def test_classmethod_drops_cls(self):
        sig = signature_of(Specimen.__dict__["_build"], bound=True)
        assert sig.parameter_types == ((float,),)
        assert sig.return_types == (Specimen,)

    def test_unannotated_parameters_accept_object(self):
        def _f(self, value):
            return value

        sig = signature_of(_f, bound=True)
        assert sig.parameter_types == ((object,),)
        assert sig.return_types is None

    def test_required_keyword_only_is_not_positionally_callable(self):
        assert signature_of(Specimen.__dict__["_keyword_only"], bound=True) is None

    def test_overloads_become_candidates(self):
        sigs = signatures(Specimen.__dict__["_scale"], bound=True)
        assert [s.parameter_types for s in sigs] == [((int,),), ((float,),)]

    def test_overloads_can_be_ignored(self):
        sigs = signatures(Specimen.__dict__["_scale"], bound=True, use_overloads=False)
        assert len(sigs) == 1
        assert sigs[0].parameter_types == ((object,),)


# ── members ───────────────────────────────────────────────────────────────────

class TestMembers:
    def test_lists_non_public_members_only(self):
        found = {(m.attr_name, m.kind, m.is_static) for m in members(Specimen)}

        assert ("_measure", MemberKind.METHOD, False) in found
        assert ("_unit", MemberKind.METHOD, True) in found
        assert ("_label", MemberKind.PROPERTY, False) in found
        assert ("_population", MemberKind.PROPERTY, True) in found
        assert ("_weight", MemberKind.FIELD, True) in found
        assert ("_weight", MemberKind.FIELD, False) in found
        assert ("_Specimen__hidden", MemberKind.FIELD, True) in found
        assert not any(name == "public" for name, _, _ in found)
        assert not any(name == "__init__" for name, _, _ in found)

    def test_includes_base_class_members(self):
        class Sub(Specimen):
            def _extra(self) -> None:
                pass

        owners = {m.owner for m in members(Sub)}
        assert owners == {Sub, Specimen}
