"""
Unit tests for privy/resolver/compat.py

Covers:
  • compatible / is_subclass / implements (ABC registration, __subclasshook__,
    runtime-checkable Protocols)
  • annotation_types flattening
  • runtime_types
"""

import abc
import collections.abc
from typing import Any, ClassVar, Optional, Protocol, TypeVar, Union, runtime_checkable

import pytest

from privy.exceptions import InvalidArgumentError
from privy.resolver.compat import (
    accepts,
    annotation_types,
    compatible,
    implements,
    is_subclass,
    runtime_types,
)


# ── Sample types ──────────────────────────────────────────────────────────────

class Animal:
    pass


class Dog(Animal):
    pass


class Puppy(Dog):
    pass


class Measurable(abc.ABC):
    @abc.abstractmethod
    def measure(self) -> float: ...


class Ruler:
    def measure(self) -> float:
        return 30.0


Measurable.register(Ruler)


class Bag:
    def __len__(self) -> int:
        return 0


@runtime_checkable
class Closeable(Protocol):
    def close(self) -> None: ...


class Greeter(Protocol):
    def greet(self) -> str: ...


class FileHandle:
    def close(self) -> None:
        pass


NumberT = TypeVar("NumberT", int, float)
AnimalT = TypeVar("AnimalT", bound=Animal)
AnyT = TypeVar("AnyT")


# ── compatible ────────────────────────────────────────────────────────────────

class TestCompatible:
    def test_same_type(self):
        assert compatible(Dog, Dog)

    def test_direct_subclass(self):
        assert compatible(Dog, Animal)

    def test_transitive_subclass(self):
        assert compatible(Puppy, Animal)

    def test_superclass_is_not_compatible_with_subclass(self):
        assert not compatible(Animal, Dog)

    def test_everything_is_compatible_with_object(self):
        assert compatible(Puppy, object)
        assert compatible(type(None), object)

    def test_object_is_not_compatible_with_concrete_type(self):
        assert not compatible(object, str)

    def test_unrelated_types(self):
        assert not compatible(str, int)

    def test_bool_is_an_int(self):
        assert compatible(bool, int)

    def test_registered_abc(self):
        assert compatible(Ruler, Measurable)

    def test_subclasshook_abc(self):
        assert compatible(Bag, collections.abc.Sized)

    def test_runtime_checkable_protocol(self):
        assert compatible(FileHandle, Closeable)

    def test_none_is_never_compatible(self):
        assert not compatible(None, Animal)
        assert not compatible(Animal, None)


class TestIsSubclass:
    def test_proper_ancestor(self):
        assert is_subclass(Puppy, Animal)

    def test_type_is_not_its_own_subclass(self):
        assert not is_subclass(Dog, Dog)

    def test_registered_abc_is_not_a_nominal_base(self):
        assert not is_subclass(Ruler, Measurable)


class TestImplements:
    def test_registered_abc(self):
        assert implements(Ruler, Measurable)

    def test_nominal_base_is_not_an_implementation(self):
        class Tape(Measurable):
            def measure(self) -> float:
                return 1.0

        assert not implements(Tape, Measurable)

    def test_plain_class_is_never_implemented(self):
        assert not implements(Dog, Animal)

    def test_protocol_without_runtime_checkable_is_false(self):
        class Person:
            def greet(self) -> str:
                return "hi"

        assert not implements(Person, Greeter)

    def test_missing_protocol_method(self):
        assert not implements(Dog, Closeable)

    def test_none_raises(self):
        with pytest.raises(InvalidArgumentError):
            implements(None, Measurable)
        with pytest.raises(InvalidArgumentError):
            implements(Ruler, None)


# ── accepts ───────────────────────────────────────────────────────────────────

class TestAccepts:
    def test_any_pair_matches(self):
        assert accepts((int, type(None)), (str, int))

    def test_no_pair_matches(self):
        assert not accepts((str,), (int, float))


# ── annotation_types ──────────────────────────────────────────────────────────

class TestAnnotationTypes:
    def test_plain_class(self):
        assert annotation_types(int) == (int,)

    def test_any_and_object(self):
        assert annotation_types(Any) == (object,)
        assert annotation_types(object) == (object,)

    def test_none(self):
        assert annotation_types(None) == (type(None),)

    def test_optional(self):
        assert annotation_types(Optional[str]) == (str, type(None))

    def test_union_operator(self):
        assert annotation_types(int | str) == (int, str)

    def test_union_is_deduplicated(self):
        assert annotation_types(Union[int, Optional[int]]) == (int, type(None))

    def test_generic_reduces_to_origin(self):
        assert annotation_types(list[int]) == (list,)
        assert annotation_types(collections.abc.Sequence[str]) == (collections.abc.Sequence,)

    def test_classvar_unwraps(self):
        assert annotation_types(ClassVar[float]) == (float,)

    def test_forward_reference_string(self):
        assert annotation_types("Dog") == (object,)

    def test_typevar_constraints(self):
        assert annotation_types(NumberT) == (int, float)

    def test_typevar_bound(self):
        assert annotation_types(AnimalT) == (Animal,)

    def test_unconstrained_typevar(self):
        assert annotation_types(AnyT) == (object,)


# ── runtime_types ─────────────────────────────────────────────────────────────

class TestRuntimeTypes:
    def test_values_map_to_their_classes(self):
        assert runtime_types(["a", 1, Dog()]) == (str, int, Dog)

    def test_none_value_has_no_type(self):
        assert runtime_types([None, 2.0]) == (None, float)

    def test_none_sequence_is_empty(self):
        assert runtime_types(None) == ()
