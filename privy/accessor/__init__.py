from .instance_accessor import InstanceAccessor
from .type_accessor import (
    TypeAccessor,
    construct,
    get_static_field,
    get_static_property,
    invoke_static,
    set_static_field,
)

__all__ = [
    "InstanceAccessor",
    "TypeAccessor",
    "construct",
    "get_static_field",
    "get_static_property",
    "invoke_static",
    "set_static_field",
]
