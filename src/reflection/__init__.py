"""Value introspection for generic code.

Resolve pointer indirection on values and type descriptors, and pull
native values out of reflective handles.
"""

from .config import DEFAULT_CONFIG, ReflectionConfig, parse_reflection_config
from .descriptors import Type, descriptor_for, pointer_to, type_of
from .errors import InvalidValueError, KindMismatchError, ReflectionError, SealedValueError
from .extract import KindDispatchExtractor, PrimitiveExtractor, extract_primitive
from .indirection import (
    IndirectionResolver,
    PointerChainResolver,
    TypeIndirection,
    ValueIndirection,
    resolve_type_indirection,
    resolve_value_indirection,
)
from .kinds import Kind
from .logger import get_logger
from .values import Interface, Pointer, Value, make_value, value_of

get_logger()

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "IndirectionResolver",
    "Interface",
    "InvalidValueError",
    "Kind",
    "KindDispatchExtractor",
    "KindMismatchError",
    "PointerChainResolver",
    "Pointer",
    "PrimitiveExtractor",
    "ReflectionConfig",
    "ReflectionError",
    "SealedValueError",
    "Type",
    "TypeIndirection",
    "Value",
    "ValueIndirection",
    "descriptor_for",
    "extract_primitive",
    "make_value",
    "parse_reflection_config",
    "pointer_to",
    "resolve_type_indirection",
    "resolve_value_indirection",
    "type_of",
    "value_of",
]
