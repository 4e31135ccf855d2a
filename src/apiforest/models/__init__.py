from .element import (
    ELEMENT_TYPES,
    NAMESPACE_SEPARATOR,
    ClassElement,
    Element,
    ElementKind,
    FunctionElement,
    MemberElement,
    ParameterElement,
)
from .registry import ElementRegistry, RelationIndex

__all__ = [
    "ELEMENT_TYPES",
    "NAMESPACE_SEPARATOR",
    "ClassElement",
    "Element",
    "ElementKind",
    "FunctionElement",
    "MemberElement",
    "ParameterElement",
    "ElementRegistry",
    "RelationIndex",
]
