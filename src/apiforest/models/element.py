"""Data models for documented program elements"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


NAMESPACE_SEPARATOR = "\\"

# Bucket names in the order groups and listings present them
ELEMENT_TYPES = ("classes", "interfaces", "traits", "exceptions", "constants", "functions")

INTERNAL_GROUP_NAME = "PHP"
UNNAMED_GROUP_NAME = "None"


class ElementKind(Enum):
    """Kinds of documented elements"""
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    EXCEPTION = "exception"
    CONSTANT = "constant"
    FUNCTION = "function"
    METHOD = "method"
    PROPERTY = "property"
    CLASS_CONSTANT = "class_constant"
    PARAMETER = "parameter"

    @property
    def is_class_like(self) -> bool:
        return self in CLASS_KINDS

    @property
    def is_member(self) -> bool:
        return self in MEMBER_KINDS

    @property
    def element_type(self) -> Optional[str]:
        """Group bucket this kind is filed under, None for members"""
        return BUCKET_BY_KIND.get(self)


CLASS_KINDS = frozenset({
    ElementKind.CLASS,
    ElementKind.INTERFACE,
    ElementKind.TRAIT,
    ElementKind.EXCEPTION,
})

MEMBER_KINDS = frozenset({
    ElementKind.METHOD,
    ElementKind.PROPERTY,
    ElementKind.CLASS_CONSTANT,
})

BUCKET_BY_KIND = {
    ElementKind.CLASS: "classes",
    ElementKind.INTERFACE: "interfaces",
    ElementKind.TRAIT: "traits",
    ElementKind.EXCEPTION: "exceptions",
    ElementKind.CONSTANT: "constants",
    ElementKind.FUNCTION: "functions",
}


def split_name(name: str):
    """Split a fully qualified name into (namespace, short name)"""
    name = name.lstrip(NAMESPACE_SEPARATOR)
    namespace, _, short_name = name.rpartition(NAMESPACE_SEPARATOR)
    return namespace, short_name


def _first_word(value: str) -> str:
    words = value.split()
    return words[0] if words else ""


def _normalize_package(value: str) -> str:
    return _first_word(value).replace(".", NAMESPACE_SEPARATOR).replace("/", NAMESPACE_SEPARATOR)


@dataclass(eq=False)
class Element:
    """A documented program element.

    Top-level elements (classes, constants, functions) carry their fully
    qualified name in ``name``. Members carry their own short name and point
    at the declaring class instead.
    """
    name: str
    kind: ElementKind
    documented: bool = True
    tokenized: bool = True
    main: bool = True
    annotations: Dict[str, List[str]] = field(default_factory=dict)
    namespace_aliases: Dict[str, str] = field(default_factory=dict)
    namespace: Optional[str] = None

    def __post_init__(self):
        if self.namespace is None:
            self.namespace = split_name(self.name)[0]

    @property
    def short_name(self) -> str:
        return split_name(self.name)[1]

    @property
    def namespace_name(self) -> str:
        return self.namespace or ""

    @property
    def is_internal(self) -> bool:
        """Built-in or external element, not parsed from project source"""
        return not self.tokenized

    @property
    def pseudo_namespace_name(self) -> str:
        if self.is_internal:
            return INTERNAL_GROUP_NAME
        return self.namespace_name or UNNAMED_GROUP_NAME

    @property
    def pseudo_package_name(self) -> str:
        if self.is_internal:
            return INTERNAL_GROUP_NAME

        package_values = self.annotations.get("package")
        if not package_values:
            return UNNAMED_GROUP_NAME

        package = _normalize_package(package_values[0])
        if not package:
            return UNNAMED_GROUP_NAME

        subpackage_values = self.annotations.get("subpackage")
        if subpackage_values:
            subpackage = _normalize_package(subpackage_values[0])
            if subpackage:
                package = f"{package}{NAMESPACE_SEPARATOR}{subpackage}"
        return package

    @property
    def pretty_name(self) -> str:
        if self.kind is ElementKind.FUNCTION:
            return f"{self.name}()"
        return self.name

    @property
    def is_deprecated(self) -> bool:
        return self.has_annotation("deprecated")

    def has_annotation(self, name: str) -> bool:
        return name in self.annotations

    def get_annotation(self, name: str) -> Optional[List[str]]:
        return self.annotations.get(name)


@dataclass(eq=False)
class ParameterElement(Element):
    """A parameter of a function or method"""
    declaring_function_name: Optional[str] = None
    declaring_class_name: Optional[str] = None

    @property
    def short_name(self) -> str:
        return self.name

    @property
    def pretty_name(self) -> str:
        owner = self.declaring_function_name or ""
        if self.declaring_class_name:
            owner = f"{self.declaring_class_name}::{owner}"
        return f"{owner}(${self.name})"


@dataclass(eq=False)
class MemberElement(Element):
    """A method, property or class constant owned by a class"""
    declaring_class_name: Optional[str] = None
    parameters: List[ParameterElement] = field(default_factory=list)

    @property
    def short_name(self) -> str:
        return self.name

    @property
    def pretty_name(self) -> str:
        owner = self.declaring_class_name or ""
        if self.kind is ElementKind.METHOD:
            return f"{owner}::{self.name}()"
        if self.kind is ElementKind.PROPERTY:
            return f"{owner}::${self.name}"
        return f"{owner}::{self.name}"

    def add_parameter(self, parameter: ParameterElement) -> None:
        parameter.declaring_function_name = self.name
        parameter.declaring_class_name = self.declaring_class_name
        parameter.namespace = self.namespace
        parameter.namespace_aliases = self.namespace_aliases
        self.parameters.append(parameter)


@dataclass(eq=False)
class FunctionElement(Element):
    """A function declared outside of any class"""
    parameters: List[ParameterElement] = field(default_factory=list)

    def add_parameter(self, parameter: ParameterElement) -> None:
        parameter.declaring_function_name = self.name
        parameter.declaring_class_name = None
        parameter.namespace = self.namespace
        parameter.namespace_aliases = self.namespace_aliases
        self.parameters.append(parameter)


@dataclass(eq=False)
class ClassElement(Element):
    """A class, interface, trait or exception with its own members"""
    parent_class_name: Optional[str] = None
    interface_names: List[str] = field(default_factory=list)
    trait_names: List[str] = field(default_factory=list)
    methods: Dict[str, MemberElement] = field(default_factory=dict)
    properties: Dict[str, MemberElement] = field(default_factory=dict)
    constants: Dict[str, MemberElement] = field(default_factory=dict)

    def add_member(self, member: MemberElement) -> None:
        """Attach a member declared by this class"""
        member.declaring_class_name = self.name
        member.namespace = self.namespace
        member.namespace_aliases = self.namespace_aliases
        for parameter in member.parameters:
            parameter.declaring_class_name = self.name

        if member.kind is ElementKind.METHOD:
            self.methods[member.name] = member
        elif member.kind is ElementKind.PROPERTY:
            self.properties[member.name] = member
        elif member.kind is ElementKind.CLASS_CONSTANT:
            self.constants[member.name] = member
        else:
            raise ValueError(f"{member.kind.value} cannot be a class member")

    def own_members(self) -> List[MemberElement]:
        """Own methods, constants and properties, in that order"""
        return [*self.methods.values(), *self.constants.values(), *self.properties.values()]
