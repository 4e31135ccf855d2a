"""Lookup tables over a parsed element snapshot"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .element import (
    NAMESPACE_SEPARATOR,
    ClassElement,
    Element,
    ElementKind,
    FunctionElement,
    MemberElement,
)

logger = logging.getLogger(__name__)


@dataclass
class RelationIndex:
    """Name -> set of names relation, keys matched case-insensitively"""
    edges: Dict[str, Set[str]] = field(default_factory=dict)

    def add(self, from_name: str, to_name: str) -> None:
        self.edges.setdefault(from_name.lower(), set()).add(to_name)

    def get(self, name: str) -> Set[str]:
        return set(self.edges.get(name.lower(), set()))

    def closure(self, name: str) -> Set[str]:
        """Everything reachable from name, name itself excluded"""
        found: Set[str] = set()
        seen = {name.lower()}
        pending = list(self.get(name))
        while pending:
            current = pending.pop()
            if current.lower() in seen:
                continue
            seen.add(current.lower())
            found.add(current)
            pending.extend(self.get(current))
        return found


def _key(name: str) -> str:
    return name.lstrip(NAMESPACE_SEPARATOR).lower()


class ElementRegistry:
    """All elements of one documentation run, keyed by fully qualified name.

    Class and function names are matched case-insensitively, constant names
    exactly. The registry is read-only once constructed.
    """

    def __init__(self,
                 classes: Iterable[ClassElement] = (),
                 constants: Iterable[Element] = (),
                 functions: Iterable[FunctionElement] = ()):
        self._classes: Dict[str, ClassElement] = {}
        self._constants: Dict[str, Element] = {}
        self._functions: Dict[str, FunctionElement] = {}

        for cls in classes:
            if not cls.kind.is_class_like:
                raise ValueError(f"{cls.name} is a {cls.kind.value}, not a class")
            self._classes[_key(cls.name)] = cls
        for constant in constants:
            if constant.kind is not ElementKind.CONSTANT:
                raise ValueError(f"{constant.name} is a {constant.kind.value}, not a constant")
            self._constants[constant.name.lstrip(NAMESPACE_SEPARATOR)] = constant
        for function in functions:
            if function.kind is not ElementKind.FUNCTION:
                raise ValueError(f"{function.name} is a {function.kind.value}, not a function")
            self._functions[_key(function.name)] = function

        self._subclasses = RelationIndex()
        self._implementers = RelationIndex()
        self._users = RelationIndex()
        self._pretty_names: Dict[str, Element] = {}
        self._build_indices()

    # -- iteration -------------------------------------------------------

    @property
    def classes(self) -> List[ClassElement]:
        """Class-like elements ordered case-insensitively by name"""
        return [self._classes[key] for key in sorted(self._classes)]

    @property
    def constants(self) -> List[Element]:
        return [self._constants[key] for key in sorted(self._constants, key=str.lower)]

    @property
    def functions(self) -> List[FunctionElement]:
        return [self._functions[key] for key in sorted(self._functions)]

    def __iter__(self) -> Iterator[Element]:
        yield from self.classes
        yield from self.constants
        yield from self.functions

    def __len__(self) -> int:
        return len(self._classes) + len(self._constants) + len(self._functions)

    # -- raw and documented lookups ---------------------------------------

    def find_class(self, name: Optional[str]) -> Optional[ClassElement]:
        """Class by fully qualified name, documented or not"""
        if not name:
            return None
        return self._classes.get(_key(name))

    def get_class(self, class_name: str, namespace: str = "") -> Optional[ClassElement]:
        """Resolve a class name, trying the given namespace first"""
        cls = self._lookup(self._classes, class_name, namespace, _key)
        return cls if cls is not None and cls.documented else None

    def get_constant(self, constant_name: str, namespace: str = "") -> Optional[Element]:
        constant = self._lookup(
            self._constants, constant_name, namespace,
            lambda name: name.lstrip(NAMESPACE_SEPARATOR)
        )
        return constant if constant is not None and constant.documented else None

    def get_function(self, function_name: str, namespace: str = "") -> Optional[FunctionElement]:
        function = self._lookup(self._functions, function_name, namespace, _key)
        return function if function is not None and function.documented else None

    @staticmethod
    def _lookup(table, name, namespace, key_func):
        if not name:
            return None
        if namespace:
            scoped = table.get(key_func(f"{namespace}{NAMESPACE_SEPARATOR}{name}"))
            if scoped is not None:
                return scoped
        return table.get(key_func(name))

    def find_by_pretty_name(self, name: str) -> Optional[Element]:
        """Any element, members included, by its pretty name"""
        return self._pretty_names.get(name.lstrip(NAMESPACE_SEPARATOR).lower())

    # -- inheritance -----------------------------------------------------

    def parent_classes(self, cls: ClassElement) -> List[ClassElement]:
        """Ancestors from the nearest to the furthest.

        The walk stops at the first parent name missing from the model.
        """
        parents: List[ClassElement] = []
        seen = {_key(cls.name)}
        parent_name = cls.parent_class_name
        while parent_name:
            key = _key(parent_name)
            if key in seen:
                logger.debug(f"Inheritance cycle through {parent_name} ignored")
                break
            parent = self._classes.get(key)
            if parent is None:
                logger.debug(f"Parent {parent_name} of {cls.name} is not in the model")
                break
            parents.append(parent)
            seen.add(key)
            parent_name = parent.parent_class_name
        return parents

    def _member_sources(self, cls: ClassElement, include_interfaces: bool) -> List[ClassElement]:
        """Classes whose members cls can see, in lookup order"""
        sources: List[ClassElement] = []
        seen: Set[str] = set()

        def visit(current: Optional[ClassElement]) -> None:
            if current is None or _key(current.name) in seen:
                return
            seen.add(_key(current.name))
            sources.append(current)
            for trait_name in current.trait_names:
                visit(self.find_class(trait_name))

        visit(cls)
        for parent in self.parent_classes(cls):
            visit(parent)

        if include_interfaces:
            pending = list(sources)
            while pending:
                current = pending.pop(0)
                for interface_name in current.interface_names:
                    interface = self.find_class(interface_name)
                    if interface is not None and _key(interface.name) not in seen:
                        seen.add(_key(interface.name))
                        sources.append(interface)
                        pending.append(interface)
        return sources

    def find_method(self, cls: ClassElement, name: str) -> Optional[MemberElement]:
        """Own or inherited method, matched case-insensitively"""
        lowered = name.lower()
        for source in self._member_sources(cls, include_interfaces=True):
            for method_name, method in source.methods.items():
                if method_name.lower() == lowered:
                    return method
        return None

    def find_property(self, cls: ClassElement, name: str) -> Optional[MemberElement]:
        for source in self._member_sources(cls, include_interfaces=False):
            if name in source.properties:
                return source.properties[name]
        return None

    def find_constant(self, cls: ClassElement, name: str) -> Optional[MemberElement]:
        for source in self._member_sources(cls, include_interfaces=True):
            if name in source.constants:
                return source.constants[name]
        return None

    # -- back references -------------------------------------------------

    def direct_subclasses(self, name: str) -> Set[str]:
        return self._subclasses.get(name)

    def indirect_subclasses(self, name: str) -> Set[str]:
        direct = {n.lower() for n in self.direct_subclasses(name)}
        return {n for n in self._subclasses.closure(name) if n.lower() not in direct}

    def direct_implementers(self, name: str) -> Set[str]:
        return self._implementers.get(name)

    def indirect_implementers(self, name: str) -> Set[str]:
        """Implementers reached through interface inheritance or subclassing"""
        direct = {n.lower() for n in self.direct_implementers(name)}
        found: Set[str] = set()
        pending = list(self.direct_implementers(name))
        while pending:
            current = pending.pop()
            for child in self.direct_subclasses(current) | self.direct_implementers(current):
                if child.lower() in direct or child in found:
                    continue
                found.add(child)
                pending.append(child)
        return found

    def direct_users(self, name: str) -> Set[str]:
        return self._users.get(name)

    def indirect_users(self, name: str) -> Set[str]:
        direct = {n.lower() for n in self.direct_users(name)}
        found: Set[str] = set()
        pending = list(self.direct_users(name))
        while pending:
            current = pending.pop()
            for child in self.direct_subclasses(current) | self.direct_users(current):
                if child.lower() in direct or child in found:
                    continue
                found.add(child)
                pending.append(child)
        return found

    def _build_indices(self) -> None:
        for cls in self._classes.values():
            if cls.parent_class_name:
                self._subclasses.add(cls.parent_class_name, cls.name)
            for interface_name in cls.interface_names:
                if cls.kind is ElementKind.INTERFACE:
                    # Interfaces extend other interfaces
                    self._subclasses.add(interface_name, cls.name)
                self._implementers.add(interface_name, cls.name)
            for trait_name in cls.trait_names:
                self._users.add(trait_name, cls.name)

            self._register_pretty_name(cls)
            for member in cls.own_members():
                self._register_pretty_name(member)

        for element in [*self._constants.values(), *self._functions.values()]:
            self._register_pretty_name(element)

    def _register_pretty_name(self, element: Element) -> None:
        self._pretty_names.setdefault(element.pretty_name.lower(), element)
