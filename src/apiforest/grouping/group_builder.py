"""Namespace and package groups for summary pages"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..models.element import (
    ELEMENT_TYPES,
    INTERNAL_GROUP_NAME,
    NAMESPACE_SEPARATOR,
    UNNAMED_GROUP_NAME,
    Element,
)
from ..models.registry import ElementRegistry

logger = logging.getLogger(__name__)


class GroupMode(Enum):
    """How elements are grouped"""
    AUTO = "auto"
    NAMESPACES = "namespaces"
    PACKAGES = "packages"
    NONE = "none"


@dataclass
class Group:
    """A namespace or package with its elements by type"""
    name: str
    classes: Dict[str, Element] = field(default_factory=dict)
    interfaces: Dict[str, Element] = field(default_factory=dict)
    traits: Dict[str, Element] = field(default_factory=dict)
    exceptions: Dict[str, Element] = field(default_factory=dict)
    constants: Dict[str, Element] = field(default_factory=dict)
    functions: Dict[str, Element] = field(default_factory=dict)

    def bucket(self, element_type: str) -> Dict[str, Element]:
        if element_type not in ELEMENT_TYPES:
            raise KeyError(element_type)
        return getattr(self, element_type)

    @property
    def is_empty(self) -> bool:
        return not any(self.bucket(element_type) for element_type in ELEMENT_TYPES)

    def __len__(self) -> int:
        return sum(len(self.bucket(element_type)) for element_type in ELEMENT_TYPES)


@dataclass
class GroupingResult:
    """Outcome of categorizing one snapshot"""
    mode: GroupMode
    groups: Dict[str, Group] = field(default_factory=dict)
    elements: Dict[str, Dict[str, Element]] = field(
        default_factory=lambda: {element_type: {} for element_type in ELEMENT_TYPES}
    )

    @property
    def names(self) -> List[str]:
        return list(self.groups)

    def group_name_of(self, element: Element) -> Optional[str]:
        if self.mode is GroupMode.NAMESPACES:
            return element.pseudo_namespace_name
        if self.mode is GroupMode.PACKAGES:
            return element.pseudo_package_name
        return None

    def group_of(self, element: Element) -> Optional[Group]:
        name = self.group_name_of(element)
        return self.groups.get(name) if name is not None else None

    def subgroups(self, name: str) -> List[str]:
        """Direct children of a group, in group order"""
        prefix = f"{name}{NAMESPACE_SEPARATOR}".lower()
        return [
            group_name for group_name in self.groups
            if group_name.lower().startswith(prefix) and NAMESPACE_SEPARATOR not in group_name[len(prefix):]
        ]

    def iter_elements(self) -> Iterable[Element]:
        for element_type in ELEMENT_TYPES:
            yield from self.elements[element_type].values()


def group_sort_key(name: str, main: str = ""):
    """Case-insensitive order with the separator sorting like a space.

    Names starting with main come first.
    """
    prioritized = bool(main) and name.startswith(main)
    return (not prioritized, name.replace(NAMESPACE_SEPARATOR, " ").lower())


class GroupBuilder:
    """Categorizes documented elements by namespace or package"""

    def __init__(self, config=None):
        self.mode = GroupMode(getattr(config, "groups", "auto"))
        self.main = getattr(config, "main", "") or ""

    def categorize(self, registry: ElementRegistry) -> GroupingResult:
        namespaces: Dict[str, Group] = {}
        packages: Dict[str, Group] = {}
        elements = {element_type: {} for element_type in ELEMENT_TYPES}

        for element in registry:
            if not element.documented:
                continue

            element_type = element.kind.element_type
            elements[element_type][element.name] = element

            package = packages.setdefault(element.pseudo_package_name, Group(element.pseudo_package_name))
            package.bucket(element_type)[element.name] = element

            namespace = namespaces.setdefault(element.pseudo_namespace_name, Group(element.pseudo_namespace_name))
            namespace.bucket(element_type)[element.short_name] = element

        mode = self._select_mode(namespaces, packages)
        logger.debug(f"Grouping {sum(map(len, elements.values()))} elements by {mode.value}")

        if mode is GroupMode.NAMESPACES:
            groups = self.sort_groups(namespaces)
        elif mode is GroupMode.PACKAGES:
            groups = self.sort_groups(packages)
        else:
            groups = {}

        return GroupingResult(mode=mode, groups=groups, elements=elements)

    def _select_mode(self, namespaces: Dict[str, Group], packages: Dict[str, Group]) -> GroupMode:
        builtin = {INTERNAL_GROUP_NAME, UNNAMED_GROUP_NAME}
        user_packages = len(set(packages) - builtin)
        user_namespaces = len(set(namespaces) - builtin)

        if self.mode is GroupMode.AUTO:
            if user_namespaces > 0 or user_packages == 0:
                return GroupMode.NAMESPACES
            return GroupMode.PACKAGES
        return self.mode

    def sort_groups(self, groups: Dict[str, Group]) -> Dict[str, Group]:
        """Complete the group hierarchy and order it"""
        # A lone fallback group is not worth presenting
        if len(groups) == 1 and UNNAMED_GROUP_NAME in groups:
            return {}

        groups = dict(groups)
        known = {name.lower() for name in groups}

        for group_name in list(groups):
            parent = ""
            for part in group_name.split(NAMESPACE_SEPARATOR):
                parent = f"{parent}{NAMESPACE_SEPARATOR}{part}".lstrip(NAMESPACE_SEPARATOR)
                if parent.lower() not in known:
                    logger.debug(f"Adding missing parent group {parent}")
                    groups[parent] = Group(parent)
                    known.add(parent.lower())

        ordered = sorted(groups, key=lambda name: group_sort_key(name, self.main))
        return {name: groups[name] for name in ordered}
