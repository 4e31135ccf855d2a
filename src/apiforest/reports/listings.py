"""Cross-cutting element listings: deprecated, todo, autocomplete, statistics"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Tuple

from ..grouping.group_builder import GroupingResult
from ..models.element import ELEMENT_TYPES, NAMESPACE_SEPARATOR, ClassElement, Element
from ..models.registry import ElementRegistry


@dataclass
class ElementListing:
    """Elements matching one filter, split by type"""
    elements: Dict[str, List[Element]] = field(default_factory=dict)
    methods: List[Element] = field(default_factory=list)
    constants: List[Element] = field(default_factory=list)
    properties: List[Element] = field(default_factory=list)

    def __len__(self) -> int:
        members = len(self.methods) + len(self.constants) + len(self.properties)
        return members + sum(len(items) for items in self.elements.values())


@dataclass
class DocumentationStatistics:
    """Counts reported after a snapshot is loaded"""
    classes: int = 0
    constants: int = 0
    functions: int = 0
    internal_classes: int = 0
    documented_classes: int = 0
    documented_constants: int = 0
    documented_functions: int = 0
    documented_internal_classes: int = 0


def member_sort_key(member: Element) -> str:
    return f"{member.declaring_class_name}::{member.name}".lower()


def top_level_sort_key(element: Element) -> str:
    """Functions and constants by namespace and name"""
    return f"{element.namespace_name}{NAMESPACE_SEPARATOR}{element.short_name}".lower()


def _collect(grouping: GroupingResult, matches: Callable[[Element], bool],
             skip_deprecated_classes: bool) -> ElementListing:
    listing = ElementListing()

    for element_type in reversed(ELEMENT_TYPES):
        candidates = [e for e in grouping.elements[element_type].values() if e.main]
        listing.elements[element_type] = sorted(
            (e for e in candidates if matches(e)),
            key=top_level_sort_key,
        )

        if element_type in ("constants", "functions"):
            continue

        for cls in candidates:
            if skip_deprecated_classes and cls.is_deprecated:
                continue
            listing.methods.extend(m for m in cls.methods.values() if matches(m))
            listing.constants.extend(c for c in cls.constants.values() if matches(c))
            listing.properties.extend(p for p in cls.properties.values() if matches(p))

    listing.methods.sort(key=member_sort_key)
    listing.constants.sort(key=member_sort_key)
    listing.properties.sort(key=member_sort_key)
    return listing


def deprecated_listing(grouping: GroupingResult) -> ElementListing:
    """Deprecated elements; members of deprecated classes are not repeated"""
    return _collect(grouping, lambda element: element.is_deprecated, skip_deprecated_classes=True)


def todo_listing(grouping: GroupingResult) -> ElementListing:
    return _collect(grouping, lambda element: element.has_annotation("todo"), skip_deprecated_classes=False)


def autocomplete_entries(grouping: GroupingResult, kinds: Iterable[str]) -> List[Tuple[str, str]]:
    """(tag, pretty name) pairs for a search box"""
    kinds = set(kinds)
    entries: List[Tuple[str, str]] = []

    for element in grouping.iter_elements():
        if isinstance(element, ClassElement):
            if "classes" in kinds:
                entries.append(("c", element.pretty_name))
            if "methods" in kinds:
                entries.extend(("m", method.pretty_name) for method in element.methods.values())
            if "properties" in kinds:
                entries.extend(("p", prop.pretty_name) for prop in element.properties.values())
            if "classconstants" in kinds:
                entries.extend(("cc", const.pretty_name) for const in element.constants.values())
        elif element.kind.element_type == "constants" and "constants" in kinds:
            entries.append(("co", element.pretty_name))
        elif element.kind.element_type == "functions" and "functions" in kinds:
            entries.append(("f", element.pretty_name))

    entries.sort(key=lambda entry: entry[1].lower())
    return entries


def collect_statistics(registry: ElementRegistry) -> DocumentationStatistics:
    stats = DocumentationStatistics()

    for cls in registry.classes:
        if cls.tokenized:
            stats.classes += 1
            stats.documented_classes += int(cls.documented)
        else:
            stats.internal_classes += 1
            stats.documented_internal_classes += int(cls.documented)

    stats.constants = len(registry.constants)
    stats.documented_constants = sum(1 for c in registry.constants if c.documented)
    stats.functions = len(registry.functions)
    stats.documented_functions = sum(1 for f in registry.functions if f.documented)
    return stats
