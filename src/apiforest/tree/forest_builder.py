"""Inheritance forests for hierarchy pages"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..models.element import ClassElement, ElementKind
from ..models.registry import ElementRegistry

logger = logging.getLogger(__name__)

ROOT_INDEX = 0


@dataclass
class TreeNode:
    """A named node; children map names to node indexes in the forest"""
    name: str
    children: Dict[str, int] = field(default_factory=dict)


class Forest:
    """Trees of one element kind stored as an arena of nodes.

    Node 0 is an unnamed root whose children are the real tree roots.
    Siblings are always kept in case-sensitive name order.
    """

    def __init__(self, kind: ElementKind):
        self.kind = kind
        self._nodes: List[TreeNode] = [TreeNode("")]
        self._index: Dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._nodes) - 1

    def __bool__(self) -> bool:
        return len(self) > 0

    def child(self, parent: int, name: str) -> Optional[int]:
        return self._nodes[parent].children.get(name)

    def add_child(self, parent: int, name: str) -> int:
        """Index of the named child of parent, creating it if needed"""
        existing = self.child(parent, name)
        if existing is not None:
            return existing

        index = len(self._nodes)
        self._nodes.append(TreeNode(name))
        self._index.setdefault(name, index)

        siblings = self._nodes[parent].children
        siblings[name] = index
        self._nodes[parent].children = dict(sorted(siblings.items()))
        return index

    def roots(self) -> List[str]:
        return list(self._nodes[ROOT_INDEX].children)

    def children(self, name: str) -> List[str]:
        index = self._index.get(name)
        if index is None:
            return []
        return list(self._nodes[index].children)

    def to_dict(self, index: int = ROOT_INDEX) -> Dict[str, dict]:
        """Nested {name: {child: {...}}} view"""
        result: Dict[str, dict] = {}
        stack = [(index, result)]
        while stack:
            current, target = stack.pop()
            for name, child in self._nodes[current].children.items():
                target[name] = {}
                stack.append((child, target[name]))
        return result

    def walk(self) -> Iterator[Tuple[int, str, bool]]:
        """Depth-first (depth, name, is_last_sibling) rows"""
        stack = [(0, index, position == 0)
                 for position, index in enumerate(reversed(list(self._nodes[ROOT_INDEX].children.values())))]
        while stack:
            depth, index, is_last = stack.pop()
            node = self._nodes[index]
            yield depth, node.name, is_last
            children = list(node.children.values())
            for position, child in enumerate(reversed(children)):
                stack.append((depth + 1, child, position == 0))


@dataclass
class HierarchyForests:
    """The four independent inheritance forests"""
    classes: Forest = field(default_factory=lambda: Forest(ElementKind.CLASS))
    interfaces: Forest = field(default_factory=lambda: Forest(ElementKind.INTERFACE))
    traits: Forest = field(default_factory=lambda: Forest(ElementKind.TRAIT))
    exceptions: Forest = field(default_factory=lambda: Forest(ElementKind.EXCEPTION))

    def for_kind(self, kind: ElementKind) -> Forest:
        if kind is ElementKind.INTERFACE:
            return self.interfaces
        if kind is ElementKind.TRAIT:
            return self.traits
        if kind is ElementKind.EXCEPTION:
            return self.exceptions
        if kind is ElementKind.CLASS:
            return self.classes
        raise ValueError(f"No forest for {kind.value}")

    def items(self) -> List[Tuple[str, Forest]]:
        return [
            ("classes", self.classes),
            ("interfaces", self.interfaces),
            ("traits", self.traits),
            ("exceptions", self.exceptions),
        ]


class TreeBuilder:
    """Builds inheritance forests from the main, documented classes"""

    def build(self, registry: ElementRegistry) -> HierarchyForests:
        forests = HierarchyForests()
        processed: Set[str] = set()

        for cls in registry.classes:
            if not cls.main or not cls.documented or cls.name in processed:
                continue
            self._insert(forests, registry, cls, processed)

        logger.debug(
            "Built forests: "
            + ", ".join(f"{name}={len(forest)}" for name, forest in forests.items())
        )
        return forests

    def _insert(self, forests: HierarchyForests, registry: ElementRegistry,
                cls: ClassElement, processed: Set[str]) -> None:
        ancestors = list(reversed(registry.parent_classes(cls)))

        if not ancestors:
            forest = forests.for_kind(cls.kind)
            cursor = ROOT_INDEX
        else:
            # The topmost parent decides which forest the chain belongs to
            forest = forests.for_kind(ancestors[0].kind)
            cursor = ROOT_INDEX
            for parent in ancestors:
                if forest.child(cursor, parent.name) is None:
                    processed.add(parent.name)
                cursor = forest.add_child(cursor, parent.name)

        forest.add_child(cursor, cls.name)
        processed.add(cls.name)
