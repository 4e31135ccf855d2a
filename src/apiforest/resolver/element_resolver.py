"""
Cross-reference resolution for documentation annotations

Turns hand-written references such as ``Foo::bar()``, ``$count``,
``parent::__construct`` or an aliased ``Lib\\Bar`` into the element they
point at. Documentation text is free-form, so a reference that leads
nowhere is simply unresolved (None) and never an error.
"""

import logging
from typing import Dict, Optional, Tuple

from ..models.element import NAMESPACE_SEPARATOR, ClassElement, Element, ElementKind
from ..models.registry import ElementRegistry

logger = logging.getLogger(__name__)

# Type names that never point at a documented element
SCALAR_TYPE_NAMES = frozenset({
    "boolean", "integer", "float", "string", "array", "object", "resource",
    "callback", "callable", "NULL", "false", "true", "mixed",
})

MEMBER_OPERATORS = ("::", "->")


def leading_segment(reference: str) -> str:
    """Identifier before the first namespace separator or colon"""
    for position, char in enumerate(reference):
        if char in (NAMESPACE_SEPARATOR, ":"):
            return reference[:position]
    return reference


def has_member_access(reference: str) -> bool:
    return any(operator in reference for operator in MEMBER_OPERATORS)


def split_member_access(reference: str) -> Optional[Tuple[str, str]]:
    """Split ``Class::member`` or ``Class->member`` at the first operator.

    ``::`` wins over ``->``. An operator at the very start does not count.
    """
    for operator in MEMBER_OPERATORS:
        position = reference.find(operator)
        if position > 0:
            return reference[:position], reference[position + len(operator):]
    return None


def expand_alias(reference: str, aliases: Dict[str, str]) -> Optional[str]:
    """Replace a leading namespace alias with the name it stands for"""
    base = leading_segment(reference)
    if not base or base not in aliases:
        return None
    return aliases[base].lstrip(NAMESPACE_SEPARATOR) + reference[len(base):]


def resolve_class_fqn(class_name: str, aliases: Dict[str, str], namespace: str = "") -> str:
    """Fully qualified form of a class name as written in namespace."""
    if class_name.startswith(NAMESPACE_SEPARATOR):
        return class_name.lstrip(NAMESPACE_SEPARATOR)

    expanded = expand_alias(class_name, aliases)
    if expanded is not None:
        return expanded

    if not namespace:
        return class_name
    return f"{namespace}{NAMESPACE_SEPARATOR}{class_name}"


class ElementResolver:
    """Resolve textual references against an element registry"""

    def __init__(self, registry: ElementRegistry):
        self.registry = registry

    def resolve(self, reference: str, context: Element) -> Optional[Element]:
        """
        Find the element a reference points at, seen from context.

        Context is the element whose documentation contains the reference
        (or one of its parameters). Returns None when the reference cannot
        be resolved to a documented element.
        """
        if not reference or reference in SCALAR_TYPE_NAMES:
            return None

        original_context = context
        context = self._normalize_context(context)
        if context is None:
            return None

        # self, $this references
        if reference in ("self", "$this"):
            return context if context.kind.is_class_like else None

        namespace = context.namespace_name
        aliases = context.namespace_aliases

        expanded = expand_alias(reference, aliases)
        if expanded is not None and expanded != reference:
            if not has_member_access(expanded):
                return self.registry.get_class(expanded, namespace)
            # Aliased Class::member, the member part is resolved below
            reference = expanded
        else:
            found = self._direct_lookup(reference, namespace)
            if found is not None:
                return found

        split = split_member_access(reference)
        if split is not None:
            class_part, member_part = split
            parent_name = getattr(context, "parent_class_name", None)
            if reference.startswith("parent::") and parent_name:
                context = self.registry.get_class(parent_name)
            elif not reference.startswith("self::"):
                context = self.registry.get_class(class_part, namespace)
                if context is None:
                    context = self.registry.get_class(resolve_class_fqn(class_part, aliases, namespace))
            reference = member_part
        elif original_context.kind is ElementKind.PARAMETER:
            return None

        if context is None or not context.kind.is_class_like:
            return None

        return self._resolve_member(context, reference)

    def _normalize_context(self, context: Element) -> Optional[Element]:
        """Replace parameters and members with the element that declares them"""
        kind = context.kind
        if kind is ElementKind.PARAMETER:
            if context.declaring_class_name is None:
                # Parameter of a function in a namespace or the global space
                return self.registry.get_function(context.declaring_function_name or "")
            return self.registry.get_class(context.declaring_class_name)
        if kind.is_member:
            return self.registry.get_class(context.declaring_class_name or "")
        if kind.is_class_like or kind in (ElementKind.CONSTANT, ElementKind.FUNCTION):
            return context
        raise ValueError(f"Unknown element kind: {kind}")

    def _direct_lookup(self, reference: str, namespace: str) -> Optional[Element]:
        cls = self.registry.get_class(reference, namespace)
        if cls is not None:
            return cls

        constant = self.registry.get_constant(reference, namespace)
        if constant is not None:
            return constant

        function = self.registry.get_function(reference, namespace)
        if function is None and reference.endswith("()"):
            function = self.registry.get_function(reference[:-2], namespace)
        return function

    def _resolve_member(self, cls: ClassElement, name: str) -> Optional[Element]:
        if not name:
            return None

        candidates = [lambda: self.registry.find_property(cls, name)]
        if name.startswith("$"):
            candidates.append(lambda: self.registry.find_property(cls, name[1:]))
        candidates.append(lambda: self.registry.find_method(cls, name))
        if name.endswith("()"):
            candidates.append(lambda: self.registry.find_method(cls, name[:-2]))
        candidates.append(lambda: self.registry.find_constant(cls, name))

        for candidate in candidates:
            member = candidate()
            if member is not None and member.documented:
                return member

        logger.debug(f"No member {name} on {cls.name}")
        return None
