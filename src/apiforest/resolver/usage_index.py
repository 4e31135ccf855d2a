"""Reverse @uses annotations into "used by" entries"""

import logging
import re
from typing import Dict, Iterable, List

from ..models.element import ClassElement, Element
from .element_resolver import ElementResolver

logger = logging.getLogger(__name__)


def split_annotation_value(value: str):
    """Split an annotation value into (link, description)"""
    parts = re.split(r"\s+", value.strip(), maxsplit=1)
    link = parts[0]
    description = parts[1] if len(parts) > 1 else ""
    return link, description


def build_used_by_index(resolver: ElementResolver, elements: Iterable[Element]) -> Dict[str, List[str]]:
    """
    Collect "used by" entries keyed by the pretty name of the used element.

    Every ``@uses`` value of the given elements (and of the own members of
    class-like ones) is resolved with its owner as context. Unresolved links
    are skipped.
    """
    used_by: Dict[str, List[str]] = {}

    for parent_element in elements:
        owners = [parent_element]
        if isinstance(parent_element, ClassElement):
            owners.extend(parent_element.own_members())

        for owner in owners:
            for value in owner.get_annotation("uses") or []:
                link, description = split_annotation_value(value)
                target = resolver.resolve(link, owner)
                if target is None:
                    logger.debug(f"@uses {link} of {owner.pretty_name} not resolved")
                    continue
                entry = f"{owner.pretty_name} {description}".rstrip()
                used_by.setdefault(target.pretty_name, []).append(entry)

    return used_by
