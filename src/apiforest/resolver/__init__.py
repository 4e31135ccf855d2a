from .element_resolver import (
    ElementResolver,
    SCALAR_TYPE_NAMES,
    expand_alias,
    resolve_class_fqn,
    split_member_access,
)
from .usage_index import build_used_by_index, split_annotation_value

__all__ = [
    "ElementResolver",
    "SCALAR_TYPE_NAMES",
    "expand_alias",
    "resolve_class_fqn",
    "split_member_access",
    "build_used_by_index",
    "split_annotation_value",
]
