"""
Load a parsed element snapshot from YAML or JSON

Source parsing happens upstream; this module only turns its output into
the element model. A snapshot looks like:

    classes:
      - name: App\\Foo
        kind: class
        parent: App\\Base
        aliases: {Bar: App\\Lib\\Bar}
        methods:
          - name: run
            parameters: [{name: input}]
    constants:
      - name: App\\VERSION
    functions:
      - name: App\\helper
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..models.element import (
    ClassElement,
    Element,
    ElementKind,
    FunctionElement,
    MemberElement,
    ParameterElement,
)
from ..models.registry import ElementRegistry

logger = logging.getLogger(__name__)

CLASS_KIND_NAMES = {kind.value: kind for kind in ElementKind if kind.is_class_like}


class SnapshotError(ValueError):
    """The snapshot file or data is malformed"""


def _as_list(value: Any, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"'{what}' must be a list, got {type(value).__name__}")
    return value


def _as_mapping(value: Any, what: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SnapshotError(f"'{what}' must be a mapping, got {type(value).__name__}")
    return value


def _as_flag(value: Any, what: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise SnapshotError(f"'{what}' must be true or false, got {value!r}")
    return value


class SnapshotLoader:
    """Builds an ElementRegistry from snapshot data"""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load(self, path: Path) -> ElementRegistry:
        """Read a snapshot file; JSON is accepted as a subset of YAML"""
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise SnapshotError(f"Couldn't read snapshot {path}: {e}") from e
        except yaml.YAMLError as e:
            raise SnapshotError(f"Snapshot {path} is not valid YAML/JSON: {e}") from e

        try:
            registry = self.load_data(data)
        except SnapshotError as e:
            raise SnapshotError(f"{path}: {e}") from e

        logger.info(f"Loaded {len(registry)} elements from {path}")
        return registry

    def load_data(self, data: Optional[Dict[str, Any]]) -> ElementRegistry:
        data = _as_mapping(data, "snapshot")
        classes = [self._parse_class(entry) for entry in _as_list(data.get("classes"), "classes")]
        constants = [self._parse_constant(entry) for entry in _as_list(data.get("constants"), "constants")]
        functions = [self._parse_function(entry) for entry in _as_list(data.get("functions"), "functions")]
        return ElementRegistry(classes=classes, constants=constants, functions=functions)

    def _common(self, entry: Any, what: str) -> Dict[str, Any]:
        """Fields every element shares"""
        entry = _as_mapping(entry, what)
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise SnapshotError(f"{what} entry without a name: {entry!r}")

        annotations = {
            str(key): [str(v) for v in (values if isinstance(values, list) else [values])]
            for key, values in _as_mapping(entry.get("annotations"), f"{name}.annotations").items()
        }
        for shorthand in ("package", "subpackage"):
            if entry.get(shorthand):
                annotations.setdefault(shorthand, [str(entry[shorthand])])
        if _as_flag(entry.get("deprecated"), f"{name}.deprecated", False):
            annotations.setdefault("deprecated", [""])

        return {
            "name": name,
            "documented": _as_flag(entry.get("documented"), f"{name}.documented", True),
            "tokenized": _as_flag(entry.get("tokenized"), f"{name}.tokenized", True),
            "main": _as_flag(entry.get("main"), f"{name}.main", True),
            "annotations": annotations,
            "namespace_aliases": {
                str(alias): str(target)
                for alias, target in _as_mapping(entry.get("aliases"), f"{name}.aliases").items()
            },
            "namespace": entry.get("namespace"),
        }

    def _parse_class(self, entry: Any) -> ClassElement:
        fields = self._common(entry, "class")
        kind_name = entry.get("kind", "class")
        kind = CLASS_KIND_NAMES.get(kind_name)
        if kind is None:
            raise SnapshotError(f"{fields['name']}: unknown class kind '{kind_name}'")

        cls = ClassElement(
            kind=kind,
            parent_class_name=entry.get("parent"),
            interface_names=[str(n) for n in _as_list(entry.get("interfaces"), f"{fields['name']}.interfaces")],
            trait_names=[str(n) for n in _as_list(entry.get("traits"), f"{fields['name']}.traits")],
            **fields,
        )

        for key, kind in (("methods", ElementKind.METHOD),
                          ("properties", ElementKind.PROPERTY),
                          ("constants", ElementKind.CLASS_CONSTANT)):
            for member_entry in _as_list(entry.get(key), f"{cls.name}.{key}"):
                cls.add_member(self._parse_member(member_entry, kind, cls.name))
        return cls

    def _parse_member(self, entry: Any, kind: ElementKind, class_name: str) -> MemberElement:
        fields = self._common(entry, f"{class_name} member")
        if kind is ElementKind.PROPERTY:
            fields["name"] = fields["name"].lstrip("$")
        member = MemberElement(kind=kind, **fields)
        for parameter_entry in _as_list(entry.get("parameters"), f"{class_name}::{member.name}.parameters"):
            member.add_parameter(self._parse_parameter(parameter_entry))
        return member

    def _parse_parameter(self, entry: Any) -> ParameterElement:
        fields = self._common(entry, "parameter")
        fields["name"] = fields["name"].lstrip("$")
        return ParameterElement(kind=ElementKind.PARAMETER, **fields)

    def _parse_constant(self, entry: Any) -> Element:
        return Element(kind=ElementKind.CONSTANT, **self._common(entry, "constant"))

    def _parse_function(self, entry: Any) -> FunctionElement:
        fields = self._common(entry, "function")
        function = FunctionElement(kind=ElementKind.FUNCTION, **fields)
        for parameter_entry in _as_list(entry.get("parameters"), f"{function.name}.parameters"):
            function.add_parameter(self._parse_parameter(parameter_entry))
        return function
