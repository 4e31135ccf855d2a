"""Builders for element model objects used across tests."""

from typing import Dict, List, Optional

from apiforest.models.element import (
    ClassElement,
    Element,
    ElementKind,
    FunctionElement,
    MemberElement,
    ParameterElement,
)


def make_member(name: str, kind: ElementKind = ElementKind.METHOD, documented: bool = True,
                annotations: Optional[Dict[str, List[str]]] = None,
                parameters: Optional[List[str]] = None) -> MemberElement:
    member = MemberElement(name=name, kind=kind, documented=documented, annotations=annotations or {})
    for parameter in parameters or []:
        member.add_parameter(ParameterElement(name=parameter, kind=ElementKind.PARAMETER))
    return member


def make_class(name: str, kind: ElementKind = ElementKind.CLASS, parent: Optional[str] = None,
               members: Optional[List[MemberElement]] = None, **kwargs) -> ClassElement:
    cls = ClassElement(name=name, kind=kind, parent_class_name=parent, **kwargs)
    for member in members or []:
        cls.add_member(member)
    return cls


def make_function(name: str, parameters: Optional[List[str]] = None, **kwargs) -> FunctionElement:
    function = FunctionElement(name=name, kind=ElementKind.FUNCTION, **kwargs)
    for parameter in parameters or []:
        function.add_parameter(ParameterElement(name=parameter, kind=ElementKind.PARAMETER))
    return function


def make_constant(name: str, **kwargs) -> Element:
    return Element(name=name, kind=ElementKind.CONSTANT, **kwargs)
