"""
Tests for the element model.

Organization
------------
- TestElementKind: kind classification
- TestNames: short, namespace and pretty names
- TestPseudoNames: pseudo-namespace and pseudo-package names
- TestClassElement: member attachment
"""

import pytest

from apiforest.models.element import (
    ClassElement,
    Element,
    ElementKind,
    MemberElement,
    ParameterElement,
    split_name,
)

from tests.fixtures.elements import make_class, make_constant, make_function, make_member


class TestElementKind:
    """Tests for ElementKind properties."""

    @pytest.mark.parametrize("kind,bucket", [
        (ElementKind.CLASS, "classes"),
        (ElementKind.INTERFACE, "interfaces"),
        (ElementKind.TRAIT, "traits"),
        (ElementKind.EXCEPTION, "exceptions"),
    ])
    def test_class_like_kinds(self, kind, bucket):
        assert kind.is_class_like
        assert not kind.is_member
        assert kind.element_type == bucket

    def test_member_kinds(self):
        for kind in (ElementKind.METHOD, ElementKind.PROPERTY, ElementKind.CLASS_CONSTANT):
            assert kind.is_member
            assert not kind.is_class_like
            assert kind.element_type is None

    def test_top_level_buckets(self):
        assert ElementKind.CONSTANT.element_type == "constants"
        assert ElementKind.FUNCTION.element_type == "functions"
        assert ElementKind.PARAMETER.element_type is None


class TestNames:
    """Tests for name derivation."""

    def test_split_name(self):
        assert split_name("App\\Lib\\Bar") == ("App\\Lib", "Bar")
        assert split_name("\\Bar") == ("", "Bar")
        assert split_name("Bar") == ("", "Bar")

    def test_namespace_derived_from_name(self):
        cls = make_class("App\\Lib\\Bar")

        assert cls.namespace_name == "App\\Lib"
        assert cls.short_name == "Bar"

    def test_explicit_namespace_is_kept(self):
        element = Element(name="App\\VERSION", kind=ElementKind.CONSTANT, namespace="Other")

        assert element.namespace_name == "Other"

    def test_pretty_names(self):
        cls = make_class("App\\Foo", members=[
            make_member("run", parameters=["input"]),
            make_member("count", ElementKind.PROPERTY),
            make_member("LIMIT", ElementKind.CLASS_CONSTANT),
        ])
        function = make_function("App\\helper", parameters=["value"])

        assert cls.pretty_name == "App\\Foo"
        assert cls.methods["run"].pretty_name == "App\\Foo::run()"
        assert cls.properties["count"].pretty_name == "App\\Foo::$count"
        assert cls.constants["LIMIT"].pretty_name == "App\\Foo::LIMIT"
        assert cls.methods["run"].parameters[0].pretty_name == "App\\Foo::run($input)"
        assert function.pretty_name == "App\\helper()"
        assert function.parameters[0].pretty_name == "App\\helper($value)"
        assert make_constant("App\\VERSION").pretty_name == "App\\VERSION"

    def test_elements_compare_by_identity(self):
        assert make_constant("A") != make_constant("A")


class TestPseudoNames:
    """Tests for grouping names."""

    def test_namespace_name(self):
        assert make_class("App\\Foo").pseudo_namespace_name == "App"
        assert make_class("Foo").pseudo_namespace_name == "None"

    def test_internal_elements_group_under_php(self):
        internal = make_class("ArrayObject", tokenized=False, annotations={"package": ["Core"]})

        assert internal.is_internal
        assert internal.pseudo_namespace_name == "PHP"
        assert internal.pseudo_package_name == "PHP"

    def test_package_without_annotation(self):
        assert make_class("App\\Foo").pseudo_package_name == "None"
        assert make_class("App\\Foo", annotations={"package": [""]}).pseudo_package_name == "None"

    def test_package_takes_first_word(self):
        cls = make_class("Foo", annotations={"package": ["Core  main package"]})

        assert cls.pseudo_package_name == "Core"

    def test_package_separators_are_normalized(self):
        assert make_class("Foo", annotations={"package": ["Core.Http"]}).pseudo_package_name == "Core\\Http"
        assert make_class("Foo", annotations={"package": ["Core/Http"]}).pseudo_package_name == "Core\\Http"

    def test_subpackage_is_appended(self):
        cls = make_class("Foo", annotations={"package": ["Core"], "subpackage": ["Http client"]})

        assert cls.pseudo_package_name == "Core\\Http"

    def test_subpackage_without_package_is_ignored(self):
        cls = make_class("Foo", annotations={"subpackage": ["Http"]})

        assert cls.pseudo_package_name == "None"

    def test_deprecated_annotation(self):
        assert make_class("Foo", annotations={"deprecated": [""]}).is_deprecated
        assert not make_class("Foo").is_deprecated


class TestClassElement:
    """Tests for member attachment."""

    def test_add_member_sets_owner_and_namespace(self):
        member = make_member("run", parameters=["input"])
        cls = make_class("App\\Foo", namespace_aliases={"Bar": "App\\Bar"}, members=[member])

        assert member.declaring_class_name == "App\\Foo"
        assert member.namespace_name == "App"
        assert member.namespace_aliases == {"Bar": "App\\Bar"}
        assert member.parameters[0].declaring_class_name == "App\\Foo"
        assert member.parameters[0].declaring_function_name == "run"
        assert cls.methods == {"run": member}

    def test_members_are_filed_by_kind(self):
        cls = make_class("Foo", members=[
            make_member("count", ElementKind.PROPERTY),
            make_member("run"),
            make_member("LIMIT", ElementKind.CLASS_CONSTANT),
        ])

        assert [m.name for m in cls.own_members()] == ["run", "LIMIT", "count"]

    def test_non_member_kind_is_rejected(self):
        cls = ClassElement(name="Foo", kind=ElementKind.CLASS)

        with pytest.raises(ValueError):
            cls.add_member(MemberElement(name="helper", kind=ElementKind.FUNCTION))

    def test_parameter_short_name(self):
        parameter = ParameterElement(name="input", kind=ElementKind.PARAMETER)

        assert parameter.short_name == "input"
