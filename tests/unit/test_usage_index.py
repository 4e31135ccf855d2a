"""
Tests for the @uses -> used by index.
"""

import copy

import pytest

from apiforest.models.registry import ElementRegistry
from apiforest.resolver.element_resolver import ElementResolver
from apiforest.resolver.usage_index import build_used_by_index, split_annotation_value

from tests.fixtures.elements import make_class, make_function


class TestSplitAnnotationValue:
    """Tests for split_annotation_value."""

    @pytest.mark.parametrize("value,expected", [
        ("Foo::bar()", ("Foo::bar()", "")),
        ("Foo::bar() does things", ("Foo::bar()", "does things")),
        ("  Foo   does  two things ", ("Foo", "does  two things")),
        ("", ("", "")),
    ])
    def test_split(self, value, expected):
        assert split_annotation_value(value) == expected


class TestBuildUsedByIndex:
    """Tests for build_used_by_index."""

    def test_member_uses(self, resolver, registry):
        used_by = build_used_by_index(resolver, registry.classes)

        assert used_by == {"App\\Lib\\Bar::baz()": ["App\\Foo::run() to do the work"]}

    def test_class_and_function_uses(self):
        target = make_class("App\\B")
        user = make_class("App\\A", annotations={"uses": ["B", "Nowhere ignored"]})
        function = make_function("App\\f", annotations={"uses": ["B  something"]})
        registry = ElementRegistry(classes=[target, user], functions=[function])

        used_by = build_used_by_index(ElementResolver(registry), [*registry.classes, *registry.functions])

        assert used_by == {"App\\B": ["App\\A", "App\\f() something"]}

    def test_elements_are_not_modified(self, resolver, registry):
        foo = registry.find_class("App\\Foo")
        before = copy.deepcopy(foo.methods["run"].annotations)

        build_used_by_index(resolver, [foo])

        assert foo.methods["run"].annotations == before
        assert not registry.find_class("App\\Lib\\Bar").methods["baz"].has_annotation("usedby")
