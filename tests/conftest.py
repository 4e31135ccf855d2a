"""
Shared pytest fixtures for apiforest tests.

Fixture Organization
--------------------
- **registry**: a small namespaced project (App, App\\Lib) with inheritance,
  an interface, a trait, exceptions, constants and functions
- **resolver**: ElementResolver over that registry
- **snapshot_file**: a similar project written as a YAML snapshot

Element builders live in tests/fixtures/elements.py.
"""

from pathlib import Path

import pytest

from apiforest.models.element import ElementKind
from apiforest.models.registry import ElementRegistry
from apiforest.resolver.element_resolver import ElementResolver

from tests.fixtures.elements import make_class, make_constant, make_function, make_member


# ============================================================================
# Project fixtures
# ============================================================================


@pytest.fixture
def registry() -> ElementRegistry:
    """A small documented project.

    App\\Base            class with run(), __construct(), $count, LIMIT
    App\\Foo extends Base, implements Runnable, uses Loggable, alias Bar
    App\\Lib\\Bar        class with baz() and an undocumented secret()
    App\\Lib\\Hidden     undocumented class
    App\\Runnable        interface with start() and MODE
    App\\Loggable        trait with log()
    App\\Error, App\\NotFound   exceptions
    App\\VERSION, App\\helper(), format_name()
    """
    base = make_class("App\\Base", members=[
        make_member("run"),
        make_member("__construct", parameters=["options"]),
        make_member("count", ElementKind.PROPERTY),
        make_member("LIMIT", ElementKind.CLASS_CONSTANT),
    ], annotations={"package": ["Core"]})

    foo = make_class(
        "App\\Foo",
        parent="App\\Base",
        interface_names=["App\\Runnable"],
        trait_names=["App\\Loggable"],
        namespace_aliases={"Bar": "App\\Lib\\Bar", "Lib": "App\\Lib"},
        members=[
            make_member("run", annotations={"uses": ["App\\Lib\\Bar::baz() to do the work"]}),
            make_member("process", parameters=["input"]),
            make_member("items", ElementKind.PROPERTY),
        ],
        annotations={"package": ["Core"], "subpackage": ["Http"], "see": ["Bar", "Missing::thing"]},
    )

    bar = make_class("App\\Lib\\Bar", members=[
        make_member("baz"),
        make_member("secret", documented=False),
    ], annotations={"package": ["Lib"]})

    hidden = make_class("App\\Lib\\Hidden", documented=False)
    runnable = make_class("App\\Runnable", kind=ElementKind.INTERFACE, members=[
        make_member("start"),
        make_member("MODE", ElementKind.CLASS_CONSTANT),
    ])
    loggable = make_class("App\\Loggable", kind=ElementKind.TRAIT, members=[make_member("log")])
    error = make_class("App\\Error", kind=ElementKind.EXCEPTION)
    not_found = make_class("App\\NotFound", kind=ElementKind.EXCEPTION, parent="App\\Error")

    return ElementRegistry(
        classes=[base, foo, bar, hidden, runnable, loggable, error, not_found],
        constants=[make_constant("App\\VERSION")],
        functions=[
            make_function("App\\helper", parameters=["value"]),
            make_function("format_name", parameters=["name"]),
        ],
    )


@pytest.fixture
def resolver(registry: ElementRegistry) -> ElementResolver:
    return ElementResolver(registry)


SNAPSHOT_YAML = r"""
classes:
  - name: App\Base
    kind: class
    package: Core
    methods:
      - name: run
    properties:
      - name: $count
  - name: App\Foo
    kind: class
    parent: App\Base
    interfaces: [App\Runnable]
    package: Core
    aliases: {Bar: App\Lib\Bar}
    annotations:
      see: ['Bar::baz()', 'Nowhere::nothing']
      uses: ['Bar::baz() for the heavy lifting']
    methods:
      - name: process
        parameters: [{name: $input}]
  - name: App\Lib\Bar
    kind: class
    package: Lib
    deprecated: true
    methods:
      - name: baz
  - name: App\Runnable
    kind: interface
  - name: App\Error
    kind: exception
  - name: App\NotFound
    kind: exception
    parent: App\Error
constants:
  - name: App\VERSION
functions:
  - name: App\helper
    annotations: {todo: [finish the formatting]}
    parameters: [{name: value}]
"""


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.yaml"
    path.write_text(SNAPSHOT_YAML, encoding="utf-8")
    return path
