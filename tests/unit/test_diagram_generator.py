"""
Tests for graphviz diagram generation.

Diagrams are checked through their DOT source; rendering is replaced so
the tests do not need the graphviz executables.
"""

import graphviz
import pytest

from apiforest.architecture.diagram_generator import DiagramGenerator, escape_label
from apiforest.grouping.group_builder import GroupBuilder
from apiforest.models.registry import ElementRegistry
from apiforest.reports.listings import collect_statistics
from apiforest.tree.forest_builder import TreeBuilder
from apiforest.utils.config import Config

from tests.fixtures.elements import make_class


@pytest.fixture
def config(monkeypatch):
    monkeypatch.delenv("APIFOREST_DIAGRAM_FORMAT", raising=False)
    monkeypatch.delenv("APIFOREST_MAX_CLASSES_IN_DIAGRAM", raising=False)
    return Config()


@pytest.fixture
def chain_forest():
    registry = ElementRegistry(classes=[
        make_class("App\\A"), make_class("App\\B", parent="App\\A"), make_class("App\\C", parent="App\\B"),
    ])
    return TreeBuilder().build(registry).classes


def test_escape_label():
    assert escape_label("App\\Foo") == "App\\\\Foo"
    assert escape_label("Foo") == "Foo"


class TestForestDiagram:
    """Tests for build_forest_diagram."""

    def test_edges_point_at_parents(self, config, chain_forest):
        source = DiagramGenerator(config).build_forest_diagram(chain_forest).source

        assert "n1 -> n0" in source
        assert "n2 -> n1" in source
        assert "App\\\\C" in source
        assert "lightblue" in source

    def test_node_limit(self, config, chain_forest):
        config.max_classes_in_diagram = 2

        source = DiagramGenerator(config).build_forest_diagram(chain_forest).source

        assert "n1 -> n0" in source
        assert "n2" not in source


class TestGroupDiagram:
    """Tests for build_group_diagram."""

    def test_groups_and_subgroup_edges(self, config, registry):
        grouping = GroupBuilder(config).categorize(registry)

        source = DiagramGenerator(config).build_group_diagram(grouping).source

        assert "g0 -> g1" in source
        assert "8 elements" in source
        assert "folder" in source


class TestGenerateAll:
    """Tests for generate_all and the report."""

    def test_renders_every_diagram(self, config, registry, tmp_path, monkeypatch):
        rendered = []

        def fake_render(self, filename, cleanup=False):
            rendered.append(filename)
            return f"{filename}.png"

        monkeypatch.setattr(graphviz.Digraph, "render", fake_render)
        grouping = GroupBuilder(config).categorize(registry)
        forests = TreeBuilder().build(registry)

        generated = DiagramGenerator(config).generate_all(
            forests, grouping, tmp_path / "out", collect_statistics(registry)
        )

        assert [path.name for path in generated] == [
            "classes_tree.png", "interfaces_tree.png", "traits_tree.png",
            "exceptions_tree.png", "namespaces.png", "structure_report.md",
        ]
        assert len(rendered) == 5

        report = (tmp_path / "out" / "structure_report.md").read_text(encoding="utf-8")
        assert "# API Structure Report" in report
        assert "7 documented of 8" in report
        assert "## Namespaces" in report
        assert "- `App\\Lib`: 1 classes" in report

    def test_render_failure_is_skipped(self, config, registry, tmp_path, monkeypatch):
        def failing_render(self, filename, cleanup=False):
            raise graphviz.ExecutableNotFound(["dot"])

        monkeypatch.setattr(graphviz.Digraph, "render", failing_render)
        grouping = GroupBuilder(config).categorize(registry)

        generated = DiagramGenerator(config).generate_all(TreeBuilder().build(registry), grouping, tmp_path)

        assert [path.name for path in generated] == ["structure_report.md"]

    def test_empty_forests_are_not_rendered(self, config, tmp_path, monkeypatch):
        monkeypatch.setattr(graphviz.Digraph, "render", lambda self, filename, cleanup=False: filename)
        registry = ElementRegistry(classes=[make_class("Foo")])

        generated = DiagramGenerator(config).generate_all(
            TreeBuilder().build(registry), GroupBuilder(config).categorize(registry), tmp_path
        )

        assert [path.name for path in generated] == ["classes_tree.png", "structure_report.md"]
