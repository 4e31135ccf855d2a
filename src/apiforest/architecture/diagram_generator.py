import logging
import datetime
from pathlib import Path
from typing import List, Optional

import graphviz

from ..grouping.group_builder import GroupingResult
from ..models.element import ELEMENT_TYPES, ElementKind
from ..reports.listings import DocumentationStatistics
from ..tree.forest_builder import Forest, HierarchyForests

logger = logging.getLogger(__name__)

FOREST_STYLES = {
    ElementKind.CLASS: ('box', 'lightblue'),
    ElementKind.INTERFACE: ('diamond', 'lightyellow'),
    ElementKind.TRAIT: ('component', 'lightgreen'),
    ElementKind.EXCEPTION: ('box', 'lightcoral'),
}


def escape_label(name: str) -> str:
    """Backslashes start escape sequences in DOT labels"""
    return name.replace('\\', '\\\\')


class DiagramGenerator:
    """Render hierarchy forests and the group structure with graphviz"""

    def __init__(self, config):
        self.config = config

    def generate_all(self, forests: HierarchyForests, grouping: GroupingResult,
                     output_dir: Path, statistics: Optional[DocumentationStatistics] = None) -> List[Path]:
        """Render every non-empty diagram into output_dir"""
        output_dir.mkdir(parents=True, exist_ok=True)
        generated = []

        for name, forest in forests.items():
            if not forest:
                continue
            path = self._render(self.build_forest_diagram(forest), output_dir / f'{name}_tree')
            if path:
                generated.append(path)

        if grouping.groups:
            path = self._render(self.build_group_diagram(grouping), output_dir / f'{grouping.mode.value}')
            if path:
                generated.append(path)

        generated.append(self.write_report(forests, grouping, output_dir, statistics))

        logger.info(f"Generated {len(generated)} diagram files")
        return generated

    def _render(self, dot: graphviz.Digraph, output_file: Path) -> Optional[Path]:
        try:
            dot.render(str(output_file), cleanup=True)
        except (graphviz.ExecutableNotFound, graphviz.CalledProcessError) as e:
            logger.warning(f"Couldn't render {output_file.name}: {e}")
            return None
        return output_file.with_suffix(f'.{self.config.diagram_format}')

    def build_forest_diagram(self, forest: Forest) -> graphviz.Digraph:
        """Inheritance hierarchy, children pointing at their parents"""
        dot = graphviz.Digraph(comment=f'{forest.kind.value.title()} Hierarchy', format=self.config.diagram_format)
        dot.attr(rankdir='BT', bgcolor='white')
        dot.attr('node', fontname='Arial', fontsize='9')

        shape, fillcolor = FOREST_STYLES[forest.kind]
        max_classes = getattr(self.config, 'max_classes_in_diagram', 50)

        node_ids = {}
        parents = []  # Ancestor node id per depth
        for depth, name, _ in forest.walk():
            if len(node_ids) >= max_classes:
                logger.info(f"Showing {max_classes} of {len(forest)} {forest.kind.value} nodes in diagram")
                break

            node_id = f'n{len(node_ids)}'
            node_ids[name] = node_id
            dot.node(node_id, escape_label(name), shape=shape, style='filled', fillcolor=fillcolor)

            del parents[depth:]
            if parents:
                dot.edge(node_id, parents[-1], arrowhead='empty', color='blue')
            parents.append(node_id)

        return dot

    def build_group_diagram(self, grouping: GroupingResult) -> graphviz.Digraph:
        """Namespace or package structure with element counts"""
        dot = graphviz.Digraph(comment=f'{grouping.mode.value.title()} Structure', format=self.config.diagram_format)
        dot.attr(rankdir='TB', bgcolor='white')
        dot.attr('node', fontname='Arial', fontsize='9')

        node_ids = {name: f'g{i}' for i, name in enumerate(grouping.names)}

        for name, group in grouping.groups.items():
            label = f"{escape_label(name)}\\n({len(group)} elements)"
            fillcolor = 'lightgray' if group.is_empty else 'lightblue'
            dot.node(node_ids[name], label, shape='folder', style='filled', fillcolor=fillcolor)

        for name in grouping.groups:
            for child in grouping.subgroups(name):
                dot.edge(node_ids[name], node_ids[child], color='gray', arrowsize='0.7')

        return dot

    def write_report(self, forests: HierarchyForests, grouping: GroupingResult,
                     output_dir: Path, statistics: Optional[DocumentationStatistics] = None) -> Path:
        """Markdown summary next to the diagrams"""
        report_lines = [
            "# API Structure Report",
            "",
            f"**Generated:** {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
        ]

        if statistics is not None:
            report_lines.extend([
                "## Overview",
                f"- **Classes:** {statistics.documented_classes} documented of {statistics.classes}",
                f"- **Constants:** {statistics.documented_constants} documented of {statistics.constants}",
                f"- **Functions:** {statistics.documented_functions} documented of {statistics.functions}",
                f"- **Internal classes:** {statistics.internal_classes}",
                "",
            ])

        report_lines.extend([
            "## Hierarchies",
            *[f"- **{name.title()}:** {len(forest.roots())} roots, {len(forest)} nodes"
              for name, forest in forests.items()],
            "",
        ])

        if grouping.groups:
            report_lines.append(f"## {grouping.mode.value.title()}")
            for name, group in list(grouping.groups.items())[:20]:
                counts = ", ".join(
                    f"{len(group.bucket(t))} {t}" for t in ELEMENT_TYPES if group.bucket(t)
                )
                report_lines.append(f"- `{name}`" + (f": {counts}" if counts else ""))

            if len(grouping.groups) > 20:
                report_lines.append(f"- ... and {len(grouping.groups) - 20} more")

            report_lines.append("")

        report_file = output_dir / "structure_report.md"
        with open(report_file, 'w', encoding='utf-8') as f:
            f.write('\n'.join(report_lines))

        return report_file
