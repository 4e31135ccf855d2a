#!/usr/bin/env python3
"""
apiforest - resolve documentation cross-references and build API hierarchies

Reads an already-parsed element snapshot, groups the elements by namespace
or package, builds the inheritance forests and resolves the references
found in their annotations.
"""

import sys
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click
import tqdm
from dotenv import load_dotenv

from .utils.config import Config, GROUP_MODES
from .loader.snapshot_loader import SnapshotError, SnapshotLoader
from .models.element import ClassElement, Element
from .models.registry import ElementRegistry
from .resolver.element_resolver import SCALAR_TYPE_NAMES, ElementResolver
from .resolver.usage_index import build_used_by_index, split_annotation_value
from .grouping.group_builder import GroupBuilder, GroupingResult
from .tree.forest_builder import HierarchyForests, TreeBuilder
from .reports.listings import (
    DocumentationStatistics,
    ElementListing,
    autocomplete_entries,
    collect_statistics,
    deprecated_listing,
    todo_listing,
)
from .architecture.diagram_generator import DiagramGenerator

# Load environment variables early
load_dotenv()


def setup_logging(verbose=False):
    """Setup logging for command line runs"""
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return logging.getLogger(__name__)


@dataclass
class Documentation:
    """Everything derived from one snapshot"""
    registry: ElementRegistry
    resolver: ElementResolver
    grouping: GroupingResult
    forests: HierarchyForests
    statistics: DocumentationStatistics
    used_by: Dict[str, List[str]] = field(default_factory=dict)
    deprecated: Optional[ElementListing] = None
    todo: Optional[ElementListing] = None
    autocomplete: List[Tuple[str, str]] = field(default_factory=list)


class ApiForest:
    """Main application class tying the loader and the core together"""

    def __init__(self, config: Config):
        self.config = config
        self.loader = SnapshotLoader(encoding=config.encoding)
        self.logger = logging.getLogger(__name__)

    def load(self, snapshot_path: Path) -> ElementRegistry:
        return self.loader.load(snapshot_path)

    def build(self, registry: ElementRegistry) -> Documentation:
        """Group, build trees and index @uses for a loaded snapshot"""
        statistics = collect_statistics(registry)
        self.logger.info(
            f"{statistics.documented_classes}/{statistics.classes} classes, "
            f"{statistics.documented_constants}/{statistics.constants} constants, "
            f"{statistics.documented_functions}/{statistics.functions} functions documented"
        )

        resolver = ElementResolver(registry)
        grouping = GroupBuilder(self.config).categorize(registry)
        self.logger.info(f"{len(grouping.groups)} groups ({grouping.mode.value})")

        forests = TreeBuilder().build(registry) if self.config.tree else HierarchyForests()
        used_by = build_used_by_index(resolver, grouping.iter_elements())

        # Optional listings
        deprecated = deprecated_listing(grouping) if self.config.deprecated else None
        todo = todo_listing(grouping) if self.config.todo else None

        return Documentation(
            registry=registry,
            resolver=resolver,
            grouping=grouping,
            forests=forests,
            statistics=statistics,
            used_by=used_by,
            deprecated=deprecated,
            todo=todo,
            autocomplete=autocomplete_entries(grouping, self.config.autocomplete),
        )

    def check_references(self, documentation: Documentation) -> List[Tuple[str, str]]:
        """(owner, reference) pairs for every reference that does not resolve"""
        owners: List[Element] = []
        for element in documentation.grouping.iter_elements():
            owners.append(element)
            if isinstance(element, ClassElement):
                owners.extend(m for m in element.own_members() if m.documented)

        unresolved = []
        progress = tqdm.tqdm(owners, desc="Checking references", disable=not self.config.show_progress)
        for owner in progress:
            for annotation in self.config.reference_annotations:
                for value in owner.get_annotation(annotation) or []:
                    link, _ = split_annotation_value(value)
                    if not link or link in SCALAR_TYPE_NAMES or '://' in link:
                        continue
                    if documentation.resolver.resolve(link, owner) is None:
                        unresolved.append((owner.pretty_name, link))

        if unresolved:
            self.logger.warning(f"{len(unresolved)} references could not be resolved")
        else:
            self.logger.info("All references resolved")
        return unresolved


def _load_documentation(ctx, snapshot_path: Path) -> Tuple[ApiForest, Documentation]:
    """Load and build, exiting with status 1 on a broken snapshot"""
    app = ApiForest(ctx.obj['config'])
    try:
        registry = app.load(snapshot_path)
    except SnapshotError as e:
        ctx.obj['logger'].error(str(e))
        sys.exit(1)
    return app, app.build(registry)


snapshot_option = click.option(
    '--snapshot', '-s', 'snapshot_path', required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Parsed element snapshot (YAML or JSON)'
)


@click.group()
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='YAML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Show debug output')
@click.pass_context
def main(ctx, config_path: Optional[Path], verbose: bool):
    """
    Resolve cross-references and build namespace/package groups and
    inheritance trees from a parsed API snapshot.

    Examples:
      apiforest resolve -s api.yaml --context 'App\\Foo' 'Bar::baz()'
      apiforest groups -s api.yaml --mode packages
    """
    logger = setup_logging(verbose)
    config = Config.from_file(config_path) if config_path else Config()
    ctx.obj = {'config': config, 'logger': logger}


@main.command()
@click.argument('reference')
@click.option('--context', 'context_name', required=True,
              help='Pretty name of the element the reference appears in')
@snapshot_option
@click.pass_context
def resolve(ctx, reference: str, context_name: str, snapshot_path: Path):
    """Print the element REFERENCE points at"""
    _, documentation = _load_documentation(ctx, snapshot_path)

    context = documentation.registry.find_by_pretty_name(context_name)
    if context is None:
        ctx.obj['logger'].error(f"Unknown context element: {context_name}")
        sys.exit(1)

    target = documentation.resolver.resolve(reference, context)
    if target is None:
        click.echo(f"{reference}: unresolved")
        sys.exit(1)

    click.echo(f"{target.pretty_name} ({target.kind.value})")


def _by_name(names) -> List[str]:
    return sorted(names, key=str.lower)


@main.command()
@click.argument('name')
@snapshot_option
@click.pass_context
def describe(ctx, name: str, snapshot_path: Path):
    """Show the group, relations and users of the element NAME"""
    _, documentation = _load_documentation(ctx, snapshot_path)
    registry = documentation.registry

    element = registry.find_by_pretty_name(name)
    if element is None:
        ctx.obj['logger'].error(f"Unknown element: {name}")
        sys.exit(1)

    click.echo(f"{element.pretty_name} ({element.kind.value})")

    if not element.kind.is_member:
        group = documentation.grouping.group_of(element)
        if group is not None:
            click.echo(f"Group: {group.name}")

    sections = []
    if isinstance(element, ClassElement):
        sections.extend([
            ("Parents", [parent.name for parent in registry.parent_classes(element)]),
            ("Direct subclasses", _by_name(registry.direct_subclasses(element.name))),
            ("Indirect subclasses", _by_name(registry.indirect_subclasses(element.name))),
            ("Direct implementers", _by_name(registry.direct_implementers(element.name))),
            ("Indirect implementers", _by_name(registry.indirect_implementers(element.name))),
            ("Direct users", _by_name(registry.direct_users(element.name))),
            ("Indirect users", _by_name(registry.indirect_users(element.name))),
        ])
    sections.append(("Used by", documentation.used_by.get(element.pretty_name, [])))

    for title, entries in sections:
        if not entries:
            continue
        click.echo(f"{title}:")
        for entry in entries:
            click.echo(f"  {entry}")


@main.command()
@snapshot_option
@click.option('--mode', type=click.Choice(GROUP_MODES), help='Override the configured group mode')
@click.option('--main', 'main_prefix', help='Groups with this prefix are listed first')
@click.pass_context
def groups(ctx, snapshot_path: Path, mode: Optional[str], main_prefix: Optional[str]):
    """List namespace or package groups"""
    config = ctx.obj['config']
    if mode:
        config.groups = mode
    if main_prefix is not None:
        config.main = main_prefix

    _, documentation = _load_documentation(ctx, snapshot_path)
    grouping = documentation.grouping

    if not grouping.groups:
        click.echo(f"No groups ({grouping.mode.value})")
        return

    click.echo(f"Grouped by {grouping.mode.value}:")
    for name, group in grouping.groups.items():
        click.echo(f"  {name} ({len(group)})")


@main.command()
@snapshot_option
@click.pass_context
def tree(ctx, snapshot_path: Path):
    """Print the class, interface, trait and exception hierarchies"""
    _, documentation = _load_documentation(ctx, snapshot_path)

    for name, forest in documentation.forests.items():
        if not forest:
            continue
        click.echo(f"{name.title()}:")
        for depth, node_name, _ in forest.walk():
            click.echo(f"{'  ' * (depth + 1)}{node_name}")


def _echo_listing(title: str, listing: ElementListing):
    click.echo(f"{title} ({len(listing)}):")
    for element_type, elements in listing.elements.items():
        for element in elements:
            click.echo(f"  {element.pretty_name} ({element_type})")
    for element in [*listing.methods, *listing.constants, *listing.properties]:
        click.echo(f"  {element.pretty_name}")


@main.command()
@snapshot_option
@click.option('--deprecated', is_flag=True, help='List deprecated elements')
@click.option('--todo', is_flag=True, help='List elements with @todo')
@click.option('--autocomplete', is_flag=True, help='Print the search index entries')
@click.pass_context
def listings(ctx, snapshot_path: Path, deprecated: bool, todo: bool, autocomplete: bool):
    """Print deprecated, todo and autocomplete listings"""
    config = ctx.obj['config']
    config.deprecated = config.deprecated or deprecated
    config.todo = config.todo or todo

    _, documentation = _load_documentation(ctx, snapshot_path)

    if documentation.deprecated is not None:
        _echo_listing("Deprecated", documentation.deprecated)
    if documentation.todo is not None:
        _echo_listing("Todo", documentation.todo)
    if autocomplete:
        for tag, name in documentation.autocomplete:
            click.echo(f"{tag}\t{name}")


@main.command()
@snapshot_option
@click.option('--strict', is_flag=True, help='Exit with status 1 when anything is unresolved')
@click.pass_context
def check(ctx, snapshot_path: Path, strict: bool):
    """Resolve every reference annotation and report the dead ones"""
    app, documentation = _load_documentation(ctx, snapshot_path)

    unresolved = app.check_references(documentation)
    for owner, link in unresolved:
        click.echo(f"{owner}: {link}")

    if strict and unresolved:
        sys.exit(1)


@main.command()
@snapshot_option
@click.option('--output', '-o', 'output_dir', required=True, type=click.Path(file_okay=False, path_type=Path),
              help='Directory for the rendered diagrams')
@click.pass_context
def diagrams(ctx, snapshot_path: Path, output_dir: Path):
    """Render hierarchy and group diagrams with graphviz"""
    app, documentation = _load_documentation(ctx, snapshot_path)

    generator = DiagramGenerator(app.config)
    generated = generator.generate_all(
        documentation.forests, documentation.grouping, output_dir, documentation.statistics
    )
    for path in generated:
        click.echo(str(path))


if __name__ == '__main__':
    main()
