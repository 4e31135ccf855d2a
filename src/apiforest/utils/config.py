import os
import logging
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

GROUP_MODES = ("auto", "namespaces", "packages", "none")
AUTOCOMPLETE_KINDS = ("classes", "constants", "functions", "methods", "properties", "classconstants")
DIAGRAM_FORMATS = ("png", "svg", "pdf", "dot")


@dataclass
class Config:
    """Configuration for an apiforest run"""

    # Grouping
    groups: str = "auto"  # auto, namespaces, packages or none
    main: str = ""  # Groups with this prefix are listed first

    # Optional listings
    tree: bool = True
    deprecated: bool = False
    todo: bool = False
    autocomplete: List[str] = field(default_factory=lambda: ["classes", "constants", "functions"])

    # Annotations whose values are cross-references
    reference_annotations: List[str] = field(default_factory=lambda: ["see", "uses"])

    # Snapshot files
    encoding: str = "utf-8"

    # Diagram settings
    diagram_format: str = "png"
    max_classes_in_diagram: int = 50  # Keep diagrams readable

    show_progress: bool = True

    def __post_init__(self):
        """Load from environment and validate settings"""
        self._load_from_env()
        self._validate_settings()

    def _load_from_env(self):
        """Load settings from environment variables"""
        if os.getenv('APIFOREST_GROUPS'):
            self.groups = os.getenv('APIFOREST_GROUPS')

        if os.getenv('APIFOREST_MAIN'):
            self.main = os.getenv('APIFOREST_MAIN')

        if os.getenv('APIFOREST_DIAGRAM_FORMAT'):
            self.diagram_format = os.getenv('APIFOREST_DIAGRAM_FORMAT')

        if os.getenv('APIFOREST_MAX_CLASSES_IN_DIAGRAM'):
            try:
                self.max_classes_in_diagram = int(os.getenv('APIFOREST_MAX_CLASSES_IN_DIAGRAM'))
            except ValueError:
                pass

    def _validate_settings(self):
        """Fall back to defaults for values that make no sense"""
        if not isinstance(self.groups, str) or self.groups.lower() not in GROUP_MODES:
            logger.warning(f"Unknown group mode {self.groups!r}, using 'auto'")
            self.groups = "auto"
        self.groups = self.groups.lower()

        self.main = str(self.main) if self.main else ""

        if isinstance(self.autocomplete, str):
            self.autocomplete = [self.autocomplete]
        elif not isinstance(self.autocomplete, list):
            logger.warning(f"Autocomplete must be a list of kinds, got {self.autocomplete!r}")
            self.autocomplete = ["classes", "constants", "functions"]

        unknown = [kind for kind in self.autocomplete if kind not in AUTOCOMPLETE_KINDS]
        if unknown:
            logger.warning(f"Ignoring unknown autocomplete kinds: {', '.join(unknown)}")
            self.autocomplete = [kind for kind in self.autocomplete if kind in AUTOCOMPLETE_KINDS]

        if self.diagram_format not in DIAGRAM_FORMATS:
            logger.warning(f"Unsupported diagram format '{self.diagram_format}', using 'png'")
            self.diagram_format = "png"

        if self.max_classes_in_diagram <= 0:
            self.max_classes_in_diagram = 50

    @classmethod
    def from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from YAML file"""
        config = cls()

        if not config_path.exists():
            return config

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f) or {}

            # Update config with file values
            for key, value in data.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        except (OSError, yaml.YAMLError, AttributeError) as e:
            logger.warning(f"Couldn't load config file {config_path}: {e}")

        config._validate_settings()
        return config
