"""TSX component parsing: syntax tree, analyzers and IR conversion."""

from .components import ComponentKind, DiscoveredComponent, discover_components
from .core import parse_source
from .cva import analyze_variant_configs
from .imports import analyze_imports, categorize_import
from .jsx import JSXConverter
from .props import detect_state_props
from .source import SourceUnit

__all__ = [
    "parse_source",
    "SourceUnit",
    "ComponentKind",
    "DiscoveredComponent",
    "discover_components",
    "analyze_variant_configs",
    "analyze_imports",
    "categorize_import",
    "JSXConverter",
    "detect_state_props",
]
