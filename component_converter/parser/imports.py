"""Import statement analysis and categorization."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from ..ir.metadata import ImportCategory, ImportInfo
from ..mappings.icons import is_icon_package
from ..mappings.primitive_props import PRIMITIVE_PACKAGE_PREFIX
from .source import SourceUnit, call_name, field, named_children, node_text, string_value, walk_nodes

CLASS_MERGE_NAME = "cn"
VARIANT_BUILDER_NAME = "cva"

_UTILITY_PACKAGES = frozenset({"clsx", "tailwind-merge", "class-variance-authority"})
_STYLE_SUFFIXES = (".css", ".scss", ".sass", ".less")


def categorize_import(source: str, named_imports: List[str]) -> ImportCategory:
    if source == "react" or source.startswith("react/") or source.startswith("react-dom"):
        return ImportCategory.REACT
    if source.startswith(PRIMITIVE_PACKAGE_PREFIX):
        return ImportCategory.PRIMITIVE
    if is_icon_package(source):
        return ImportCategory.ICON
    if (
        "/utils" in source
        or source in _UTILITY_PACKAGES
        or CLASS_MERGE_NAME in named_imports
        or VARIANT_BUILDER_NAME in named_imports
    ):
        return ImportCategory.UTILITY
    if source.endswith(_STYLE_SUFFIXES) or "styles" in source:
        return ImportCategory.STYLE
    return ImportCategory.OTHER


def _parse_import(node: Node) -> Optional[ImportInfo]:
    source = string_value(field(node, "source"))
    if source is None:
        return None
    info = ImportInfo(source=source)
    info.is_type_only = any(child.type == "type" for child in node.children)
    for clause in named_children(node):
        if clause.type != "import_clause":
            continue
        for part in named_children(clause):
            if part.type == "identifier":
                info.default_import = node_text(part)
            elif part.type == "namespace_import":
                identifiers = [c for c in named_children(part) if c.type == "identifier"]
                if identifiers:
                    info.namespace_import = node_text(identifiers[0])
            elif part.type == "named_imports":
                for specifier in named_children(part):
                    if specifier.type != "import_specifier":
                        continue
                    local = field(specifier, "alias") or field(specifier, "name")
                    info.named_imports.append(node_text(local))
    info.category = categorize_import(source, info.named_imports)
    return info


def analyze_imports(unit: SourceUnit) -> List[ImportInfo]:
    """Every import statement of the unit, in source order."""
    imports: List[ImportInfo] = []
    for node in unit.top_level():
        if node.type != "import_statement":
            continue
        info = _parse_import(node)
        if info is not None:
            imports.append(info)
    return imports


def uses_class_merge(unit: SourceUnit, imports: List[ImportInfo]) -> bool:
    """True only when ``cn`` is both imported and called somewhere in the unit."""
    if not any(info.binds(CLASS_MERGE_NAME) for info in imports):
        return False
    return any(
        node.type == "call_expression" and call_name(node) == CLASS_MERGE_NAME
        for node in walk_nodes(unit.root)
    )


def namespace_sources(imports: List[ImportInfo]) -> dict:
    """Namespace identifier to module source, e.g. ``SwitchPrimitives`` to ``@radix-ui/react-switch``."""
    return {info.namespace_import: info.source for info in imports if info.namespace_import}


__all__ = [
    "CLASS_MERGE_NAME",
    "VARIANT_BUILDER_NAME",
    "categorize_import",
    "analyze_imports",
    "uses_class_merge",
    "namespace_sources",
]
