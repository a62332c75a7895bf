"""
Intermediate representation for parsed components.

The IR has two halves: the markup node tree (:mod:`.nodes`) and the typed
metadata records extracted by the analyzers (:mod:`.metadata`).
"""

from .metadata import (
    DEFAULT_STATE_PATTERNS,
    ComponentDefinition,
    ComponentMetadata,
    CompoundVariant,
    DataStateValues,
    ImportCategory,
    ImportInfo,
    ParseResult,
    PropDefinition,
    RefForwardConfig,
    SharedMetadata,
    StatePropPattern,
    VariantConfig,
)
from .nodes import (
    CLASS_KEY,
    NO_SLOT_ELEMENTS,
    REF_KEY,
    SPREAD_KEY,
    VOID_ELEMENTS,
    Binding,
    BindingKind,
    ConditionalShow,
    Element,
    Fragment,
    IRNode,
    Slot,
    Text,
    child_nodes,
    contains_slot,
    find_root_element,
    is_void_tag,
    unhandled_node,
    walk,
)

__all__ = [
    "DEFAULT_STATE_PATTERNS",
    "ComponentDefinition",
    "ComponentMetadata",
    "CompoundVariant",
    "DataStateValues",
    "ImportCategory",
    "ImportInfo",
    "ParseResult",
    "PropDefinition",
    "RefForwardConfig",
    "SharedMetadata",
    "StatePropPattern",
    "VariantConfig",
    "CLASS_KEY",
    "NO_SLOT_ELEMENTS",
    "REF_KEY",
    "SPREAD_KEY",
    "VOID_ELEMENTS",
    "Binding",
    "BindingKind",
    "ConditionalShow",
    "Element",
    "Fragment",
    "IRNode",
    "Slot",
    "Text",
    "child_nodes",
    "contains_slot",
    "find_root_element",
    "is_void_tag",
    "unhandled_node",
    "walk",
]
