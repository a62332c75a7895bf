"""
Typed metadata attached to components during parsing.

Every concern the analyzers extract (variant classes, ref forwarding,
imports, state props) has its own record. The consolidation plugin merges the
per-component and unit-wide records into one :class:`ComponentMetadata`, which
is the only metadata generators read.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Union

from ..errors import IRInvariantError, VariantConfigError
from .nodes import IRNode


@dataclass
class CompoundVariant:
    conditions: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
    classes: str = ""


@dataclass
class VariantConfig:
    """
    A named variant-class configuration extracted from a ``cva(...)`` call.

    Construction rejects ``default_variants`` keys that are not variant axes.
    """

    name: str
    base_classes: str = ""
    variants: Dict[str, Dict[str, str]] = field(default_factory=dict)
    default_variants: Dict[str, str] = field(default_factory=dict)
    compound_variants: List[CompoundVariant] = field(default_factory=list)

    def __post_init__(self) -> None:
        unknown = [key for key in self.default_variants if key not in self.variants]
        if unknown:
            raise VariantConfigError(
                f"Variant configuration '{self.name}' declares defaults for unknown "
                f"variant axes: {', '.join(sorted(unknown))}",
                hint="Every defaultVariants key must appear under variants.",
            )

    @property
    def axis_names(self) -> List[str]:
        return list(self.variants)

    def allowed_values(self, axis: str) -> List[str]:
        return list(self.variants.get(axis, {}))

    def union_type(self, axis: str, quote: str = '"') -> str:
        return " | ".join(f"{quote}{value}{quote}" for value in self.allowed_values(axis))


@dataclass
class RefForwardConfig:
    element_type: str = "HTMLElement"
    param_name: str = "ref"


@dataclass(frozen=True)
class DataStateValues:
    true: str
    false: str


@dataclass
class PropDefinition:
    name: str
    type: str = "unknown"
    optional: bool = True
    default_value: Optional[str] = None
    is_variant: bool = False
    allowed_values: Optional[List[str]] = None
    is_state_prop: bool = False
    data_state_values: Optional[DataStateValues] = None
    description: Optional[str] = None
    # Set when the component destructures the prop under another name.
    local_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.is_state_prop and self.data_state_values is None:
            raise IRInvariantError(
                f"State prop '{self.name}' must declare its data-state values"
            )


@dataclass(frozen=True)
class StatePropPattern:
    """
    Detects a boolean state prop and describes the attributes it drives.

    ``value_prop`` and ``change_prop`` must both be declared for the pattern to
    match. ``role`` is only applied to button roots.
    """

    value_prop: str
    change_prop: str
    labels: DataStateValues
    aria_attribute: str
    role: Optional[str] = None

    def matches(self, props: List[PropDefinition]) -> bool:
        names = {prop.name for prop in props}
        return self.value_prop in names and self.change_prop in names

    @property
    def emit_event(self) -> str:
        return f"update:{self.value_prop}"


DEFAULT_STATE_PATTERNS = (
    StatePropPattern(
        value_prop="checked",
        change_prop="onCheckedChange",
        labels=DataStateValues(true="checked", false="unchecked"),
        aria_attribute="aria-checked",
        role="switch",
    ),
    StatePropPattern(
        value_prop="pressed",
        change_prop="onPressedChange",
        labels=DataStateValues(true="on", false="off"),
        aria_attribute="aria-pressed",
    ),
)


class ImportCategory(str, Enum):
    REACT = "react"
    PRIMITIVE = "primitive"
    UTILITY = "utility"
    STYLE = "style"
    ICON = "icon"
    OTHER = "other"


@dataclass
class ImportInfo:
    source: str
    named_imports: List[str] = field(default_factory=list)
    default_import: Optional[str] = None
    namespace_import: Optional[str] = None
    is_type_only: bool = False
    category: ImportCategory = ImportCategory.OTHER

    def binds(self, name: str) -> bool:
        return name in self.named_imports or name in (self.default_import, self.namespace_import)


@dataclass
class ComponentMetadata:
    """The consolidated per-component metadata generators consume."""

    variant: Optional[VariantConfig] = None
    ref_forward: Optional[RefForwardConfig] = None
    imports: List[ImportInfo] = field(default_factory=list)
    uses_class_merge: bool = False
    base_classes: Optional[str] = None
    state_props: List[PropDefinition] = field(default_factory=list)
    state_pattern: Optional[StatePropPattern] = None

    @classmethod
    def field_names(cls) -> FrozenSet[str]:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def from_component(
        cls,
        component: "ComponentDefinition",
        shared: Optional["SharedMetadata"] = None,
        patterns: Sequence[StatePropPattern] = DEFAULT_STATE_PATTERNS,
    ) -> "ComponentMetadata":
        """Merge the unit-wide and per-component extraction results."""
        variant = None
        if shared is not None and component.variant_name:
            variant = shared.variant_configs.get(component.variant_name)
        state_props = [prop for prop in component.props if prop.is_state_prop]
        state_names = {prop.name for prop in state_props}
        pattern = next(
            (p for p in patterns if p.value_prop in state_names and p.matches(component.props)),
            None,
        )
        return cls(
            variant=variant,
            ref_forward=component.ref_forward,
            imports=list(shared.imports) if shared is not None else [],
            uses_class_merge=shared.uses_class_merge if shared is not None else False,
            base_classes=component.base_classes,
            state_props=state_props,
            state_pattern=pattern,
        )


@dataclass
class ComponentDefinition:
    name: str
    root: List[IRNode] = field(default_factory=list)
    props: List[PropDefinition] = field(default_factory=list)
    is_re_export: bool = False
    re_export_target: Optional[str] = None
    variant_name: Optional[str] = None
    ref_forward: Optional[RefForwardConfig] = None
    base_classes: Optional[str] = None
    state: Dict[str, str] = field(default_factory=dict)
    effects: List[str] = field(default_factory=list)
    metadata: Optional[ComponentMetadata] = None

    def find_prop(self, name: str) -> Optional[PropDefinition]:
        for prop in self.props:
            if prop.name == name:
                return prop
        return None

    def has_prop(self, name: str) -> bool:
        return self.find_prop(name) is not None

    def validate(self, variant_configs: Dict[str, VariantConfig]) -> List[str]:
        """Return invariant violations as human readable strings."""
        problems: List[str] = []
        axes = {axis for config in variant_configs.values() for axis in config.variants}
        for prop in self.props:
            if prop.is_variant and prop.name not in axes:
                problems.append(
                    f"Prop '{prop.name}' of {self.name} is marked as a variant but no "
                    "variant configuration declares it"
                )
        return problems


@dataclass
class SharedMetadata:
    variant_configs: Dict[str, VariantConfig] = field(default_factory=dict)
    imports: List[ImportInfo] = field(default_factory=list)
    uses_class_merge: bool = False


@dataclass
class ParseResult:
    primary: Optional[ComponentDefinition]
    components: List[ComponentDefinition] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    shared: SharedMetadata = field(default_factory=SharedMetadata)

    def get(self, name: str) -> Optional[ComponentDefinition]:
        for component in self.components:
            if component.name == name:
                return component
        return None

    @property
    def convertible(self) -> List[ComponentDefinition]:
        return [component for component in self.components if not component.is_re_export]


__all__ = [
    "CompoundVariant",
    "VariantConfig",
    "RefForwardConfig",
    "DataStateValues",
    "PropDefinition",
    "StatePropPattern",
    "DEFAULT_STATE_PATTERNS",
    "ImportCategory",
    "ImportInfo",
    "ComponentMetadata",
    "ComponentDefinition",
    "SharedMetadata",
    "ParseResult",
]
