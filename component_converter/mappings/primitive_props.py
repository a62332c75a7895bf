"""Props accepted by wrapped primitives, keyed by package and sub-component."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..ir.metadata import DataStateValues


@dataclass(frozen=True)
class PrimitiveProp:
    name: str
    type: str
    optional: bool = True
    default_value: Optional[str] = None
    data_state_values: Optional[DataStateValues] = None

    @property
    def is_state_prop(self) -> bool:
        return self.data_state_values is not None


_AS_CHILD = PrimitiveProp("asChild", "boolean")
_CHECKED = DataStateValues(true="checked", false="unchecked")
_PRESSED = DataStateValues(true="on", false="off")

PrimitiveTable = Dict[str, Dict[str, Tuple[PrimitiveProp, ...]]]

PRIMITIVE_PROPS: PrimitiveTable = {
    "@radix-ui/react-switch": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("checked", "boolean", data_state_values=_CHECKED),
            PrimitiveProp("defaultChecked", "boolean"),
            PrimitiveProp("onCheckedChange", "(checked: boolean) => void"),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("required", "boolean"),
            PrimitiveProp("name", "string"),
            PrimitiveProp("value", "string", default_value='"on"'),
        ),
        "Thumb": (_AS_CHILD,),
    },
    "@radix-ui/react-checkbox": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("checked", 'boolean | "indeterminate"', data_state_values=_CHECKED),
            PrimitiveProp("defaultChecked", "boolean"),
            PrimitiveProp("onCheckedChange", '(checked: boolean | "indeterminate") => void'),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("required", "boolean"),
            PrimitiveProp("name", "string"),
            PrimitiveProp("value", "string", default_value='"on"'),
        ),
        "Indicator": (_AS_CHILD, PrimitiveProp("forceMount", "boolean")),
    },
    "@radix-ui/react-toggle": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("pressed", "boolean", data_state_values=_PRESSED),
            PrimitiveProp("defaultPressed", "boolean"),
            PrimitiveProp("onPressedChange", "(pressed: boolean) => void"),
            PrimitiveProp("disabled", "boolean"),
        ),
    },
    "@radix-ui/react-separator": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("orientation", '"horizontal" | "vertical"', default_value='"horizontal"'),
            PrimitiveProp("decorative", "boolean", default_value="true"),
        ),
    },
    "@radix-ui/react-progress": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("value", "number | null"),
            PrimitiveProp("max", "number", default_value="100"),
            PrimitiveProp("getValueLabel", "(value: number, max: number) => string"),
        ),
        "Indicator": (_AS_CHILD,),
    },
    "@radix-ui/react-slider": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("value", "number[]"),
            PrimitiveProp("defaultValue", "number[]"),
            PrimitiveProp("onValueChange", "(value: number[]) => void"),
            PrimitiveProp("onValueCommit", "(value: number[]) => void"),
            PrimitiveProp("min", "number", default_value="0"),
            PrimitiveProp("max", "number", default_value="100"),
            PrimitiveProp("step", "number", default_value="1"),
            PrimitiveProp("orientation", '"horizontal" | "vertical"', default_value='"horizontal"'),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("inverted", "boolean"),
            PrimitiveProp("name", "string"),
        ),
        "Track": (_AS_CHILD,),
        "Range": (_AS_CHILD,),
        "Thumb": (_AS_CHILD,),
    },
    "@radix-ui/react-tabs": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("value", "string"),
            PrimitiveProp("defaultValue", "string"),
            PrimitiveProp("onValueChange", "(value: string) => void"),
            PrimitiveProp("orientation", '"horizontal" | "vertical"', default_value='"horizontal"'),
            PrimitiveProp("dir", '"ltr" | "rtl"'),
            PrimitiveProp("activationMode", '"automatic" | "manual"', default_value='"automatic"'),
        ),
        "List": (_AS_CHILD, PrimitiveProp("loop", "boolean", default_value="true")),
        "Trigger": (
            _AS_CHILD,
            PrimitiveProp("value", "string", optional=False),
            PrimitiveProp("disabled", "boolean"),
        ),
        "Content": (
            _AS_CHILD,
            PrimitiveProp("value", "string", optional=False),
            PrimitiveProp("forceMount", "boolean"),
        ),
    },
    "@radix-ui/react-accordion": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("type", '"single" | "multiple"', optional=False),
            PrimitiveProp("value", "string | string[]"),
            PrimitiveProp("defaultValue", "string | string[]"),
            PrimitiveProp("onValueChange", "(value: string | string[]) => void"),
            PrimitiveProp("collapsible", "boolean"),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("dir", '"ltr" | "rtl"'),
            PrimitiveProp("orientation", '"horizontal" | "vertical"', default_value='"vertical"'),
        ),
        "Item": (
            _AS_CHILD,
            PrimitiveProp("value", "string", optional=False),
            PrimitiveProp("disabled", "boolean"),
        ),
        "Header": (_AS_CHILD,),
        "Trigger": (_AS_CHILD,),
        "Content": (_AS_CHILD, PrimitiveProp("forceMount", "boolean")),
    },
    "@radix-ui/react-radio-group": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("value", "string"),
            PrimitiveProp("defaultValue", "string"),
            PrimitiveProp("onValueChange", "(value: string) => void"),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("required", "boolean"),
            PrimitiveProp("name", "string"),
            PrimitiveProp("orientation", '"horizontal" | "vertical"'),
            PrimitiveProp("dir", '"ltr" | "rtl"'),
            PrimitiveProp("loop", "boolean", default_value="true"),
        ),
        "Item": (
            _AS_CHILD,
            PrimitiveProp("value", "string", optional=False),
            PrimitiveProp("disabled", "boolean"),
            PrimitiveProp("required", "boolean"),
        ),
        "Indicator": (_AS_CHILD, PrimitiveProp("forceMount", "boolean")),
    },
    "@radix-ui/react-label": {
        "Root": (_AS_CHILD, PrimitiveProp("htmlFor", "string")),
    },
    "@radix-ui/react-avatar": {
        "Root": (_AS_CHILD,),
        "Image": (
            _AS_CHILD,
            PrimitiveProp(
                "onLoadingStatusChange",
                '(status: "idle" | "loading" | "loaded" | "error") => void',
            ),
        ),
        "Fallback": (_AS_CHILD, PrimitiveProp("delayMs", "number")),
    },
    "@radix-ui/react-scroll-area": {
        "Root": (
            _AS_CHILD,
            PrimitiveProp("type", '"auto" | "always" | "scroll" | "hover"', default_value='"hover"'),
            PrimitiveProp("scrollHideDelay", "number", default_value="600"),
            PrimitiveProp("dir", '"ltr" | "rtl"'),
        ),
        "Viewport": (_AS_CHILD,),
        "Scrollbar": (
            _AS_CHILD,
            PrimitiveProp("orientation", '"horizontal" | "vertical"', default_value='"vertical"'),
            PrimitiveProp("forceMount", "boolean"),
        ),
        "Thumb": (_AS_CHILD,),
        "Corner": (_AS_CHILD,),
    },
}

PRIMITIVE_PACKAGE_PREFIX = "@radix-ui/"


def primitive_props_for(package: str, component: str) -> Optional[List[PrimitiveProp]]:
    entry = PRIMITIVE_PROPS.get(package)
    if entry is None:
        return None
    props = entry.get(component)
    return list(props) if props is not None else None


__all__ = [
    "PrimitiveProp",
    "PRIMITIVE_PROPS",
    "PRIMITIVE_PACKAGE_PREFIX",
    "primitive_props_for",
]
