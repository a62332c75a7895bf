"""Wrapped primitive dotted names mapped to the native tag that replaces them."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

PRIMITIVE_TO_HTML: Dict[str, str] = {
    # Label
    "LabelPrimitive.Root": "label",
    # Avatar
    "AvatarPrimitive.Root": "span",
    "AvatarPrimitive.Image": "img",
    "AvatarPrimitive.Fallback": "span",
    # Separator
    "SeparatorPrimitive.Root": "div",
    # Progress
    "ProgressPrimitive.Root": "div",
    "ProgressPrimitive.Indicator": "div",
    # Checkbox
    "CheckboxPrimitive.Root": "button",
    "CheckboxPrimitive.Indicator": "span",
    # Switch
    "SwitchPrimitives.Root": "button",
    "SwitchPrimitive.Root": "button",
    "SwitchPrimitives.Thumb": "span",
    "SwitchPrimitive.Thumb": "span",
    # Toggle
    "TogglePrimitive.Root": "button",
    # Tabs
    "TabsPrimitive.Root": "div",
    "TabsPrimitive.List": "div",
    "TabsPrimitive.Trigger": "button",
    "TabsPrimitive.Content": "div",
    # Dialog
    "DialogPrimitive.Root": "div",
    "DialogPrimitive.Trigger": "button",
    "DialogPrimitive.Portal": "div",
    "DialogPrimitive.Overlay": "div",
    "DialogPrimitive.Content": "div",
    "DialogPrimitive.Close": "button",
    "DialogPrimitive.Title": "h2",
    "DialogPrimitive.Description": "p",
    # Popover
    "PopoverPrimitive.Root": "div",
    "PopoverPrimitive.Trigger": "button",
    "PopoverPrimitive.Content": "div",
    "PopoverPrimitive.Portal": "div",
    "PopoverPrimitive.Anchor": "div",
    # Tooltip
    "TooltipPrimitive.Provider": "div",
    "TooltipPrimitive.Root": "div",
    "TooltipPrimitive.Trigger": "button",
    "TooltipPrimitive.Content": "div",
    "TooltipPrimitive.Portal": "div",
    # Accordion
    "AccordionPrimitive.Root": "div",
    "AccordionPrimitive.Item": "div",
    "AccordionPrimitive.Header": "h3",
    "AccordionPrimitive.Trigger": "button",
    "AccordionPrimitive.Content": "div",
    # Dropdown menu
    "DropdownMenuPrimitive.Root": "div",
    "DropdownMenuPrimitive.Trigger": "button",
    "DropdownMenuPrimitive.Portal": "div",
    "DropdownMenuPrimitive.Content": "div",
    "DropdownMenuPrimitive.Item": "div",
    "DropdownMenuPrimitive.CheckboxItem": "div",
    "DropdownMenuPrimitive.RadioItem": "div",
    "DropdownMenuPrimitive.Label": "div",
    "DropdownMenuPrimitive.Separator": "div",
    "DropdownMenuPrimitive.Sub": "div",
    "DropdownMenuPrimitive.SubTrigger": "div",
    "DropdownMenuPrimitive.SubContent": "div",
    "DropdownMenuPrimitive.ItemIndicator": "span",
    # Slider
    "SliderPrimitive.Root": "div",
    "SliderPrimitive.Track": "div",
    "SliderPrimitive.Range": "div",
    "SliderPrimitive.Thumb": "span",
}


def native_tag_for(primitive: str, table: Optional[Mapping[str, str]] = None) -> Optional[str]:
    return (table if table is not None else PRIMITIVE_TO_HTML).get(primitive)


def is_primitive_namespace(name: str) -> bool:
    """``SwitchPrimitives`` and ``LabelPrimitive`` style namespace identifiers."""
    return name.endswith("Primitive") or name.endswith("Primitives")


__all__ = ["PRIMITIVE_TO_HTML", "native_tag_for", "is_primitive_namespace"]
