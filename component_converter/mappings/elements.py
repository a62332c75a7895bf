"""DOM element type names: normalization from source type arguments and tag lookups."""

from __future__ import annotations

import re
from typing import Dict, Optional

GENERIC_ELEMENT_TYPE = "HTMLElement"

# Exact dotted primitive names first; bare member names act as suffix matches.
PRIMITIVE_ELEMENT_TYPES: Dict[str, str] = {
    "Root": "HTMLDivElement",
    "Trigger": "HTMLButtonElement",
    "Content": "HTMLDivElement",
    "Close": "HTMLButtonElement",
    "Portal": "HTMLDivElement",
    "Overlay": "HTMLDivElement",
    "Title": "HTMLHeadingElement",
    "Description": "HTMLParagraphElement",
    "LabelPrimitive.Root": "HTMLLabelElement",
    "DialogPrimitive.Root": "HTMLDivElement",
    "DialogPrimitive.Trigger": "HTMLButtonElement",
    "DialogPrimitive.Content": "HTMLDivElement",
    "DialogPrimitive.Close": "HTMLButtonElement",
    "DialogPrimitive.Title": "HTMLHeadingElement",
    "DialogPrimitive.Description": "HTMLParagraphElement",
    "DialogPrimitive.Overlay": "HTMLDivElement",
    "DropdownMenuPrimitive.Root": "HTMLDivElement",
    "DropdownMenuPrimitive.Trigger": "HTMLButtonElement",
    "DropdownMenuPrimitive.Content": "HTMLDivElement",
    "DropdownMenuPrimitive.Item": "HTMLDivElement",
    "DropdownMenuPrimitive.CheckboxItem": "HTMLDivElement",
    "DropdownMenuPrimitive.RadioItem": "HTMLDivElement",
    "DropdownMenuPrimitive.Label": "HTMLDivElement",
    "DropdownMenuPrimitive.Separator": "HTMLDivElement",
    "DropdownMenuPrimitive.SubTrigger": "HTMLDivElement",
    "DropdownMenuPrimitive.SubContent": "HTMLDivElement",
    "AccordionPrimitive.Root": "HTMLDivElement",
    "AccordionPrimitive.Item": "HTMLDivElement",
    "AccordionPrimitive.Trigger": "HTMLButtonElement",
    "AccordionPrimitive.Content": "HTMLDivElement",
    "AlertDialogPrimitive.Action": "HTMLButtonElement",
    "AlertDialogPrimitive.Cancel": "HTMLButtonElement",
    "AvatarPrimitive.Root": "HTMLSpanElement",
    "AvatarPrimitive.Image": "HTMLImageElement",
    "AvatarPrimitive.Fallback": "HTMLSpanElement",
    "CheckboxPrimitive.Root": "HTMLButtonElement",
    "CheckboxPrimitive.Indicator": "HTMLSpanElement",
    "CollapsiblePrimitive.Trigger": "HTMLButtonElement",
    "ContextMenuPrimitive.Trigger": "HTMLSpanElement",
    "HoverCardPrimitive.Trigger": "HTMLAnchorElement",
    "NavigationMenuPrimitive.Root": "HTMLElement",
    "NavigationMenuPrimitive.List": "HTMLUListElement",
    "NavigationMenuPrimitive.Item": "HTMLLIElement",
    "NavigationMenuPrimitive.Link": "HTMLAnchorElement",
    "PopoverPrimitive.Trigger": "HTMLButtonElement",
    "ProgressPrimitive.Root": "HTMLDivElement",
    "ProgressPrimitive.Indicator": "HTMLDivElement",
    "RadioGroupPrimitive.Item": "HTMLButtonElement",
    "RadioGroupPrimitive.Indicator": "HTMLSpanElement",
    "ScrollAreaPrimitive.Root": "HTMLDivElement",
    "SelectPrimitive.Trigger": "HTMLButtonElement",
    "SelectPrimitive.Value": "HTMLSpanElement",
    "SelectPrimitive.ItemText": "HTMLSpanElement",
    "SelectPrimitive.ItemIndicator": "HTMLSpanElement",
    "SeparatorPrimitive.Root": "HTMLDivElement",
    "SliderPrimitive.Root": "HTMLSpanElement",
    "SliderPrimitive.Track": "HTMLSpanElement",
    "SliderPrimitive.Range": "HTMLSpanElement",
    "SliderPrimitive.Thumb": "HTMLSpanElement",
    "SwitchPrimitive.Root": "HTMLButtonElement",
    "SwitchPrimitives.Root": "HTMLButtonElement",
    "SwitchPrimitive.Thumb": "HTMLSpanElement",
    "SwitchPrimitives.Thumb": "HTMLSpanElement",
    "TabsPrimitive.List": "HTMLDivElement",
    "TabsPrimitive.Trigger": "HTMLButtonElement",
    "ToastPrimitive.Root": "HTMLLIElement",
    "ToastPrimitive.Viewport": "HTMLOListElement",
    "TogglePrimitive.Root": "HTMLButtonElement",
    "ToggleGroupPrimitive.Item": "HTMLButtonElement",
    "TooltipPrimitive.Trigger": "HTMLButtonElement",
}

ELEMENT_TYPE_TO_TAG: Dict[str, str] = {
    "HTMLButtonElement": "button",
    "HTMLInputElement": "input",
    "HTMLTextAreaElement": "textarea",
    "HTMLSelectElement": "select",
    "HTMLAnchorElement": "a",
    "HTMLDivElement": "div",
    "HTMLSpanElement": "span",
    "HTMLFormElement": "form",
    "HTMLImageElement": "img",
    "HTMLParagraphElement": "p",
    "HTMLHeadingElement": "h5",
    "HTMLLabelElement": "label",
}

SVELTE_ATTRIBUTE_TYPES: Dict[str, str] = {
    "HTMLButtonElement": "HTMLButtonAttributes",
    "HTMLInputElement": "HTMLInputAttributes",
    "HTMLTextAreaElement": "HTMLTextareaAttributes",
    "HTMLSelectElement": "HTMLSelectAttributes",
    "HTMLAnchorElement": "HTMLAnchorAttributes",
    "HTMLFormElement": "HTMLFormAttributes",
    "HTMLImageElement": "HTMLImgAttributes",
    "HTMLLabelElement": "HTMLLabelAttributes",
}

_ELEMENT_REF = re.compile(r"(?:React\.)?(?:ElementRef|ComponentRef)\s*<\s*typeof\s+([\w.]+)\s*>")
_INTRINSIC_REF = re.compile(r"(?:React\.)?(?:ElementRef|ComponentRef)\s*<\s*[\"'](\w+)[\"']\s*>")

# Intrinsic tag names back to their element types; ``h5`` stands in for headings.
TAG_TO_ELEMENT_TYPE: Dict[str, str] = {tag: element_type for element_type, tag in ELEMENT_TYPE_TO_TAG.items()}


def normalize_element_type(raw: str) -> str:
    """
    Reduce a forward-ref type argument to a DOM element type name.

    ``HTMLButtonElement`` passes through. ``React.ElementRef<typeof X.Y>`` is
    looked up by exact dotted name, then by its last segment, and
    ``React.ElementRef<"div">`` by tag name. Anything else, including an
    unknown reference, becomes ``HTMLElement``.
    """
    text = " ".join(raw.split())
    if text.startswith("HTML") and text.endswith("Element"):
        return text
    intrinsic = _INTRINSIC_REF.search(text)
    if intrinsic:
        return TAG_TO_ELEMENT_TYPE.get(intrinsic.group(1), GENERIC_ELEMENT_TYPE)
    match = _ELEMENT_REF.search(text)
    if not match:
        return GENERIC_ELEMENT_TYPE
    reference = match.group(1)
    if reference in PRIMITIVE_ELEMENT_TYPES:
        return PRIMITIVE_ELEMENT_TYPES[reference]
    suffix = reference.rsplit(".", 1)[-1]
    if "." in reference and suffix in PRIMITIVE_ELEMENT_TYPES:
        return PRIMITIVE_ELEMENT_TYPES[suffix]
    return GENERIC_ELEMENT_TYPE


def tag_for_element_type(element_type: Optional[str]) -> str:
    if not element_type:
        return "div"
    return ELEMENT_TYPE_TO_TAG.get(element_type, "div")


def svelte_attributes_type(element_type: str) -> str:
    """``HTMLButtonAttributes`` or ``HTMLAttributes<HTMLDivElement>``."""
    return SVELTE_ATTRIBUTE_TYPES.get(element_type, f"HTMLAttributes<{element_type}>")


def svelte_attributes_import(element_type: str) -> str:
    return SVELTE_ATTRIBUTE_TYPES.get(element_type, "HTMLAttributes")


__all__ = [
    "GENERIC_ELEMENT_TYPE",
    "PRIMITIVE_ELEMENT_TYPES",
    "ELEMENT_TYPE_TO_TAG",
    "TAG_TO_ELEMENT_TYPE",
    "SVELTE_ATTRIBUTE_TYPES",
    "normalize_element_type",
    "tag_for_element_type",
    "svelte_attributes_type",
    "svelte_attributes_import",
]
