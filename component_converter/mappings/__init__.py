"""Static lookup tables consumed as plain data."""

from .elements import (
    ELEMENT_TYPE_TO_TAG,
    GENERIC_ELEMENT_TYPE,
    normalize_element_type,
    svelte_attributes_import,
    svelte_attributes_type,
    tag_for_element_type,
)
from .icons import ICON_PACKAGES, icon_package_for, is_icon_package
from .primitive_props import PRIMITIVE_PROPS, PrimitiveProp, primitive_props_for
from .primitives import PRIMITIVE_TO_HTML, is_primitive_namespace, native_tag_for

__all__ = [
    "ELEMENT_TYPE_TO_TAG",
    "GENERIC_ELEMENT_TYPE",
    "normalize_element_type",
    "svelte_attributes_import",
    "svelte_attributes_type",
    "tag_for_element_type",
    "ICON_PACKAGES",
    "icon_package_for",
    "is_icon_package",
    "PRIMITIVE_PROPS",
    "PrimitiveProp",
    "primitive_props_for",
    "PRIMITIVE_TO_HTML",
    "is_primitive_namespace",
    "native_tag_for",
]
