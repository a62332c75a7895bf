"""Icon packages and their per-target equivalents."""

from __future__ import annotations

from typing import Dict, Optional

ICON_PACKAGES: Dict[str, Dict[str, str]] = {
    "lucide-react": {"svelte": "lucide-svelte", "vue": "lucide-vue-next"},
    "@heroicons/react": {"svelte": "@steeze-ui/heroicons", "vue": "@heroicons/vue"},
    "react-icons": {"svelte": "svelte-icons", "vue": "vue3-icons"},
}


def is_icon_package(source: str) -> bool:
    return source in ICON_PACKAGES or any(source.startswith(f"{name}/") for name in ICON_PACKAGES)


def icon_package_for(source: str, target: str) -> Optional[str]:
    mapping = ICON_PACKAGES.get(source)
    if mapping is None:
        return None
    return mapping.get(target)


__all__ = ["ICON_PACKAGES", "is_icon_package", "icon_package_for"]
