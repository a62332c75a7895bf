"""Registration of built-in converter plugins."""

from __future__ import annotations

from ..config import Target
from .consolidation import MetadataConsolidationPlugin
from .registry import register_plugin
from .repair import PrimitiveRepairPlugin
from .runes import SvelteRunesPlugin

register_plugin(MetadataConsolidationPlugin, default=True)
register_plugin(SvelteRunesPlugin, default=True, targets=[Target.SVELTE])
register_plugin(PrimitiveRepairPlugin, default=True)

__all__ = [
    "MetadataConsolidationPlugin",
    "SvelteRunesPlugin",
    "PrimitiveRepairPlugin",
]
