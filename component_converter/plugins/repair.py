"""Runs the structural repair pass and import clean-up over generated code."""

from __future__ import annotations

import logging

from ..config import Target
from ..mappings.primitives import PRIMITIVE_TO_HTML
from ..repair import clean_imports, repair_markup
from .base import ConverterPlugin, PluginContext

logger = logging.getLogger(__name__)


class PrimitiveRepairPlugin(ConverterPlugin):
    name = "primitive-repair"
    order = 90
    reads = frozenset({"imports"})

    def __init__(self, table=None) -> None:
        self.table = dict(table) if table is not None else PRIMITIVE_TO_HTML

    def post_generate(self, code: str, context: PluginContext) -> str:
        runes = context.target is Target.SVELTE and context.options.svelte.runes
        result = repair_markup(code, context.target, self.table, runes=runes)
        if result.unmatched_closings:
            logger.debug(f"Passed through {result.unmatched_closings} unmatched closing tag(s)")
        if result.replaced:
            logger.debug(f"Replaced {result.replaced} wrapped primitive tag(s)")
        text, _ = clean_imports(result.text, context.target, runes=runes)
        return text


__all__ = ["PrimitiveRepairPlugin"]
