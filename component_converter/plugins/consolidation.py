"""Merges extracted configuration into one metadata record per component."""

from __future__ import annotations

import logging

from ..ir.metadata import ComponentMetadata, ParseResult
from .base import ConverterPlugin, PluginContext

logger = logging.getLogger(__name__)


class MetadataConsolidationPlugin(ConverterPlugin):
    name = "metadata-consolidation"
    order = 10
    writes = ComponentMetadata.field_names()

    def post_parse(self, result: ParseResult, context: PluginContext) -> ParseResult:
        for component in result.components:
            if component.is_re_export:
                continue
            metadata = ComponentMetadata.from_component(component, result.shared)
            component.metadata = metadata
            context.metadata.component_metadata[component.name] = metadata
            logger.debug(
                f"{component.name}: variant={metadata.variant.name if metadata.variant else None} "
                f"ref={'yes' if metadata.ref_forward else 'no'} state_props={len(metadata.state_props)}"
            )
        context.metadata.parse_result = result
        return result


__all__ = ["MetadataConsolidationPlugin"]
