"""
Conversion orchestration.

One conversion runs: pre-parse hooks, parsing, post-parse hooks, pre-generate
hooks, generation, post-generate hooks and optional formatting. Every run
builds its own :class:`PluginContext`; the plugin list is only read.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .codegen import get_generator
from .config import ConverterOptions, Target
from .errors import ComponentNotFoundError
from .formatting import Formatter, WhitespaceFormatter, format_code
from .ir.metadata import ComponentDefinition, ParseResult
from .parser import parse_source
from .plugins import ConverterPlugin, PluginContext, PluginPipeline, default_plugins

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    component: str
    code: str
    filename: str
    warnings: List[str] = field(default_factory=list)
    target: Target = Target.SVELTE
    success: bool = True


class ComponentConverter:
    """
    Convert TSX components to Svelte or Vue.

    ``plugins`` replaces the registered defaults for the target when given;
    ``extra_plugins`` are added on top of whichever set is used.
    """

    def __init__(
        self,
        options: Optional[ConverterOptions] = None,
        *,
        plugins: Optional[Iterable[ConverterPlugin]] = None,
        extra_plugins: Iterable[ConverterPlugin] = (),
        formatter: Optional[Formatter] = None,
    ) -> None:
        self.options = options or ConverterOptions()
        self._plugins = list(plugins) if plugins is not None else None
        self._extra_plugins = list(extra_plugins)
        self.formatter = formatter

    def pipeline_for(self, options: ConverterOptions) -> PluginPipeline:
        plugins = self._plugins if self._plugins is not None else default_plugins(options.target, options)
        return PluginPipeline([*plugins, *self._extra_plugins])

    def _resolve_options(self, target: Optional[Union[str, Target]], component: Optional[str]) -> ConverterOptions:
        overrides = {}
        if target is not None:
            overrides["target"] = Target.parse(target)
        if component is not None:
            overrides["target_component"] = component
        return self.options.merged(**overrides)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _parse(
        self,
        source: str,
        options: ConverterOptions,
        path: Optional[str],
    ) -> Tuple[ParseResult, PluginContext, PluginPipeline]:
        pipeline = self.pipeline_for(options)
        context = PluginContext(
            source_code=source,
            target=options.target,
            options=options,
            target_component=options.target_component,
        )
        logger.debug(f"Converting to {options.target.value} with plugins: {', '.join(pipeline.names)}")
        source = await pipeline.run_pre_parse(source, context)
        context.source_code = source

        result = parse_source(source, options, path=path)
        context.warnings.extend(result.warnings)
        context.warnings.extend(result.errors)
        context.metadata.parse_result = result

        result = await pipeline.run_post_parse(result, context)
        context.metadata.parse_result = result
        result = await pipeline.run_pre_generate(result, context)
        context.metadata.parse_result = result
        return result, context, pipeline

    async def _generate(
        self,
        component: ComponentDefinition,
        context: PluginContext,
        pipeline: PluginPipeline,
    ) -> ConversionResult:
        options = context.options
        generator = get_generator(options.target)
        generated = generator.generate(component, component.props, options)
        context.metadata.declarations = generated.declarations
        context.metadata.used_fallback = generated.used_fallback

        code = await pipeline.run_post_generate(generated.assemble(), context)
        if options.emit_formatted:
            formatter = self.formatter or WhitespaceFormatter()
            code = await format_code(
                code,
                options.target,
                formatter,
                timeout=options.format_timeout,
                warnings=context.warnings,
            )
        return ConversionResult(
            component=component.name,
            code=code,
            filename=generated.filename,
            warnings=list(context.warnings),
            target=options.target,
        )

    @staticmethod
    def _component_context(context: PluginContext, name: str) -> PluginContext:
        return replace(
            context,
            target_component=name,
            metadata=replace(context.metadata, declarations=None, used_fallback=False),
            warnings=list(context.warnings),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def convert(
        self,
        source: str,
        *,
        target: Optional[Union[str, Target]] = None,
        component: Optional[str] = None,
        path: Optional[str] = None,
    ) -> ConversionResult:
        """
        Convert one component of ``source``.

        The component named by ``component`` (or the options'
        ``target_component``) is converted, else the primary component.
        Raises :class:`ComponentNotFoundError` when there is nothing to convert.
        """
        options = self._resolve_options(target, component)
        result, context, pipeline = await self._parse(source, options, path)

        name = options.target_component
        if name:
            chosen = result.get(name)
            if chosen is None or chosen.is_re_export:
                available = ", ".join(c.name for c in result.convertible) or "none"
                raise ComponentNotFoundError(
                    f"Component '{name}' not found",
                    path=path,
                    hint=f"Convertible components: {available}",
                )
        else:
            chosen = result.primary
            if chosen is None or chosen.is_re_export:
                raise ComponentNotFoundError("No convertible component found in source", path=path)
        return await self._generate(chosen, self._component_context(context, chosen.name), pipeline)

    async def convert_all(
        self,
        source: str,
        *,
        target: Optional[Union[str, Target]] = None,
        path: Optional[str] = None,
    ) -> Dict[str, ConversionResult]:
        """
        Convert every non-re-export component of ``source``.

        A component whose generation fails yields an unsuccessful result with
        a warning instead of aborting the others.
        """
        options = self._resolve_options(target, None)
        result, context, pipeline = await self._parse(source, options, path)
        results: Dict[str, ConversionResult] = {}
        for component in result.convertible:
            component_context = self._component_context(context, component.name)
            try:
                results[component.name] = await self._generate(component, component_context, pipeline)
            except Exception as exc:
                message = f"Failed to convert {component.name}: {exc}"
                logger.warning(message)
                component_context.warnings.append(message)
                results[component.name] = ConversionResult(
                    component=component.name,
                    code="",
                    filename=f"{component.name}.{options.target.extension}",
                    warnings=list(component_context.warnings),
                    target=options.target,
                    success=False,
                )
        return results

    def convert_sync(self, source: str, **kwargs) -> ConversionResult:
        return asyncio.run(self.convert(source, **kwargs))

    def convert_all_sync(self, source: str, **kwargs) -> Dict[str, ConversionResult]:
        return asyncio.run(self.convert_all(source, **kwargs))


def convert(source: str, options: Optional[ConverterOptions] = None, **kwargs) -> ConversionResult:
    """Synchronous one-shot conversion with the default plugins."""
    return ComponentConverter(options).convert_sync(source, **kwargs)


def convert_all(source: str, options: Optional[ConverterOptions] = None, **kwargs) -> Dict[str, ConversionResult]:
    return ComponentConverter(options).convert_all_sync(source, **kwargs)


__all__ = ["ConversionResult", "ComponentConverter", "convert", "convert_all"]
