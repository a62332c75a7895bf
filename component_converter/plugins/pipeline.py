"""Ordered execution of plugin hooks with per-hook failure isolation."""

from __future__ import annotations

import copy
import inspect
import logging
from typing import Any, Iterable, List, Sequence, Tuple

from ..ir.metadata import ParseResult
from .base import (
    PHASE_POST_GENERATE,
    PHASE_POST_PARSE,
    PHASE_PRE_GENERATE,
    PHASE_PRE_PARSE,
    ConverterPlugin,
    PluginContext,
    validate_plugin,
)

logger = logging.getLogger(__name__)


class PluginPipeline:
    """
    Run plugins phase by phase.

    Plugins are sorted by ``order``; ties keep their input order. Each hook
    sees the value left by the previous one. A hook that raises is recorded
    as a warning on the context and the value from before that hook is kept.
    """

    def __init__(self, plugins: Iterable[ConverterPlugin] = ()) -> None:
        plugins = list(plugins)
        for plugin in plugins:
            validate_plugin(plugin)
        self._plugins: Tuple[ConverterPlugin, ...] = tuple(sorted(plugins, key=lambda plugin: plugin.order))

    @property
    def plugins(self) -> Tuple[ConverterPlugin, ...]:
        return self._plugins

    @property
    def names(self) -> List[str]:
        return [plugin.name for plugin in self._plugins]

    def with_plugins(self, extra: Sequence[ConverterPlugin]) -> "PluginPipeline":
        return PluginPipeline([*self._plugins, *extra])

    async def _run(self, phase: str, value: Any, context: PluginContext, *, isolate_copy: bool) -> Any:
        for plugin in self._plugins:
            hook = getattr(plugin, phase, None)
            if hook is None or not plugin.applies_to(context):
                continue
            before = copy.deepcopy(value) if isolate_copy else value
            logger.debug(f"Running {plugin.name}.{phase}")
            try:
                result = hook(value, context)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                context.warn(f"Plugin {plugin.name} {phase} error: {exc}")
                value = before
                continue
            if result is not None:
                value = result
        return value

    async def run_pre_parse(self, source: str, context: PluginContext) -> str:
        return await self._run(PHASE_PRE_PARSE, source, context, isolate_copy=False)

    async def run_post_parse(self, result: ParseResult, context: PluginContext) -> ParseResult:
        return await self._run(PHASE_POST_PARSE, result, context, isolate_copy=True)

    async def run_pre_generate(self, result: ParseResult, context: PluginContext) -> ParseResult:
        return await self._run(PHASE_PRE_GENERATE, result, context, isolate_copy=True)

    async def run_post_generate(self, code: str, context: PluginContext) -> str:
        return await self._run(PHASE_POST_GENERATE, code, context, isolate_copy=False)


__all__ = ["PluginPipeline"]
