"""Core plugin abstractions for the conversion pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Optional

from ..config import ConverterOptions, Target
from ..errors import PluginConfigurationError
from ..ir.metadata import ComponentMetadata, ParseResult

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..codegen.base import Declaration

logger = logging.getLogger(__name__)

PHASE_PRE_PARSE = "pre_parse"
PHASE_POST_PARSE = "post_parse"
PHASE_PRE_GENERATE = "pre_generate"
PHASE_POST_GENERATE = "post_generate"

PHASES = (PHASE_PRE_PARSE, PHASE_POST_PARSE, PHASE_PRE_GENERATE, PHASE_POST_GENERATE)
DEFAULT_ORDER = 50


@dataclass
class ContextMetadata:
    """
    Typed state shared between hooks of one conversion.

    ``component_metadata`` is keyed by component name and written by the
    consolidation plugin. ``declarations`` is the structured declaration list
    of the component being generated; it is ``None`` until generation ran.
    """

    parse_result: Optional[ParseResult] = None
    component_metadata: Dict[str, ComponentMetadata] = field(default_factory=dict)
    declarations: Optional[List["Declaration"]] = None
    used_fallback: bool = False


@dataclass
class PluginContext:
    source_code: str
    target: Target
    options: ConverterOptions
    target_component: Optional[str] = None
    metadata: ContextMetadata = field(default_factory=ContextMetadata)
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)


class ConverterPlugin:
    """
    Base class for pipeline plugins.

    Subclasses set ``name`` and ``order`` and implement any of the hooks
    ``pre_parse(source, context)``, ``post_parse(result, context)``,
    ``pre_generate(result, context)`` and ``post_generate(code, context)``.
    Hooks may be coroutines. Returning ``None`` keeps the current value.

    ``reads`` and ``writes`` name the :class:`ComponentMetadata` fields the
    plugin touches; they are validated when the plugin is registered or put
    into a pipeline.
    """

    name: str = ""
    order: int = DEFAULT_ORDER
    reads: FrozenSet[str] = frozenset()
    writes: FrozenSet[str] = frozenset()

    def applies_to(self, context: PluginContext) -> bool:
        return True

    def hooks(self) -> List[str]:
        return [phase for phase in PHASES if callable(getattr(self, phase, None))]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} order={self.order}>"


def validate_plugin(plugin: Any) -> None:
    """Raise :class:`PluginConfigurationError` when ``plugin`` is malformed."""
    name = (getattr(plugin, "name", "") or "").strip()
    if not name:
        raise PluginConfigurationError("Plugin name must be provided")
    order = getattr(plugin, "order", DEFAULT_ORDER)
    if not isinstance(order, int) or isinstance(order, bool):
        raise PluginConfigurationError(f"Plugin '{name}' order must be an integer, got {order!r}")
    known = ComponentMetadata.field_names()
    for attribute in ("reads", "writes"):
        declared = getattr(plugin, attribute, frozenset())
        unknown = sorted(set(declared) - known)
        if unknown:
            raise PluginConfigurationError(
                f"Plugin '{name}' {attribute} unknown metadata fields: {', '.join(unknown)}",
                hint=f"Known fields: {', '.join(sorted(known))}",
            )
    for phase in PHASES:
        hook = getattr(plugin, phase, None)
        if hook is not None and not callable(hook):
            raise PluginConfigurationError(f"Plugin '{name}' hook {phase} is not callable")


__all__ = [
    "PHASES",
    "PHASE_PRE_PARSE",
    "PHASE_POST_PARSE",
    "PHASE_PRE_GENERATE",
    "PHASE_POST_GENERATE",
    "DEFAULT_ORDER",
    "ContextMetadata",
    "PluginContext",
    "ConverterPlugin",
    "validate_plugin",
]
