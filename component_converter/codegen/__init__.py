"""Target code generators."""

from __future__ import annotations

from typing import Dict, Type, Union

from ..config import Target
from .base import Declaration, DeclarationKind, GeneratedComponent, MarkupPlanner, PropBinding
from .classes import translate_class_expression
from .svelte import SvelteGenerator, serialize_script
from .vue import VueGenerator

GENERATORS: Dict[Target, Type] = {
    Target.SVELTE: SvelteGenerator,
    Target.VUE: VueGenerator,
}


def get_generator(target: Union[str, Target]):
    """Return a generator instance for ``target``."""
    return GENERATORS[Target.parse(target)]()


__all__ = [
    "Declaration",
    "DeclarationKind",
    "GeneratedComponent",
    "MarkupPlanner",
    "PropBinding",
    "SvelteGenerator",
    "VueGenerator",
    "GENERATORS",
    "get_generator",
    "serialize_script",
    "translate_class_expression",
]
