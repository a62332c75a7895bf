"""
Svelte 5 runes rewrite.

With a structured declaration list available the ``<script>`` block is
re-serialized in rune form. Without one (hand-written or externally produced
legacy output) the block is rewritten by regular expressions. That path is
best effort: it does not parse the script, so a local ``let`` that happens to
follow the ``export let`` shape is treated as a prop.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from ..codegen.svelte import RUNES_PLACEHOLDER, serialize_script
from ..config import Target
from .base import ConverterPlugin, PluginContext

logger = logging.getLogger(__name__)

SCRIPT_BLOCK = re.compile(r"(<script\b[^>]*>)(.*?)(</script>)", re.S)

EXPORT_LET = re.compile(r"^[ \t]*export\s+let\s+(\w+)(?:\s*:\s*([^=;]+))?(?:\s*=\s*([^;]+))?;?[ \t]*\n?", re.M)
ALIASED_EXPORT = re.compile(
    r"^[ \t]*let\s+(\w+)(?:\s*:\s*[^=;]+)?(?:\s*=\s*([^;]+))?;\s*\n[ \t]*export\s*\{\s*\1\s+as\s+(\w+)\s*\};?[ \t]*\n?",
    re.M,
)
REACTIVE_ASSIGNMENT = re.compile(r"\$:\s*(\w+)\s*=\s*([^;]+);")
LIFECYCLE_CALL = re.compile(r"\b(?:onMount|afterUpdate)\s*\(\s*\(\s*\)\s*=>\s*\{")
SVELTE_IMPORT = re.compile(r"^[ \t]*import\s*\{([^}]*)\}\s*from\s*[\"']svelte[\"'];?[ \t]*\n?", re.M)
LIFECYCLE_NAMES = frozenset({"onMount", "afterUpdate", "beforeUpdate", "onDestroy"})
LEGACY_PROPS_TYPE = re.compile(r"\$\$Props\b")

SLOT_PLACEHOLDER = re.compile(r"<slot\s*/>")
EVENT_DIRECTIVE = re.compile(r"\bon:(\w+)=")
LEGACY_REST = re.compile(r"\$\$(?:restProps|props)\b")


def _aliased_entry(match: "re.Match[str]") -> str:
    local, default, exported = match.group(1), match.group(2), match.group(3)
    entry = f"{exported}: {local}"
    if exported == "ref":
        return entry + " = $bindable(null)"
    if default is not None:
        return entry + f" = {default.strip()}"
    return entry


def _exported_entry(match: "re.Match[str]") -> str:
    name, default = match.group(1), match.group(3)
    if name == "className":
        return f"class: className = {default.strip() if default else 'undefined'}"
    if name == "ref":
        return "ref = $bindable(null)"
    return name if default is None else f"{name} = {default.strip()}"


def _prop_entries(script: str) -> Tuple[str, List[str], int]:
    """Remove legacy prop exports, returning the script, binding entries and insert offset."""
    found: List[Tuple[int, int, str]] = []
    for match in ALIASED_EXPORT.finditer(script):
        found.append((match.start(), match.end(), _aliased_entry(match)))
    for match in EXPORT_LET.finditer(script):
        found.append((match.start(), match.end(), _exported_entry(match)))
    found.sort()
    if not found:
        return script, [], -1
    for start, end, _ in reversed(found):
        script = script[:start] + script[end:]
    return script, [entry for _, _, entry in found], found[0][0]


def rewrite_script(script: str, typescript: bool) -> str:
    """Regex rewrite of a legacy script body into rune form."""
    typed = typescript and (LEGACY_PROPS_TYPE.search(script) is not None or "interface Props" in script)
    script, entries, offset = _prop_entries(script)
    if entries:
        names = {entry.split(":")[0].split("=")[0].strip() for entry in entries}
        if "children" not in names:
            entries.append("children")
        entries.append("...restProps")
        annotation = ": Props" if typed else ""
        body = ",\n".join(f"    {entry}" for entry in entries)
        declaration = f"  let {{\n{body}\n  }}{annotation} = $props();\n"
        script = script[:offset] + declaration + script[offset:]
    script = LEGACY_PROPS_TYPE.sub("Props", script)
    script = REACTIVE_ASSIGNMENT.sub(lambda m: f"let {m.group(1)} = $derived({m.group(2).strip()});", script)
    script = LIFECYCLE_CALL.sub("$effect(() => {", script)

    def strip_lifecycle(match: "re.Match[str]") -> str:
        names = [name.strip() for name in match.group(1).split(",") if name.strip()]
        kept = [name for name in names if name not in LIFECYCLE_NAMES]
        if not kept:
            return ""
        return f'  import {{ {", ".join(kept)} }} from "svelte";\n'

    script = SVELTE_IMPORT.sub(strip_lifecycle, script)
    if typescript and "svelte/elements" not in script:
        script = '\n  import type { HTMLAttributes } from "svelte/elements";' + script
    return script


def rewrite_markup(markup: str) -> str:
    markup = SLOT_PLACEHOLDER.sub(RUNES_PLACEHOLDER, markup)
    markup = EVENT_DIRECTIVE.sub(lambda m: f"on{m.group(1)}=", markup)
    return LEGACY_REST.sub("restProps", markup)


class SvelteRunesPlugin(ConverterPlugin):
    name = "svelte5-runes"
    order = 85
    reads = frozenset({"ref_forward", "state_props"})

    def applies_to(self, context: PluginContext) -> bool:
        return context.target is Target.SVELTE and context.options.svelte.runes

    def post_generate(self, code: str, context: PluginContext) -> Optional[str]:
        match = SCRIPT_BLOCK.search(code)
        if match is None:
            return rewrite_markup(code)
        typescript = 'lang="ts"' in match.group(1)
        declarations = context.metadata.declarations
        if declarations is not None:
            script = serialize_script(declarations, runes=True, typescript=typescript)
        else:
            logger.debug("No structured declarations, rewriting script with patterns")
            script = match.group(1) + rewrite_script(match.group(2), typescript) + match.group(3)
        return code[: match.start()] + script + rewrite_markup(code[match.end() :])


__all__ = ["SvelteRunesPlugin", "rewrite_script", "rewrite_markup"]
