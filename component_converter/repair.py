"""
Structural repair of generated markup.

Unmapped wrapped primitives leave the generators as dynamic components
(``<svelte:component this={X.Y}>`` / ``<component :is="X.Y">``). Every such
tag closes with the same marker, so the marker alone does not say which
native tag it closes. A single left-to-right tokenizer keeps a stack: a mapped
opening tag pushes its native name, an unmapped one pushes a sentinel, and a
closing marker pops whatever is on top. A closing marker met with an empty
stack is passed through and counted.

After tag substitution the text gets target fix-ups: void elements lose
closing tags, empty attribute-forwarding elements of childful tags get the
children placeholder, ``className=`` becomes ``class=`` and, for Svelte,
self-closing non-void tags are expanded. Text inside ``<script>`` blocks is
never touched by the markup rules. The pass is idempotent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

from .config import Target
from .ir.nodes import VOID_ELEMENTS
from .mappings.icons import ICON_PACKAGES, icon_package_for
from .mappings.primitives import PRIMITIVE_TO_HTML

logger = logging.getLogger(__name__)

CHILDFUL_TAGS = frozenset(
    {
        "button",
        "div",
        "span",
        "label",
        "a",
        "p",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "td",
        "th",
        "li",
        "table",
        "thead",
        "tbody",
        "tr",
        "caption",
    }
)

RUNES_PLACEHOLDER = "{@render children?.()}"
SLOT_PLACEHOLDER = "<slot />"

_SENTINEL = None

_OPENERS = {Target.SVELTE: "<svelte:component", Target.VUE: "<component"}
_CLOSERS = {
    Target.SVELTE: re.compile(r"</svelte:component\s*>"),
    Target.VUE: re.compile(r"</component\s*>"),
}
_NAME_ATTRIBUTES = {
    Target.SVELTE: re.compile(r"\s*\bthis=\{\s*([\w$.]+)\s*\}"),
    Target.VUE: re.compile(r"\s*(?:v-bind)?:is=\"([\w$.]+)\""),
}

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>.*?</script>", re.S)

# Attribute text that may hold quoted strings and up to two levels of braces.
_ATTRS = r"(?:[^>\"'{]|\"[^\"]*\"|'[^']*'|\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\})*"
_VOID_CLOSING = re.compile(r"</(" + "|".join(sorted(VOID_ELEMENTS)) + r")\s*>")
_SELF_CLOSING = re.compile(r"<([a-z][a-z0-9]*)(\s" + _ATTRS + r")?\s*/>")
_EMPTY_ELEMENT = re.compile(
    r"<(" + "|".join(sorted(CHILDFUL_TAGS, key=len, reverse=True)) + r")(\s" + _ATTRS + r")?>(\s*)</\1>"
)
_CLASS_NAME_ATTRIBUTE = re.compile(r"(?<=[\s:])className=(?=[\"'{])")
_FORWARDING = re.compile(r"\{\.\.\.[\w$]+\}|v-bind=\"\$(?:attrs|props)\"")

_PRIMITIVE_NAMESPACE_IMPORT = re.compile(
    r"^[ \t]*import\s+\*\s+as\s+\w+Primitives?\s+from\s+[\"']@radix-ui/[^\"']+[\"'];?[ \t]*\n?", re.M
)
_PRIMITIVE_ALIAS = re.compile(r"^[ \t]*const\s+\w+\s*=\s*\w+Primitives?\.\w+;?[ \t]*\n?", re.M)
_NAMED_IMPORT = re.compile(r"^([ \t]*import\s+(?:type\s+)?)\{([^}]*)\}(\s*from\s*[\"'][^\"']+[\"'];?)([ \t]*\n?)", re.M)
_IMPORT_SOURCE = re.compile(r"(\bfrom\s*)([\"'])([^\"']+)\2")


@dataclass
class RepairResult:
    text: str
    replaced: int = 0
    unmatched_closings: int = 0

    @property
    def changed(self) -> bool:
        return self.replaced > 0


def placeholder_for(target: Target, runes: bool) -> str:
    if target is Target.SVELTE and runes:
        return RUNES_PLACEHOLDER
    return SLOT_PLACEHOLDER


# =============================================================================
# Tokenizer
# =============================================================================


def _tag_end(text: str, start: int) -> int:
    """Index of the ``>`` ending the tag opened at ``start``, skipping quoted and braced values."""
    depth = 0
    quote: Optional[str] = None
    index = start
    while index < len(text):
        char = text[index]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == ">" and depth == 0:
            return index
        index += 1
    return -1


def _is_opener(text: str, index: int, opener: str) -> bool:
    if not text.startswith(opener, index):
        return False
    following = text[index + len(opener) : index + len(opener) + 1]
    return following in ("", " ", "\t", "\n", "\r", ">", "/")


def _substitute_tags(text: str, target: Target, table: Mapping[str, str]) -> RepairResult:
    opener = _OPENERS[target]
    closer = _CLOSERS[target]
    name_attribute = _NAME_ATTRIBUTES[target]
    stack: List[Optional[str]] = []
    out: List[str] = []
    replaced = 0
    unmatched = 0
    index = 0
    while index < len(text):
        next_tag = text.find("<", index)
        if next_tag < 0:
            out.append(text[index:])
            break
        out.append(text[index:next_tag])
        index = next_tag

        closing = closer.match(text, index)
        if closing is not None:
            if not stack:
                unmatched += 1
                out.append(closing.group(0))
            else:
                native = stack.pop()
                out.append(closing.group(0) if native is _SENTINEL else f"</{native}>")
            index = closing.end()
            continue

        if not _is_opener(text, index, opener):
            out.append("<")
            index += 1
            continue

        end = _tag_end(text, index + len(opener))
        if end < 0:
            out.append(text[index:])
            break
        raw = text[index : end + 1]
        inner = text[index + len(opener) : end]
        self_closing = inner.rstrip().endswith("/")
        if self_closing:
            inner = inner.rstrip()[:-1]
        match = name_attribute.search(inner)
        native = table.get(match.group(1)) if match else None
        if native is None:
            out.append(raw)
            if not self_closing:
                stack.append(_SENTINEL)
        else:
            attributes = (inner[: match.start()] + inner[match.end() :]).strip()
            attributes = f" {attributes}" if attributes else ""
            if self_closing or native in VOID_ELEMENTS:
                out.append(f"<{native}{attributes} />")
                if not self_closing:
                    stack.append(native)
            else:
                out.append(f"<{native}{attributes}>")
                stack.append(native)
            replaced += 1
        index = end + 1
    if stack:
        logger.debug(f"{len(stack)} dynamic component tag(s) left open")
    return RepairResult(text="".join(out), replaced=replaced, unmatched_closings=unmatched)


# =============================================================================
# Fix-ups
# =============================================================================


def _outside_scripts(text: str, rewrite: Callable[[str], str]) -> str:
    parts: List[str] = []
    position = 0
    for block in _SCRIPT_BLOCK.finditer(text):
        parts.append(rewrite(text[position : block.start()]))
        parts.append(block.group(0))
        position = block.end()
    parts.append(rewrite(text[position:]))
    return "".join(parts)


def _expand_self_closing(markup: str) -> str:
    def expand(match: "re.Match[str]") -> str:
        tag = match.group(1)
        if tag in VOID_ELEMENTS or tag == "slot":
            return match.group(0)
        return f"<{tag}{(match.group(2) or '').rstrip()}></{tag}>"

    return _SELF_CLOSING.sub(expand, markup)


def _fill_empty(markup: str, placeholder: str) -> str:
    def fill(match: "re.Match[str]") -> str:
        attributes = match.group(2) or ""
        if not _FORWARDING.search(attributes):
            return match.group(0)
        return f"<{match.group(1)}{attributes}>{placeholder}</{match.group(1)}>"

    return _EMPTY_ELEMENT.sub(fill, markup)


def _fix_markup(markup: str, target: Target, runes: bool) -> str:
    markup = _VOID_CLOSING.sub("", markup)
    if target is Target.SVELTE:
        markup = _expand_self_closing(markup)
    markup = _fill_empty(markup, placeholder_for(target, runes))
    return _CLASS_NAME_ATTRIBUTE.sub("class=", markup)


def repair_markup(
    text: str,
    target: Target,
    table: Optional[Mapping[str, str]] = None,
    runes: bool = True,
) -> RepairResult:
    """Rewrite dynamic primitive tags into native tags and apply markup fix-ups."""
    target = Target.parse(target)
    substituted = _substitute_tags(text, target, table if table is not None else PRIMITIVE_TO_HTML)
    substituted.text = _outside_scripts(substituted.text, lambda markup: _fix_markup(markup, target, runes))
    return substituted


# =============================================================================
# Import clean-up
# =============================================================================


def _drop_unused_variant_props(text: str) -> str:
    if re.search(r"\bVariantProps\s*<", text):
        return text

    def strip(match: "re.Match[str]") -> str:
        names = [name.strip() for name in match.group(2).split(",") if name.strip()]
        kept = [name for name in names if name not in ("VariantProps", "type VariantProps")]
        if len(kept) == len(names):
            return match.group(0)
        if not kept:
            return ""
        return f"{match.group(1)}{{ {', '.join(kept)} }}{match.group(3)}{match.group(4)}"

    return _NAMED_IMPORT.sub(strip, text)


def _remap_icon_sources(text: str, target: Target) -> str:
    def remap(match: "re.Match[str]") -> str:
        source = match.group(3)
        if source not in ICON_PACKAGES:
            return match.group(0)
        mapped = icon_package_for(source, target.value) or source
        return f"{match.group(1)}{match.group(2)}{mapped}{match.group(2)}"

    return _IMPORT_SOURCE.sub(remap, text)


def clean_imports(text: str, target: Target, runes: bool = True) -> Tuple[str, int]:
    """
    Remove source-framework leftovers from generated text.

    Returns the new text and the number of rewrites applied.
    """
    target = Target.parse(target)
    original = text
    count = 0
    text, removed = _PRIMITIVE_NAMESPACE_IMPORT.subn("", text)
    count += removed
    text, removed = _PRIMITIVE_ALIAS.subn("", text)
    count += removed
    before = text
    text = _drop_unused_variant_props(text)
    count += int(text != before)
    before = text
    text = _remap_icon_sources(text, target)
    count += int(text != before)
    if target is Target.SVELTE:
        text, removed = re.subn(r"([\"'])@/lib/", r"\1$lib/", text)
        count += removed
        if not runes:
            text, removed = re.subn(r"\{\.\.\.\$\$props\}", "{...$$restProps}", text)
            count += removed
    else:
        text, removed = re.subn(r"v-bind=\"\$props\"", 'v-bind="$attrs"', text)
        count += removed
    if text != original:
        logger.debug(f"Import clean-up applied {count} rewrite(s)")
    return text, count


__all__ = [
    "CHILDFUL_TAGS",
    "RepairResult",
    "repair_markup",
    "clean_imports",
    "placeholder_for",
]
