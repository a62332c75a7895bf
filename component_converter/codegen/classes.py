"""
Class expression translation.

Source class expressions look like ``cn(buttonVariants({ variant, size, className }))``.
Targets need the variant arguments resolved against their prop namespace and
the passed-through class moved out of the variant call into the ``cn`` call.
"""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Tuple

from ..config import Target
from ..ir.metadata import ComponentMetadata

CLASS_MERGE_CALL = "cn"

_PROPS_ACCESS = re.compile(r"\bprops\.")
_BARE_CLASS_NAME = re.compile(r"(?<![\w.$])className\b")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_CLASS_ARGUMENTS = frozenset({"className", "class"})
_STRING_LITERAL = re.compile(r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'")


def _matching_paren(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, quote aware."""
    opener = text[open_index]
    closer = {"(": ")", "{": "}", "[": "]"}[opener]
    depth = 0
    quote: Optional[str] = None
    index = open_index
    while index < len(text):
        char = text[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "\"'`":
            quote = char
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1


def split_top_level(text: str, separator: str = ",") -> List[str]:
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    for index, char in enumerate(text):
        if quote:
            current.append(char)
            if char == quote and text[index - 1] != "\\":
                quote = None
            continue
        if char in "\"'`":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def _find_call(code: str, name: str, start: int = 0) -> int:
    match = re.compile(rf"(?<![\w.$]){re.escape(name)}\s*\(").search(code, start)
    return match.start() if match else -1


def _rewrite_variant_arguments(code: str, variant_name: str, namespace: str) -> Tuple[str, List[Tuple[int, int]]]:
    """
    Resolve the argument object of every ``variant_name(...)`` call.

    Returns the new text and the spans of the calls that dropped a class
    argument.
    """
    dropped: List[Tuple[int, int]] = []
    position = 0
    while True:
        start = _find_call(code, variant_name, position)
        if start < 0:
            break
        open_index = code.index("(", start)
        close_index = _matching_paren(code, open_index)
        if close_index < 0:
            break
        inner = code[open_index + 1 : close_index].strip()
        if not (inner.startswith("{") and inner.endswith("}")):
            position = close_index
            continue
        entries: List[str] = []
        had_class = False
        for entry in split_top_level(inner[1:-1]):
            key, _, value = entry.partition(":")
            key = key.strip()
            value = value.strip()
            if key in _CLASS_ARGUMENTS:
                had_class = True
                continue
            if not value:
                value = key
            if not _IDENTIFIER.match(value):
                entries.append(f"{key}: {value}")
            elif namespace or key != value:
                entries.append(f"{key}: {namespace}{value}")
            else:
                entries.append(key)
        replacement = f"{variant_name}({{ {', '.join(entries)} }})" if entries else f"{variant_name}()"
        code = code[:start] + replacement + code[close_index + 1 :]
        end = start + len(replacement)
        if had_class:
            dropped.append((start, end))
        position = end
    return code, dropped


def _append_class_argument(code: str, span: Tuple[int, int], class_ref: str) -> str:
    """Add ``class_ref`` to the ``cn(...)`` call enclosing ``span``, wrapping when none does."""
    start, end = span
    search = 0
    enclosing: Optional[Tuple[int, int]] = None
    while True:
        call = _find_call(code, CLASS_MERGE_CALL, search)
        if call < 0 or call > start:
            break
        open_index = code.index("(", call)
        close_index = _matching_paren(code, open_index)
        if close_index >= end:
            enclosing = (open_index, close_index)
        search = open_index + 1
    if enclosing is None:
        return f"{code[:start]}{CLASS_MERGE_CALL}({code[start:end]}, {class_ref}){code[end:]}"
    open_index, close_index = enclosing
    arguments = split_top_level(code[open_index + 1 : close_index])
    if class_ref in arguments:
        return code
    return f"{code[:close_index]}, {class_ref}{code[close_index:]}"


def translate_class_expression(code: str, target: Target, variant_name: Optional[str]) -> str:
    """
    Translate a source class expression for ``target``.

    Svelte resolves variant arguments to local names and keeps ``className``.
    Vue resolves them to ``props.x``, spells the class prop ``props.class``
    and moves string literals to single quotes where they allow it.
    """
    code = code.strip()
    if target is Target.VUE:
        code = code.replace("props.className", "className")
    code = _PROPS_ACCESS.sub("", code)

    namespace = "props." if target is Target.VUE else ""

    if variant_name:
        code, dropped = _rewrite_variant_arguments(code, variant_name, namespace)
        for span in reversed(dropped):
            code = _append_class_argument(code, span, "className")

    if target is Target.VUE:
        code = _BARE_CLASS_NAME.sub("props.class", code)
        code = attribute_safe_quotes(code)
    return code


def fallback_class_expression(metadata: ComponentMetadata) -> str:
    """
    Source-form class expression for a synthesized root element.

    The result goes through :func:`translate_class_expression` like any class
    binding the parser extracted.
    """
    config = metadata.variant
    if config is not None:
        arguments = ", ".join(config.axis_names)
        call = f"{config.name}({{ {arguments} }})" if arguments else f"{config.name}()"
        return f"{CLASS_MERGE_CALL}({call}, className)"
    if metadata.base_classes:
        return f"{CLASS_MERGE_CALL}(\"{metadata.base_classes}\", className)"
    if metadata.uses_class_merge:
        return f"{CLASS_MERGE_CALL}(className)"
    return "className"


def strip_props_access(code: str) -> str:
    return _PROPS_ACCESS.sub("", code)


def _single_quoted(match: "re.Match[str]") -> str:
    literal = match.group(0)
    if literal.startswith('"') and "'" not in literal:
        return "'" + literal[1:-1] + "'"
    return literal


def attribute_safe_quotes(code: str) -> str:
    """
    Spell an expression for a double-quoted template attribute. String
    literals move to single quotes unless they contain one; any double quote
    left over becomes ``&quot;``, which the template compiler decodes.
    """
    return _STRING_LITERAL.sub(_single_quoted, code).replace('"', "&quot;")


def rename_identifiers(code: str, renames: Mapping[str, str]) -> str:
    """Replace bare identifiers named in ``renames``; string literals and member accesses are left alone."""
    if not renames:
        return code
    names = "|".join(re.escape(name) for name in sorted(renames, key=len, reverse=True))
    pattern = re.compile(rf"(?<![\w$.])({names})(?![\w$])")

    def substitute(text: str) -> str:
        return pattern.sub(lambda match: renames[match.group(1)], text)

    parts: List[str] = []
    last = 0
    for literal in _STRING_LITERAL.finditer(code):
        parts.append(substitute(code[last : literal.start()]))
        parts.append(literal.group(0))
        last = literal.end()
    parts.append(substitute(code[last:]))
    return "".join(parts)


def uses_class_merge_call(code: str) -> bool:
    return _find_call(code, CLASS_MERGE_CALL) >= 0


__all__ = [
    "split_top_level",
    "translate_class_expression",
    "fallback_class_expression",
    "uses_class_merge_call",
    "rename_identifiers",
    "attribute_safe_quotes",
    "strip_props_access",
]
