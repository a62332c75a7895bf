"""
Markup intermediate representation.

The IR is a closed sum type of five node kinds. Every consumer (the JSX
converter, both generators, the consolidation plugin) walks it with an
exhaustive ``isinstance`` chain that ends in :func:`unhandled_node`, so adding
a node kind without teaching every consumer about it fails loudly.

Node kinds:
    - Element: a native tag or a component reference with attributes
    - Text: a literal text run or an interpolated expression
    - Fragment: children without a wrapping element
    - ConditionalShow: one child rendered under a guard expression
    - Slot: the placeholder where caller-provided children render
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NoReturn, Optional, Union

from ..errors import IRInvariantError, UnhandledNodeError


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose content comes from attributes, never from children.
NO_SLOT_ELEMENTS = frozenset({"textarea", "select"})

SPREAD_KEY = "..."
REF_KEY = "ref"
CLASS_KEY = "class"


class BindingKind(str, Enum):
    """How a dynamic attribute is evaluated by the target."""

    EXPRESSION = "expression"
    EVENT = "event"
    SPREAD = "spread"


@dataclass
class Binding:
    code: str
    kind: BindingKind = BindingKind.EXPRESSION


def is_void_tag(tag: str) -> bool:
    return tag.lower() in VOID_ELEMENTS


@dataclass
class Element:
    """
    A markup element.

    ``tag`` is the native tag when the source referenced a mapped wrapped
    primitive; ``source_tag`` keeps the dotted primitive name in that case.
    Unmapped primitives keep their dotted name in ``tag``.
    """

    tag: str
    static_attributes: Dict[str, str] = field(default_factory=dict)
    bindings: Dict[str, Binding] = field(default_factory=dict)
    children: List["IRNode"] = field(default_factory=list)
    source_tag: Optional[str] = None

    def __post_init__(self) -> None:
        if is_void_tag(self.tag) and self.children:
            raise IRInvariantError(
                f"Void element <{self.tag}> cannot have children",
                hint="Drop the children before constructing the element.",
            )

    @property
    def is_void(self) -> bool:
        return is_void_tag(self.tag)

    @property
    def is_component_reference(self) -> bool:
        """True for capitalized or dotted tags that are not native elements."""
        return "." in self.tag or self.tag[:1].isupper()

    @property
    def is_wrapped_primitive(self) -> bool:
        return "." in self.tag

    @property
    def has_spread(self) -> bool:
        return any(b.kind is BindingKind.SPREAD for b in self.bindings.values())

    def class_source(self) -> str:
        """Return the static or bound class text, whichever is present."""
        binding = self.bindings.get(CLASS_KEY)
        if binding is not None:
            return binding.code
        return self.static_attributes.get(CLASS_KEY, "")

    def add_child(self, child: "IRNode") -> None:
        if self.is_void:
            raise IRInvariantError(f"Void element <{self.tag}> cannot have children")
        self.children.append(child)


@dataclass
class Text:
    text: str
    is_expression: bool = False


@dataclass
class Fragment:
    children: List["IRNode"] = field(default_factory=list)


@dataclass
class ConditionalShow:
    guard: str
    child: "IRNode"


@dataclass
class Slot:
    name: str = "children"


IRNode = Union[Element, Text, Fragment, ConditionalShow, Slot]


def unhandled_node(node: object) -> NoReturn:
    raise UnhandledNodeError(f"Unhandled IR node kind: {type(node).__name__}")


def child_nodes(node: IRNode) -> List[IRNode]:
    """Return the direct children of ``node`` in document order."""
    if isinstance(node, (Element, Fragment)):
        return list(node.children)
    if isinstance(node, ConditionalShow):
        return [node.child]
    if isinstance(node, (Text, Slot)):
        return []
    unhandled_node(node)


def walk(nodes: List[IRNode]) -> Iterator[IRNode]:
    """Depth-first pre-order traversal."""
    for node in nodes:
        yield node
        yield from walk(child_nodes(node))


def find_root_element(nodes: List[IRNode]) -> Optional[Element]:
    """The first element reached through fragments and guards."""
    for node in nodes:
        if isinstance(node, Element):
            return node
        if isinstance(node, Fragment):
            found = find_root_element(node.children)
            if found is not None:
                return found
        elif isinstance(node, ConditionalShow):
            found = find_root_element([node.child])
            if found is not None:
                return found
        elif isinstance(node, (Text, Slot)):
            continue
        else:
            unhandled_node(node)
    return None


def contains_slot(nodes: List[IRNode]) -> bool:
    return any(isinstance(node, Slot) for node in walk(nodes))


__all__ = [
    "VOID_ELEMENTS",
    "NO_SLOT_ELEMENTS",
    "SPREAD_KEY",
    "REF_KEY",
    "CLASS_KEY",
    "BindingKind",
    "Binding",
    "Element",
    "Text",
    "Fragment",
    "ConditionalShow",
    "Slot",
    "IRNode",
    "is_void_tag",
    "unhandled_node",
    "child_nodes",
    "walk",
    "find_root_element",
    "contains_slot",
]
