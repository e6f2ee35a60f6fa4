"""
AST nodes.

Defines the immutable node hierarchy of a parsed template. IncludeNode and
PatternNode only exist between parsing and include resolution; a tree
handed to a Document contains none of them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


class Requirement(enum.Enum):
    """Whether a variable must be bound at render time."""
    OPTIONAL = "optional"
    REQUIRED = "required"


@dataclass(frozen=True)
class TemplateNode:
    """Base class for all template AST nodes."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Literal content.

    Emitted into the output as is.
    """
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """
    Substitution point {~ $name ~}.

    `explicit` is False when the directive carried neither '!' nor '?', so
    the engine options may decide how an unset value is reported.
    """
    name: str
    requirement: Requirement = Requirement.OPTIONAL
    explicit: bool = False

    @property
    def required(self) -> bool:
        return self.requirement is Requirement.REQUIRED


@dataclass(frozen=True)
class PatternSlotNode(TemplateNode):
    """
    Insertion point for externally rendered pattern output.

    Left in place of every pattern block and of every @pattern-slot
    directive.
    """
    name: str


@dataclass(frozen=True)
class IncludeResultNode(TemplateNode):
    """Spliced subtree of a resolved @include."""
    path: str
    children: Tuple[TemplateNode, ...] = ()


@dataclass(frozen=True)
class IncludeNode(TemplateNode):
    """Unresolved @include directive."""
    path: str
    optional: bool = False
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass(frozen=True)
class PatternNode(TemplateNode):
    """
    Pattern block @pattern name ... @end-pattern.

    Also serves as the registry entry of a parsed document.
    """
    name: str
    body: Tuple[TemplateNode, ...] = ()
    required: bool = False
    line: Optional[int] = None
    column: Optional[int] = None
    source: Optional[str] = None


# Immutable node sequence
TemplateBody = Tuple[TemplateNode, ...]


def walk(nodes: TemplateBody) -> Iterator[TemplateNode]:
    """Depth-first traversal that descends into includes and pattern bodies."""
    for node in nodes:
        yield node
        if isinstance(node, IncludeResultNode):
            yield from walk(node.children)
        elif isinstance(node, PatternNode):
            yield from walk(node.body)


__all__ = [
    "Requirement",
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "PatternSlotNode",
    "IncludeResultNode",
    "IncludeNode",
    "PatternNode",
    "TemplateBody",
    "walk",
]
