"""
Renderer (compile step).

Walks a resolved body once and produces the output text from a binding
table and the pattern output attached to slots.
"""

from __future__ import annotations

import logging
from typing import List, Mapping

from .nodes import (
    IncludeResultNode,
    PatternSlotNode,
    TemplateBody,
    TemplateNode,
    TextNode,
    VariableNode,
)
from ..errors import MissingRequiredValueError
from ..options import DEFAULT_OPTIONS, EngineOptions, ErrorLevel

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Single-pass renderer.

    Rendering never mutates its inputs: the first missing required value
    aborts with MissingRequiredValueError and nothing is returned.
    """

    def __init__(
        self,
        values: Mapping[str, str],
        slots: Mapping[str, str],
        options: EngineOptions = DEFAULT_OPTIONS,
    ):
        self.values = values
        self.slots = slots
        self.options = options

    def render(self, body: TemplateBody) -> str:
        out: List[str] = []
        self._render_nodes(body, out)
        return "".join(out)

    def _render_nodes(self, nodes: TemplateBody, out: List[str]) -> None:
        for node in nodes:
            self._render_node(node, out)

    def _render_node(self, node: TemplateNode, out: List[str]) -> None:
        if isinstance(node, TextNode):
            out.append(node.text)
        elif isinstance(node, VariableNode):
            self._render_variable(node, out)
        elif isinstance(node, PatternSlotNode):
            out.append(self.slots.get(node.name, ""))
        elif isinstance(node, IncludeResultNode):
            # Includes share the bindings of the including document
            self._render_nodes(node.children, out)
        else:
            raise TypeError(f"Cannot render node of type {type(node).__name__}")

    def _render_variable(self, node: VariableNode, out: List[str]) -> None:
        value = self.values.get(node.name)
        if value is not None:
            out.append(value)
            return

        if node.required:
            raise MissingRequiredValueError(name=node.name)

        if node.explicit:
            return

        level = self.options.unset_variable
        if level is ErrorLevel.ERROR:
            raise MissingRequiredValueError(name=node.name)
        if level is ErrorLevel.WARNING:
            logger.warning("Variable '%s' is not set, rendering it empty", node.name)


def render_body(
    body: TemplateBody,
    values: Mapping[str, str],
    slots: Mapping[str, str] | None = None,
    options: EngineOptions = DEFAULT_OPTIONS,
) -> str:
    """Convenience wrapper around TemplateRenderer."""
    return TemplateRenderer(values, slots or {}, options).render(body)


__all__ = ["TemplateRenderer", "render_body"]
