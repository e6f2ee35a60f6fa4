"""
Include resolver.

Runs after parsing: fetches every @include through the read capability,
parses the fetched text and splices the resulting subtree in place of the
directive. Afterwards, pattern blocks of the whole tree (including those
defined in included files) are hoisted into a single registry and replaced
by slots.

Handles:
- Cycle detection via the chain of paths being resolved
- Optional includes and the unknown_include error level
- Pattern name collisions across included files
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .nodes import (
    IncludeNode,
    IncludeResultNode,
    PatternNode,
    PatternSlotNode,
    TemplateBody,
    TemplateNode,
)
from .parser import parse_template
from ..errors import (
    CircularIncludeError,
    DuplicatePatternError,
    IncludeReadError,
    MissingRequiredIncludeError,
    NestedPatternError,
)
from ..options import DEFAULT_OPTIONS, EngineOptions, ErrorLevel
from ..readers import ReadFn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTemplate:
    """
    Fully resolved template.

    The body contains no IncludeNode and no PatternNode; every pattern lives
    in the registry and is represented in the body by a PatternSlotNode.
    """
    body: TemplateBody
    patterns: Dict[str, PatternNode] = field(default_factory=dict)
    source: Optional[str] = None


class IncludeResolver:
    """
    Resolves includes of a parsed node sequence.

    One resolver instance handles one root document; the resolution stack
    holds the chain of include paths currently being expanded.
    """

    def __init__(self, read: ReadFn, options: EngineOptions = DEFAULT_OPTIONS):
        """
        Args:
            read: Read capability, see tildetpl.readers
            options: Engine options (unknown_include level)
        """
        self.read = read
        self.options = options
        self._resolution_stack: List[str] = []
        # Reader for each level of the include chain
        self._readers: List[ReadFn] = [read]

    def resolve(self, nodes: TemplateBody, source: Optional[str] = None) -> ResolvedTemplate:
        """
        Resolves all includes and collects patterns.

        Args:
            nodes: Parser output for the root document
            source: Path of the root document, seeds the include chain

        Returns:
            ResolvedTemplate with spliced includes and the pattern registry

        Raises:
            IncludeError: On missing required includes, cycles or read failures
            DuplicatePatternError: On pattern name collisions
            NestedPatternError: When an include inside a pattern defines patterns
        """
        self._resolution_stack = [source] if source else []
        self._readers = [self.read]
        try:
            body = self._resolve_nodes(nodes, enclosing=None)
        finally:
            self._resolution_stack = []
            self._readers = [self.read]

        patterns: Dict[str, PatternNode] = {}
        body = _hoist_patterns(body, patterns)
        return ResolvedTemplate(body=body, patterns=patterns, source=source)

    def _resolve_nodes(self, nodes: TemplateBody, enclosing: Optional[str]) -> TemplateBody:
        return tuple(self._resolve_node(node, enclosing) for node in nodes)

    def _resolve_node(self, node: TemplateNode, enclosing: Optional[str]) -> TemplateNode:
        if isinstance(node, IncludeNode):
            return self._resolve_include(node, enclosing)

        if isinstance(node, PatternNode):
            return PatternNode(
                name=node.name,
                body=self._resolve_nodes(node.body, enclosing=node.name),
                required=node.required,
                line=node.line,
                column=node.column,
                source=node.source,
            )

        return node

    def _resolve_include(self, node: IncludeNode, enclosing: Optional[str]) -> IncludeResultNode:
        path = node.path

        if path in self._resolution_stack:
            raise CircularIncludeError(chain=self._resolution_stack + [path])

        text = self._read(node)
        if text is None:
            return IncludeResultNode(path=path, children=())

        children = parse_template(text, source=path)

        # Patterns cannot be brought into another pattern's body
        if enclosing is not None:
            for child in children:
                if isinstance(child, PatternNode):
                    raise NestedPatternError(
                        name=child.name,
                        enclosing=enclosing,
                        line=child.line,
                        column=child.column,
                        source=path,
                    )

        logger.debug("Splicing include %s (chain: %s)", path, " -> ".join(self._resolution_stack))

        read = self._readers[-1]
        relative_to = getattr(read, "relative_to", None)
        self._readers.append(relative_to(path) if relative_to is not None else read)
        self._resolution_stack.append(path)
        try:
            resolved = self._resolve_nodes(children, enclosing)
        finally:
            self._resolution_stack.pop()
            self._readers.pop()

        return IncludeResultNode(path=path, children=resolved)

    def _read(self, node: IncludeNode) -> Optional[str]:
        """
        Fetches include text.

        Returns None when the include is not found and that is acceptable.
        """
        current = self._resolution_stack[-1] if self._resolution_stack else None

        try:
            text = self._readers[-1](node.path)
        except FileNotFoundError:
            text = None
        except (OSError, UnicodeDecodeError) as e:
            raise IncludeReadError(
                path=node.path, cause=e,
                line=node.line, column=node.column, source=current,
            ) from e

        if text is not None:
            return text

        if node.optional:
            logger.debug("Optional include %s not found, skipping", node.path)
            return None

        level = self.options.unknown_include
        if level is ErrorLevel.ERROR:
            raise MissingRequiredIncludeError(
                path=node.path,
                chain=list(self._resolution_stack),
                line=node.line, column=node.column, source=current,
            )
        if level is ErrorLevel.WARNING:
            logger.warning("Include '%s' not found, skipping", node.path)
        return None


def _hoist_patterns(nodes: TemplateBody, registry: Dict[str, PatternNode]) -> TemplateBody:
    """Moves pattern blocks into the registry, leaving slots behind."""
    result: List[TemplateNode] = []

    for node in nodes:
        if isinstance(node, PatternNode):
            if node.name in registry:
                raise DuplicatePatternError(
                    name=node.name, line=node.line, column=node.column, source=node.source
                )
            logger.debug("Registered pattern %s", node.name)
            registry[node.name] = node
            result.append(PatternSlotNode(name=node.name))
        elif isinstance(node, IncludeResultNode):
            result.append(IncludeResultNode(
                path=node.path, children=_hoist_patterns(node.children, registry)
            ))
        else:
            result.append(node)

    return tuple(result)


def resolve_template(
    nodes: TemplateBody,
    read: ReadFn,
    options: EngineOptions = DEFAULT_OPTIONS,
    source: Optional[str] = None,
) -> ResolvedTemplate:
    """Convenience wrapper around IncludeResolver."""
    return IncludeResolver(read, options).resolve(nodes, source=source)


__all__ = ["ResolvedTemplate", "IncludeResolver", "resolve_template"]
