"""
Document model.

A Document owns a resolved, immutable node tree plus its own binding
table and slot attachments. Clones share the tree and the pattern
registry but never the bindings, so one parsed template can be rendered
for many data items without re-parsing.

Patterns extracted with take_pattern() are independent instances with
the same set/attach/render API; their output is fed back into the parent
through attach().
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional

from .errors import UnknownPatternError, UnknownSlotError
from .options import DEFAULT_OPTIONS, EngineOptions
from .template.nodes import PatternNode, PatternSlotNode, TemplateBody, VariableNode, walk
from .template.renderer import TemplateRenderer
from .template.resolver import ResolvedTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateShape:
    """Body of a template together with the names it references."""
    body: TemplateBody
    variable_names: FrozenSet[str]
    slot_names: FrozenSet[str]

    @classmethod
    def of(cls, body: TemplateBody) -> "TemplateShape":
        variables = set()
        slots = set()
        for node in walk(body):
            if isinstance(node, VariableNode):
                variables.add(node.name)
            elif isinstance(node, PatternSlotNode):
                slots.add(node.name)
        return cls(body=body, variable_names=frozenset(variables), slot_names=frozenset(slots))


class TemplateInstance:
    """
    Bindable, renderable template instance.

    Common base of Document and Pattern. The shape is shared and never
    mutated; only the binding table and slot attachments change.
    """

    def __init__(self, shape: TemplateShape, options: EngineOptions = DEFAULT_OPTIONS):
        self._shape = shape
        self.options = options
        self._values: Dict[str, str] = {}
        self._slots: Dict[str, str] = {}

    # -------------------------------------------------------------- bindings

    def set(self, name: str, value: str) -> None:
        """
        Binds a variable, replacing any previous value.

        Names that do not occur in the template are accepted.
        """
        self._values[name] = value if isinstance(value, str) else str(value)

    def update(self, values: Mapping[str, str]) -> None:
        """Binds several variables at once."""
        for name, value in values.items():
            self.set(name, value)

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    @property
    def variables(self) -> Dict[str, str]:
        """Copy of the binding table."""
        return dict(self._values)

    def clear_variables(self) -> None:
        """Drops all bindings and slot attachments, as if freshly parsed."""
        self._values.clear()
        self._slots.clear()

    # ----------------------------------------------------------------- slots

    def attach(self, slot_name: str, text: str) -> None:
        """
        Appends rendered pattern output to a slot.

        Raises:
            UnknownSlotError: If the template has no slot with this name
        """
        if slot_name not in self._shape.slot_names:
            raise UnknownSlotError(name=slot_name)
        self._slots[slot_name] = self._slots.get(slot_name, "") + text

    def attached(self, slot_name: str) -> str:
        """Text attached to a slot so far."""
        return self._slots.get(slot_name, "")

    # ------------------------------------------------------------- structure

    @property
    def body(self) -> TemplateBody:
        return self._shape.body

    def variable_names(self) -> FrozenSet[str]:
        """Names of all variables referenced by the template."""
        return self._shape.variable_names

    def slot_names(self) -> FrozenSet[str]:
        return self._shape.slot_names

    # ------------------------------------------------------------- rendering

    def render(self) -> str:
        """
        Renders the template with the current bindings.

        Raises:
            MissingRequiredValueError: If a required variable is unbound
        """
        return TemplateRenderer(self._values, self._slots, self.options).render(self._shape.body)

    def clone(self):
        """
        Returns an independent instance.

        The tree is shared; the binding table and slot attachments are copied.
        """
        twin = copy.copy(self)
        twin._values = dict(self._values)
        twin._slots = dict(self._slots)
        return twin


class Pattern(TemplateInstance):
    """Independent instance of a named pattern block."""

    def __init__(
        self,
        definition: PatternNode,
        shape: Optional[TemplateShape] = None,
        options: EngineOptions = DEFAULT_OPTIONS,
    ):
        super().__init__(shape or TemplateShape.of(definition.body), options)
        self.definition = definition

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def required(self) -> bool:
        return self.definition.required

    def __repr__(self) -> str:
        return f"Pattern({self.name!r}, required={self.required}, variables={sorted(self._values)})"


class Document(TemplateInstance):
    """
    Parsed template with its pattern registry.

    Build one with tildetpl.parse() or tildetpl.parse_file().
    """

    def __init__(self, resolved: ResolvedTemplate, options: EngineOptions = DEFAULT_OPTIONS):
        super().__init__(TemplateShape.of(resolved.body), options)
        self._resolved = resolved
        # Computed once, shared by every clone and every extracted pattern
        self._pattern_shapes: Dict[str, TemplateShape] = {
            name: TemplateShape.of(node.body) for name, node in resolved.patterns.items()
        }

    @property
    def source(self) -> Optional[str]:
        return self._resolved.source

    def pattern_names(self) -> List[str]:
        """Registered pattern names in definition order."""
        return list(self._resolved.patterns)

    def has_pattern(self, name: str) -> bool:
        return name in self._resolved.patterns

    def variable_names(self) -> FrozenSet[str]:
        """Names of all variables referenced by the body and by every pattern."""
        names = set(self._shape.variable_names)
        for shape in self._pattern_shapes.values():
            names |= shape.variable_names
        return frozenset(names)

    def take_pattern(self, name: str) -> Pattern:
        """
        Returns a fresh, unbound instance of a registered pattern.

        The registry is untouched, so the same pattern can be taken any
        number of times.

        Raises:
            UnknownPatternError: If no pattern with this name was parsed
        """
        definition = self._resolved.patterns.get(name)
        if definition is None:
            raise UnknownPatternError(name=name, available=self.pattern_names())
        return Pattern(definition, self._pattern_shapes[name], self.options)

    def missing_required_patterns(self) -> List[str]:
        """
        Names of patterns declared required ('!') with nothing attached.

        Rendering does not check this; workflows that need the guarantee
        call it before render().
        """
        return [
            name for name, node in self._resolved.patterns.items()
            if node.required and name not in self._slots
        ]

    def clone(self) -> "Document":
        logger.debug("Cloning document %s", self.source or "<string>")
        return super().clone()

    def __repr__(self) -> str:
        return (
            f"Document(source={self.source!r}, patterns={self.pattern_names()}, "
            f"variables={sorted(self._values)})"
        )


__all__ = ["TemplateShape", "TemplateInstance", "Pattern", "Document"]
