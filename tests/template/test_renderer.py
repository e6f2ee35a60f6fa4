"""
Tests for the renderer.
"""

import logging

import pytest

from tildetpl.errors import MissingRequiredValueError
from tildetpl.options import EngineOptions, ErrorLevel
from tildetpl.template.nodes import (
    IncludeResultNode,
    PatternNode,
    PatternSlotNode,
    Requirement,
    TextNode,
    VariableNode,
)
from tildetpl.template.renderer import TemplateRenderer, render_body


class TestTextAndVariables:

    def test_text_only(self):
        assert render_body((TextNode("a"), TextNode("b")), {}) == "ab"

    def test_bound_variable(self):
        body = (TextNode("Hi "), VariableNode("name"), TextNode("!"))
        assert render_body(body, {"name": "Bob"}) == "Hi Bob!"

    def test_value_is_not_rescanned(self):
        """Bound values are inserted literally, markers included."""
        body = (VariableNode("x"),)
        assert render_body(body, {"x": "{~ $y ~}"}) == "{~ $y ~}"

    def test_empty_string_counts_as_bound(self):
        body = (VariableNode("x", Requirement.REQUIRED, explicit=True),)
        assert render_body(body, {"x": ""}) == ""

    def test_required_unbound_raises(self):
        body = (TextNode("a"), VariableNode("x", Requirement.REQUIRED, explicit=True))

        with pytest.raises(MissingRequiredValueError) as exc:
            render_body(body, {})
        assert exc.value.name == "x"

    def test_optional_unbound_is_empty(self):
        body = (TextNode("["), VariableNode("x", explicit=True), TextNode("]"))
        assert render_body(body, {}) == "[]"

    def test_unmarked_unbound_is_empty_by_default(self):
        assert render_body((VariableNode("x"),), {}) == ""


class TestUnsetVariableLevel:

    def test_error_level_applies_to_unmarked(self):
        options = EngineOptions(unset_variable=ErrorLevel.ERROR)

        with pytest.raises(MissingRequiredValueError):
            render_body((VariableNode("x"),), {}, options=options)

    def test_error_level_ignores_explicit_optional(self):
        options = EngineOptions(unset_variable=ErrorLevel.ERROR)
        body = (VariableNode("x", Requirement.OPTIONAL, explicit=True),)

        assert render_body(body, {}, options=options) == ""

    def test_warning_level_logs(self, caplog):
        options = EngineOptions(unset_variable=ErrorLevel.WARNING)

        with caplog.at_level(logging.WARNING, logger="tildetpl"):
            out = render_body((VariableNode("who"),), {}, options=options)

        assert out == ""
        assert "who" in caplog.text


class TestSlotsAndIncludes:

    def test_slot_renders_attached_text(self):
        body = (TextNode("<ul>"), PatternSlotNode("item"), TextNode("</ul>"))
        assert render_body(body, {}, {"item": "<li>1</li>"}) == "<ul><li>1</li></ul>"

    def test_empty_slot(self):
        assert render_body((PatternSlotNode("item"),), {}) == ""

    def test_include_shares_bindings(self):
        body = (IncludeResultNode("p", (TextNode("by "), VariableNode("who"))),)
        assert render_body(body, {"who": "me"}) == "by me"

    def test_unresolved_pattern_node_is_rejected(self):
        with pytest.raises(TypeError):
            TemplateRenderer({}, {}).render((PatternNode("p"),))

    def test_inputs_are_not_mutated(self):
        values = {"a": "1"}
        slots = {"s": "x"}
        renderer = TemplateRenderer(values, slots)

        body = (VariableNode("a"), PatternSlotNode("s"))
        assert renderer.render(body) == renderer.render(body) == "1x"
        assert values == {"a": "1"}
        assert slots == {"s": "x"}
