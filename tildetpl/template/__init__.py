"""
Template pipeline: scanner, directive parser, include resolver and renderer.
"""

from __future__ import annotations

from .lexer import TemplateLexer, tokenize_template
from .nodes import (
    IncludeResultNode,
    PatternNode,
    PatternSlotNode,
    Requirement,
    TemplateBody,
    TemplateNode,
    TextNode,
    VariableNode,
)
from .parser import TemplateParser, parse_template
from .renderer import TemplateRenderer
from .resolver import IncludeResolver, ResolvedTemplate
from .tokens import Token, TokenType

__all__ = [
    "TemplateLexer",
    "tokenize_template",
    "Token",
    "TokenType",
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "PatternSlotNode",
    "IncludeResultNode",
    "PatternNode",
    "Requirement",
    "TemplateBody",
    "TemplateParser",
    "parse_template",
    "IncludeResolver",
    "ResolvedTemplate",
    "TemplateRenderer",
]
