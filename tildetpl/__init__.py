"""
Small templating language with variables, includes and repeatable patterns.

    {~ $name ~}  {~ $name! ~}  {~ $name? ~}
    {~ @include header.txt ~}  {~ @include? footer.txt ~}
    {~ @pattern row ~} ... {~ @end-pattern ~}  {~ @pattern-slot row ~}

Typical use:

    doc = tildetpl.parse(text, read=tildetpl.MappingReader(files))
    for item in items:
        row = doc.take_pattern("row")
        row.set("name", item.name)
        doc.attach("row", row.render())
    print(doc.render())
"""

from __future__ import annotations

from .document import Document, Pattern
from .engine import parse, parse_file
from .errors import (
    CircularIncludeError,
    DanglingEndPatternError,
    DuplicatePatternError,
    IncludeError,
    IncludeReadError,
    InvalidIdentifierError,
    MalformedIncludeError,
    MissingRequiredIncludeError,
    MissingRequiredValueError,
    NestedPatternError,
    ParseError,
    RenderError,
    TemplateError,
    TemplateLookupError,
    UnknownDirectiveError,
    UnknownPatternError,
    UnknownSlotError,
    UnterminatedPatternError,
)
from .options import EngineOptions, ErrorLevel, IncludeMethod, load_options
from .readers import FileSystemReader, MappingReader, null_reader

__all__ = [
    "parse",
    "parse_file",
    "Document",
    "Pattern",
    "EngineOptions",
    "ErrorLevel",
    "IncludeMethod",
    "load_options",
    "FileSystemReader",
    "MappingReader",
    "null_reader",
    "TemplateError",
    "ParseError",
    "UnterminatedPatternError",
    "DanglingEndPatternError",
    "DuplicatePatternError",
    "NestedPatternError",
    "InvalidIdentifierError",
    "UnknownDirectiveError",
    "MalformedIncludeError",
    "IncludeError",
    "MissingRequiredIncludeError",
    "CircularIncludeError",
    "IncludeReadError",
    "RenderError",
    "MissingRequiredValueError",
    "TemplateLookupError",
    "UnknownPatternError",
    "UnknownSlotError",
]
