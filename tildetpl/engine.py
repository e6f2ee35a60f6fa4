"""
Engine boundary: parse template text (or a template file) into a Document.

The engine performs no I/O of its own besides calling the read capability
for includes; parse_file() additionally reads the root template.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .document import Document
from .errors import IncludeReadError, MissingRequiredIncludeError
from .options import DEFAULT_OPTIONS, EngineOptions
from .readers import ReadFn, null_reader, reader_for
from .template.parser import parse_template
from .template.resolver import IncludeResolver

logger = logging.getLogger(__name__)


def parse(
    raw_text: str,
    read: Optional[ReadFn] = None,
    options: Optional[EngineOptions] = None,
    source: Optional[str] = None,
) -> Document:
    """
    Parses template text into a Document.

    Args:
        raw_text: Template source
        read: Read capability for includes; by default nothing is found
        options: Engine options
        source: Name of the template, used in error messages and as the
            first element of the include chain

    Returns:
        Document with all includes spliced in

    Raises:
        ParseError: On grammar errors and include failures
    """
    options = options or DEFAULT_OPTIONS
    nodes = parse_template(raw_text, source=source)
    resolved = IncludeResolver(read or null_reader, options).resolve(nodes, source=source)
    logger.debug(
        "Parsed %s: %d top-level nodes, patterns: %s",
        source or "<string>", len(resolved.body), ", ".join(resolved.patterns) or "-",
    )
    return Document(resolved, options)


def parse_file(
    path: Union[str, Path],
    options: Optional[EngineOptions] = None,
    read: Optional[ReadFn] = None,
) -> Document:
    """
    Reads a template file and parses it.

    Includes are read through `read` if given, otherwise through the
    filesystem reader selected by options.include_method.

    Raises:
        MissingRequiredIncludeError: If the template file does not exist
        IncludeReadError: If the template file cannot be read
        ParseError: On grammar errors and include failures
    """
    options = options or DEFAULT_OPTIONS
    path = Path(path)

    try:
        raw_text = path.read_text(encoding=options.encoding)
    except FileNotFoundError:
        raise MissingRequiredIncludeError(path=str(path)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise IncludeReadError(path=str(path), cause=e) from e

    return parse(
        raw_text,
        read=read or reader_for(options, template_path=path),
        options=options,
        source=str(path),
    )


__all__ = ["parse", "parse_file"]
