"""
Read capabilities for include resolution.

A reader is any callable `read(path) -> Optional[str]`. Returning None or
raising FileNotFoundError means "not found"; any other OSError is a read
failure that aborts parsing regardless of include optionality.

A reader may also offer `relative_to(path)`, returning the reader used for
the includes of the file fetched from `path`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping, Optional

from .options import EngineOptions, IncludeMethod

logger = logging.getLogger(__name__)

ReadFn = Callable[[str], Optional[str]]


def null_reader(path: str) -> Optional[str]:
    """Reader that never finds anything."""
    return None


class MappingReader:
    """In-memory reader over a path -> text mapping."""

    def __init__(self, files: Mapping[str, str]):
        self.files = files

    def __call__(self, path: str) -> Optional[str]:
        return self.files.get(path)


class FileSystemReader:
    """
    Reads included files from disk.

    Relative paths are resolved against base_dir (or the process working
    directory when base_dir is None). With relative_includes set, the
    includes of a fetched file are resolved against that file's directory
    instead, see relative_to().
    """

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        encoding: str = "utf-8",
        relative_includes: bool = False,
    ):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.encoding = encoding
        self.relative_includes = relative_includes

    def resolve(self, path: str) -> Path:
        p = Path(path)
        if p.is_absolute() or self.base_dir is None:
            return p
        return self.base_dir / p

    def relative_to(self, path: str) -> "FileSystemReader":
        """
        Reader for the includes of the file at `path`.

        Returns self unless relative_includes is set.
        """
        if not self.relative_includes:
            return self
        return FileSystemReader(self.resolve(path).parent, self.encoding, relative_includes=True)

    def __call__(self, path: str) -> Optional[str]:
        resolved = self.resolve(path)
        logger.debug("Reading include %s from %s", path, resolved)
        return resolved.read_text(encoding=self.encoding)


def reader_for(options: EngineOptions, template_path: Optional[Path] = None) -> ReadFn:
    """
    Builds the filesystem reader described by the options.

    Args:
        options: Engine options (include_method, include_path, encoding)
        template_path: Path of the root template, if parsed from a file

    Returns:
        Read capability for include resolution
    """
    method = options.include_method

    if method is IncludeMethod.CWD:
        return FileSystemReader(Path.cwd(), options.encoding)

    if method is IncludeMethod.PATH:
        base = Path(options.include_path)
        if base.is_file():
            base = base.parent
        return FileSystemReader(base, options.encoding)

    # IncludeMethod.TEMPLATE
    if template_path is None:
        return null_reader
    return FileSystemReader(Path(template_path).parent, options.encoding, relative_includes=True)


__all__ = [
    "ReadFn",
    "null_reader",
    "MappingReader",
    "FileSystemReader",
    "reader_for",
]
